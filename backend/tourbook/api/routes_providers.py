from typing import List

from fastapi import APIRouter, Depends, Query, status

from tourbook.api import get_provider_service, require_admin
from tourbook.models.schemas import (
    MessageResponse,
    ProviderEnvelope,
    ProviderSchema,
    ProviderSignupRequest,
    ProviderUpdateRequest,
)
from tourbook.services.provider_service import ProviderService

router = APIRouter()


@router.get("", response_model=List[ProviderSchema])
def list_providers(
    limit: int = Query(default=0, ge=0),
    service: ProviderService = Depends(get_provider_service),
) -> List[ProviderSchema]:
    return [ProviderSchema.from_domain(p) for p in service.list_public(limit=limit)]


# admin routes are declared before /{provider_id} so "admin" is not taken for an id


@router.get("/admin", response_model=List[ProviderSchema], dependencies=[Depends(require_admin)])
def list_all_providers(service: ProviderService = Depends(get_provider_service)) -> List[ProviderSchema]:
    return [ProviderSchema.from_domain(p) for p in service.list_all()]


@router.get("/admin/pending", response_model=List[ProviderSchema], dependencies=[Depends(require_admin)])
def list_pending_providers(
    service: ProviderService = Depends(get_provider_service),
) -> List[ProviderSchema]:
    return [ProviderSchema.from_domain(p) for p in service.list_pending()]


@router.post(
    "/admin",
    response_model=ProviderEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_provider(
    request: ProviderSignupRequest, service: ProviderService = Depends(get_provider_service)
) -> ProviderEnvelope:
    provider = service.register(request, approved=True)
    return ProviderEnvelope(message="Provider created", provider=ProviderSchema.from_domain(provider))


@router.put("/admin/{provider_id}/approve", response_model=ProviderEnvelope, dependencies=[Depends(require_admin)])
def approve_provider(
    provider_id: str, service: ProviderService = Depends(get_provider_service)
) -> ProviderEnvelope:
    provider = service.approve(provider_id)
    return ProviderEnvelope(message="Provider approved", provider=ProviderSchema.from_domain(provider))


@router.put("/admin/{provider_id}", response_model=ProviderEnvelope, dependencies=[Depends(require_admin)])
def update_provider(
    provider_id: str,
    request: ProviderUpdateRequest,
    service: ProviderService = Depends(get_provider_service),
) -> ProviderEnvelope:
    provider = service.update(provider_id, request)
    return ProviderEnvelope(message="Provider updated", provider=ProviderSchema.from_domain(provider))


@router.delete("/admin/{provider_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_provider(
    provider_id: str, service: ProviderService = Depends(get_provider_service)
) -> MessageResponse:
    service.delete(provider_id)
    return MessageResponse(message="Provider deleted")


@router.get("/{provider_id}", response_model=ProviderSchema)
def get_provider(
    provider_id: str, service: ProviderService = Depends(get_provider_service)
) -> ProviderSchema:
    return ProviderSchema.from_domain(service.get_public(provider_id))
