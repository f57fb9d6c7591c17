from typing import List

from fastapi import APIRouter, Depends, status

from tourbook.api import get_tourist_service, require_admin
from tourbook.models.schemas import (
    MessageResponse,
    TouristEnvelope,
    TouristSchema,
    TouristSignupRequest,
    TouristUpdateRequest,
)
from tourbook.services.tourist_service import TouristService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/admin", response_model=List[TouristSchema])
def list_tourists(service: TouristService = Depends(get_tourist_service)) -> List[TouristSchema]:
    return [TouristSchema.from_domain(t) for t in service.list_tourists()]


@router.post("/admin", response_model=TouristEnvelope, status_code=status.HTTP_201_CREATED)
def create_tourist(
    request: TouristSignupRequest, service: TouristService = Depends(get_tourist_service)
) -> TouristEnvelope:
    tourist = service.register(request)
    return TouristEnvelope(message="Tourist created", tourist=TouristSchema.from_domain(tourist))


@router.put("/admin/{tourist_id}", response_model=TouristEnvelope)
def update_tourist(
    tourist_id: str,
    request: TouristUpdateRequest,
    service: TouristService = Depends(get_tourist_service),
) -> TouristEnvelope:
    tourist = service.update(tourist_id, request)
    return TouristEnvelope(message="Tourist updated", tourist=TouristSchema.from_domain(tourist))


@router.delete("/admin/{tourist_id}", response_model=MessageResponse)
def delete_tourist(
    tourist_id: str, service: TouristService = Depends(get_tourist_service)
) -> MessageResponse:
    service.delete(tourist_id)
    return MessageResponse(message="Tourist deleted")
