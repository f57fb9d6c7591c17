from typing import List

from fastapi import APIRouter, Depends, status

from tourbook.api import get_contact_service, require_admin
from tourbook.models.schemas import ContactRequest, ContactSchema, MessageResponse
from tourbook.services.contact_service import ContactService

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def submit_contact(
    request: ContactRequest, service: ContactService = Depends(get_contact_service)
) -> MessageResponse:
    service.submit(request)
    return MessageResponse(message="Message received")


@router.get("/admin", response_model=List[ContactSchema], dependencies=[Depends(require_admin)])
def list_contacts(service: ContactService = Depends(get_contact_service)) -> List[ContactSchema]:
    return [ContactSchema.from_domain(c) for c in service.list_contacts()]


@router.delete("/admin/{contact_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_contact(
    contact_id: str, service: ContactService = Depends(get_contact_service)
) -> MessageResponse:
    service.delete(contact_id)
    return MessageResponse(message="Contact message deleted")
