import logging
from datetime import datetime, timezone
from typing import List

from tourbook.core.errors import NotFoundError
from tourbook.models.domain import ContactSubmission
from tourbook.models.schemas import ContactRequest
from tourbook.services.ids import require_id
from tourbook.storage.repository import Repository, new_id

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, repository: Repository):
        self.repository = repository

    def submit(self, request: ContactRequest) -> ContactSubmission:
        contact = ContactSubmission(
            id=new_id(),
            name=request.name.strip(),
            email=request.email.strip(),
            message=request.message.strip(),
            phone=request.phone,
            created_at=datetime.now(timezone.utc),
        )
        self.repository.add_contact(contact)
        logger.info("Contact submission saved: %s", contact.id)
        return contact

    def list_contacts(self) -> List[ContactSubmission]:
        return self.repository.list_contacts()

    def delete(self, contact_id: str) -> None:
        require_id(contact_id, "Contact Message")
        if not self.repository.delete_contact(contact_id):
            raise NotFoundError("Contact message not found")
        logger.info("Contact submission deleted: %s", contact_id)
