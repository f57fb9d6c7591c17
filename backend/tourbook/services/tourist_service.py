import logging
from datetime import datetime, timezone
from typing import List

from tourbook.core.errors import NotFoundError, ValidationError
from tourbook.core.security import hash_password
from tourbook.models.domain import Tourist
from tourbook.models.schemas import TouristSignupRequest, TouristUpdateRequest
from tourbook.services.ids import require_id
from tourbook.storage.repository import Repository, new_id

logger = logging.getLogger(__name__)


class TouristService:
    def __init__(self, repository: Repository):
        self.repository = repository

    def register(self, request: TouristSignupRequest) -> Tourist:
        email = request.email.strip().lower()
        if self.repository.find_tourist_by_email(email):
            raise ValidationError("Email already exists")
        tourist = Tourist(
            id=new_id(),
            full_name=request.full_name.strip(),
            email=email,
            password_hash=hash_password(request.password),
            country=request.country.strip(),
            created_at=datetime.now(timezone.utc),
        )
        self.repository.add_tourist(tourist)
        logger.info("Tourist registered: %s", tourist.id)
        return tourist

    def get(self, tourist_id: str) -> Tourist:
        require_id(tourist_id, "Tourist")
        tourist = self.repository.get_tourist(tourist_id)
        if tourist is None:
            raise NotFoundError("Tourist not found")
        return tourist

    def list_tourists(self) -> List[Tourist]:
        return self.repository.list_tourists()

    def update(self, tourist_id: str, request: TouristUpdateRequest) -> Tourist:
        require_id(tourist_id, "Tourist")
        changes = request.model_dump(exclude_none=True)
        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()
            existing = self.repository.find_tourist_by_email(changes["email"])
            if existing and existing.id != tourist_id:
                raise ValidationError("Email already exists")
        if "password" in changes:
            changes["password_hash"] = hash_password(changes.pop("password"))
        tourist = self.repository.update_tourist(tourist_id, changes)
        if tourist is None:
            raise NotFoundError("Tourist not found")
        logger.info("Tourist updated: %s", tourist_id)
        return tourist

    def delete(self, tourist_id: str) -> None:
        require_id(tourist_id, "Tourist")
        if not self.repository.delete_tourist(tourist_id):
            raise NotFoundError("Tourist not found")
        logger.info("Tourist deleted: %s", tourist_id)
