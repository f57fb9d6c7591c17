import logging
from datetime import datetime, timezone
from typing import List

from tourbook.core.errors import NotFoundError, ValidationError
from tourbook.core.security import hash_password
from tourbook.models.domain import Provider
from tourbook.models.schemas import ProviderSignupRequest, ProviderUpdateRequest
from tourbook.services.ids import require_id
from tourbook.storage.repository import Repository, new_id

logger = logging.getLogger(__name__)


class ProviderService:
    """
    Provider onboarding and moderation. Unapproved providers are invisible to
    the public lookups and cannot take tourist bookings.
    """

    def __init__(self, repository: Repository):
        self.repository = repository

    def register(self, request: ProviderSignupRequest, approved: bool = False) -> Provider:
        email = request.email.strip().lower()
        if self.repository.find_provider_by_email(email):
            raise ValidationError("Email already exists")
        provider = Provider(
            id=new_id(),
            service_name=request.service_name.strip(),
            full_name=request.full_name.strip(),
            email=email,
            contact=request.contact.strip(),
            category=request.category,
            location=request.location.strip(),
            price=float(request.price),
            description=request.description.strip(),
            password_hash=hash_password(request.password),
            approved=approved,
            profile_picture=request.profile_picture,
            photos=list(request.photos),
            created_at=datetime.now(timezone.utc),
        )
        self.repository.add_provider(provider)
        logger.info("Provider registered: %s (approved=%s)", provider.id, approved)
        return provider

    def list_public(self, limit: int = 0) -> List[Provider]:
        return self.repository.list_providers(approved=True, limit=limit)

    def get_public(self, provider_id: str) -> Provider:
        provider = self.get(provider_id)
        if not provider.approved:
            raise NotFoundError("Provider not found")
        return provider

    def get(self, provider_id: str) -> Provider:
        require_id(provider_id, "Provider")
        provider = self.repository.get_provider(provider_id)
        if provider is None:
            raise NotFoundError("Provider not found")
        return provider

    def list_all(self) -> List[Provider]:
        return self.repository.list_providers()

    def list_pending(self) -> List[Provider]:
        return self.repository.list_providers(approved=False)

    def update(self, provider_id: str, request: ProviderUpdateRequest) -> Provider:
        require_id(provider_id, "Provider")
        changes = request.model_dump(exclude_none=True)
        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()
            existing = self.repository.find_provider_by_email(changes["email"])
            if existing and existing.id != provider_id:
                raise ValidationError("Email already exists")
        if "password" in changes:
            changes["password_hash"] = hash_password(changes.pop("password"))
        provider = self.repository.update_provider(provider_id, changes)
        if provider is None:
            raise NotFoundError("Provider not found")
        logger.info("Provider updated: %s", provider_id)
        return provider

    def approve(self, provider_id: str) -> Provider:
        require_id(provider_id, "Provider")
        provider = self.repository.update_provider(provider_id, {"approved": True})
        if provider is None:
            raise NotFoundError("Provider not found")
        logger.info("Provider approved: %s", provider_id)
        return provider

    def delete(self, provider_id: str) -> None:
        require_id(provider_id, "Provider")
        if not self.repository.delete_provider(provider_id):
            raise NotFoundError("Provider not found")
        logger.info("Provider deleted: %s", provider_id)
