import logging

from tourbook.core.errors import AuthenticationError, AuthorizationError, ValidationError
from tourbook.core.security import (
    Principal,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from tourbook.models.domain import Admin, Role
from tourbook.models.schemas import (
    LoginRequest,
    ProviderSignupRequest,
    TokenResponse,
    TouristSignupRequest,
)
from tourbook.services.provider_service import ProviderService
from tourbook.services.tourist_service import TouristService
from tourbook.storage.repository import Repository, new_id

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, repository: Repository, jwt_secret: str, token_minutes: int = 60):
        self.repository = repository
        self.jwt_secret = jwt_secret
        self.token_minutes = token_minutes

    def issue_token(self, subject: str, role: Role) -> str:
        return create_access_token(subject, role, self.jwt_secret, minutes=self.token_minutes)

    def authenticate(self, token: str) -> Principal:
        return decode_token(token, self.jwt_secret)

    def login(self, request: LoginRequest) -> TokenResponse:
        identifier = request.email.strip()
        if request.role == Role.admin:
            account = self.repository.find_admin_by_username(identifier)
        elif request.role == Role.provider:
            account = self.repository.find_provider_by_email(identifier.lower())
        else:
            account = self.repository.find_tourist_by_email(identifier.lower())

        if account is None or not verify_password(request.password, account.password_hash):
            logger.info("Failed %s login for %s", request.role.value, identifier)
            raise AuthenticationError("Invalid credentials")
        if request.role == Role.provider and not account.approved:
            raise AuthorizationError("Provider not approved yet")

        logger.info("Issued %s token for %s", request.role.value, account.id)
        return TokenResponse(token=self.issue_token(account.id, request.role), role=request.role)

    def signup_tourist(self, request: TouristSignupRequest) -> TokenResponse:
        tourist = TouristService(self.repository).register(request)
        return TokenResponse(
            token=self.issue_token(tourist.id, Role.tourist),
            role=Role.tourist,
            message="Tourist signed up successfully",
        )

    def signup_provider(self, request: ProviderSignupRequest) -> TokenResponse:
        provider = ProviderService(self.repository).register(request, approved=False)
        return TokenResponse(
            token=self.issue_token(provider.id, Role.provider),
            role=Role.provider,
            message="Provider signed up successfully, pending approval",
        )

    def create_admin(self, username: str, password: str) -> Admin:
        username = username.strip()
        if not username or not password:
            raise ValidationError("Username and password are required")
        if self.repository.find_admin_by_username(username):
            raise ValidationError("Admin already exists")
        admin = Admin(id=new_id(), username=username, password_hash=hash_password(password))
        self.repository.add_admin(admin)
        logger.info("Admin account created: %s", username)
        return admin

    def ensure_admin(self, username: str, password: str) -> Admin:
        """Create the admin unless one with ``username`` already exists."""
        existing = self.repository.find_admin_by_username(username.strip())
        if existing is not None:
            return existing
        return self.create_admin(username, password)
