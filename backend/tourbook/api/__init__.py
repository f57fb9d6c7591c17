from typing import Callable, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.requests import Request

from tourbook.core.config import Settings
from tourbook.core.errors import AuthenticationError, AuthorizationError
from tourbook.core.security import Principal
from tourbook.models.domain import Role
from tourbook.services.auth_service import AuthService
from tourbook.services.booking_service import BookingService
from tourbook.services.catalog import ProductCatalog
from tourbook.services.contact_service import ContactService
from tourbook.services.payment_service import PaymentService
from tourbook.services.provider_service import ProviderService
from tourbook.services.review_service import ReviewService
from tourbook.services.tourist_service import TouristService
from tourbook.storage.repository import Repository

bearer = HTTPBearer(auto_error=False)


def get_repository(request: Request) -> Repository:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise HTTPException(status_code=500, detail="Repository not initialized")
    return repository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog(request: Request) -> ProductCatalog:
    return request.app.state.catalog


def get_auth_service(
    repository: Repository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(
        repository=repository,
        jwt_secret=settings.jwt_secret,
        token_minutes=settings.jwt_expiry_minutes,
    )


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    auth: AuthService = Depends(get_auth_service),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided")
    return auth.authenticate(credentials.credentials)


def require_roles(*roles: Role) -> Callable[..., Principal]:
    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            raise AuthorizationError("Access denied")
        return principal

    return dependency


require_admin = require_roles(Role.admin)


def get_tourist_service(repository: Repository = Depends(get_repository)) -> TouristService:
    return TouristService(repository=repository)


def get_provider_service(repository: Repository = Depends(get_repository)) -> ProviderService:
    return ProviderService(repository=repository)


def get_contact_service(repository: Repository = Depends(get_repository)) -> ContactService:
    return ContactService(repository=repository)


def get_booking_service(
    repository: Repository = Depends(get_repository),
    catalog: ProductCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> BookingService:
    return BookingService(
        repository=repository,
        catalog=catalog,
        currency_multiplier=settings.currency_multiplier,
    )


def get_review_service(
    repository: Repository = Depends(get_repository),
    catalog: ProductCatalog = Depends(get_catalog),
) -> ReviewService:
    return ReviewService(repository=repository, catalog=catalog)


def get_payment_service(
    request: Request,
    repository: Repository = Depends(get_repository),
    booking_service: BookingService = Depends(get_booking_service),
) -> PaymentService:
    return PaymentService(
        repository=repository,
        booking_service=booking_service,
        gateways=request.app.state.gateways,
    )
