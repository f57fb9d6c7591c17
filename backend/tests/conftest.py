import pytest
from fastapi.testclient import TestClient

from factories import JWT_SECRET, PAYHERE_MERCHANT_ID, PAYHERE_SECRET, STRIPE_WEBHOOK_SECRET
from tourbook.core.config import Settings
from tourbook.core.security import Principal
from tourbook.main import create_app
from tourbook.models.domain import ProviderCategory, Role
from tourbook.models.schemas import (
    ProviderSignupRequest,
    TouristSignupRequest,
)
from tourbook.services.auth_service import AuthService
from tourbook.services.booking_service import BookingService
from tourbook.services.provider_service import ProviderService
from tourbook.services.tourist_service import TouristService
from tourbook.storage.repository import InMemoryRepository


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret=JWT_SECRET,
        mongodb_uri=None,
        stripe_secret_key="sk_test_dummy",
        stripe_webhook_secret=STRIPE_WEBHOOK_SECRET,
        payhere_merchant_id=PAYHERE_MERCHANT_ID,
        payhere_merchant_secret=PAYHERE_SECRET,
        currency_multiplier=1.0,
    )


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def booking_service(repository) -> BookingService:
    return BookingService(repository=repository)


@pytest.fixture
def tourist(repository):
    return TouristService(repository).register(
        TouristSignupRequest(
            full_name="Nimal Perera",
            email="nimal@example.com",
            password="secret-pass",
            country="Sri Lanka",
        )
    )


@pytest.fixture
def provider(repository):
    return ProviderService(repository).register(
        ProviderSignupRequest(
            service_name="Yala Jeep Tours",
            full_name="Kamal Silva",
            email="kamal@example.com",
            contact="+94771234567",
            category=ProviderCategory.jeep_safari,
            location="Tissamaharama",
            price=38,
            description="Morning and evening safaris in Yala.",
            password="provider-pass",
        ),
        approved=True,
    )


@pytest.fixture
def tourist_principal(tourist) -> Principal:
    return Principal(id=tourist.id, role=Role.tourist)


@pytest.fixture
def provider_principal(provider) -> Principal:
    return Principal(id=provider.id, role=Role.provider)


@pytest.fixture
def client(settings, repository) -> TestClient:
    app = create_app(settings=settings, repository=repository)
    return TestClient(app)


@pytest.fixture
def auth(repository) -> AuthService:
    return AuthService(repository=repository, jwt_secret=JWT_SECRET)


@pytest.fixture
def admin_headers(auth):
    admin = auth.create_admin("admin", "admin-pass")
    token = auth.issue_token(admin.id, Role.admin)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def tourist_headers(auth, tourist):
    return {"Authorization": f"Bearer {auth.issue_token(tourist.id, Role.tourist)}"}


@pytest.fixture
def provider_headers(auth, provider):
    return {"Authorization": f"Bearer {auth.issue_token(provider.id, Role.provider)}"}
