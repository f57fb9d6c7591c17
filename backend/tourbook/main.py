import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tourbook.api import (
    routes_auth,
    routes_bookings,
    routes_contact,
    routes_health,
    routes_payments,
    routes_products,
    routes_providers,
    routes_reviews,
    routes_tourists,
)
from tourbook.api.errors import register_exception_handlers
from tourbook.core.config import Settings, get_settings
from tourbook.core.logging import configure_logging
from tourbook.payments.base import PaymentGateway
from tourbook.payments.payhere_gateway import PayHereGateway
from tourbook.payments.stripe_gateway import StripeGateway
from tourbook.services.auth_service import AuthService
from tourbook.services.catalog import ProductCatalog
from tourbook.storage.factory import build_repository
from tourbook.storage.repository import Repository

logger = logging.getLogger(__name__)


def build_gateways(settings: Settings) -> Dict[str, PaymentGateway]:
    config = settings.payment_config()
    if config.stripe_currency.upper() != config.payhere_currency.upper() and settings.currency_multiplier == 1.0:
        logger.warning(
            "Booking totals are charged as %s by Stripe and %s by PayHere but CURRENCY_MULTIPLIER is 1.0",
            config.stripe_currency.upper(),
            config.payhere_currency.upper(),
        )
    gateways = [StripeGateway(config), PayHereGateway(config)]
    return {g.method: g for g in gateways}


def seed_admin(repository: Repository, settings: Settings) -> None:
    if not settings.admin_username or not settings.admin_password:
        return
    auth = AuthService(repository, jwt_secret=settings.jwt_secret)
    admin = auth.ensure_admin(settings.admin_username, settings.admin_password)
    logger.info("Admin account available: %s", admin.username)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    yield
    app.state.repository.close()
    logger.info("Storage closed")


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=app_lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(routes_auth.router, prefix="/auth", tags=["auth"])
    app.include_router(routes_providers.router, prefix="/providers", tags=["providers"])
    app.include_router(routes_tourists.router, prefix="/tourists", tags=["tourists"])
    app.include_router(routes_products.router, prefix="/products", tags=["products"])
    app.include_router(routes_contact.router, prefix="/contact", tags=["contact"])
    app.include_router(routes_bookings.router, prefix="/bookings", tags=["bookings"])
    app.include_router(routes_payments.router, prefix="/payments", tags=["payments"])
    app.include_router(routes_reviews.router, prefix="/reviews", tags=["reviews"])

    # Shared objects for dependencies
    app.state.repository = repository if repository is not None else build_repository(settings)
    app.state.settings = settings
    app.state.catalog = ProductCatalog()
    app.state.gateways = build_gateways(settings)
    seed_admin(app.state.repository, settings)
    logger.info("%s started (%s, storage=%s)", settings.app_name, settings.environment, app.state.repository.backend)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tourbook.main:app", host="0.0.0.0", port=8000, reload=True)
