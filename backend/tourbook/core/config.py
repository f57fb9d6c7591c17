from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class PaymentConfig:
    """Gateway credentials, resolved once at startup."""

    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_currency: str = "usd"
    payhere_merchant_id: str = ""
    payhere_merchant_secret: str = ""
    payhere_currency: str = "LKR"
    payhere_checkout_url: str = "https://sandbox.payhere.lk/pay/checkout"
    payhere_return_url: str = "http://localhost:3000/payment-success"
    payhere_cancel_url: str = "http://localhost:3000/payment-cancel"
    payhere_notify_url: str = "http://localhost:8000/payments/payhere-notification"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    app_name: str = "Tour Booking API"
    environment: str = "local"
    log_level: str = "INFO"
    mongodb_uri: Optional[str] = None
    mongodb_db: str = "tourbook"
    jwt_secret: str = "dev-jwt-secret-change-me"
    jwt_expiry_minutes: int = 60
    admin_username: Optional[str] = None
    admin_password: Optional[str] = None
    cors_origins: List[str] = ["http://localhost:3000"]
    currency_multiplier: float = 1.0

    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_currency: str = "usd"
    payhere_merchant_id: str = ""
    payhere_merchant_secret: str = ""
    payhere_currency: str = "LKR"
    payhere_checkout_url: str = "https://sandbox.payhere.lk/pay/checkout"
    payhere_return_url: str = "http://localhost:3000/payment-success"
    payhere_cancel_url: str = "http://localhost:3000/payment-cancel"
    payhere_notify_url: str = "http://localhost:8000/payments/payhere-notification"

    def payment_config(self) -> PaymentConfig:
        return PaymentConfig(
            stripe_secret_key=self.stripe_secret_key,
            stripe_webhook_secret=self.stripe_webhook_secret,
            stripe_currency=self.stripe_currency,
            payhere_merchant_id=self.payhere_merchant_id,
            payhere_merchant_secret=self.payhere_merchant_secret,
            payhere_currency=self.payhere_currency,
            payhere_checkout_url=self.payhere_checkout_url,
            payhere_return_url=self.payhere_return_url,
            payhere_cancel_url=self.payhere_cancel_url,
            payhere_notify_url=self.payhere_notify_url,
        )


@lru_cache()
def get_settings() -> Settings:
    load_dotenv(".env")
    return Settings()

