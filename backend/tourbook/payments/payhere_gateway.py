import hashlib
import hmac
import logging
from typing import Mapping

from tourbook.core.config import PaymentConfig
from tourbook.core.errors import ExternalServiceError, SignatureError
from tourbook.models.schemas import PaymentIntentResponse
from tourbook.payments.base import CheckoutDetails, Confirmation, PaymentGateway

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "2"
NOTIFICATION_FIELDS = ("merchant_id", "order_id", "status_code", "amount", "currency")


def signature(*parts: str) -> str:
    """Upper-case MD5 of the concatenated parts, as PayHere expects."""
    return hashlib.md5("".join(parts).encode("utf-8")).hexdigest().upper()


def format_amount(amount: float) -> str:
    return f"{amount:.2f}"


class PayHereGateway(PaymentGateway):
    """
    Hosted-page payments. The checkout form is signed with the merchant secret;
    PayHere later posts a notification signed the same way with the status code
    spliced in before the secret.
    """

    method = "payhere"

    def __init__(self, config: PaymentConfig):
        self.config = config

    def _require_config(self) -> None:
        if not self.config.payhere_merchant_id or not self.config.payhere_merchant_secret:
            raise ExternalServiceError("Hosted payments are not configured")

    def checkout_hash(self, order_id: str, amount: str) -> str:
        self._require_config()
        return signature(
            self.config.payhere_merchant_id,
            order_id,
            amount,
            self.config.payhere_currency,
            self.config.payhere_merchant_secret,
        )

    def notification_hash(
        self, merchant_id: str, order_id: str, amount: str, currency: str, status_code: str
    ) -> str:
        self._require_config()
        return signature(
            merchant_id,
            order_id,
            amount,
            currency,
            status_code,
            self.config.payhere_merchant_secret,
        )

    def start_payment(self, details: CheckoutDetails) -> PaymentIntentResponse:
        booking = details.booking
        amount = format_amount(booking.total_price)
        order_id = booking.id
        first_name, _, last_name = (details.tourist.full_name if details.tourist else "").partition(" ")
        data = {
            "merchant_id": self.config.payhere_merchant_id,
            "return_url": self.config.payhere_return_url,
            "cancel_url": self.config.payhere_cancel_url,
            "notify_url": self.config.payhere_notify_url,
            "order_id": order_id,
            "items": details.item_name,
            "currency": self.config.payhere_currency,
            "amount": amount,
            "first_name": first_name,
            "last_name": last_name,
            "email": details.tourist.email if details.tourist else "",
            "phone": (details.contact.phone if details.contact else None) or "",
            "country": details.tourist.country if details.tourist else "",
            "hash": self.checkout_hash(order_id, amount),
        }
        logger.info("PayHere checkout prepared for booking %s (%s %s)", order_id, amount, data["currency"])
        return PaymentIntentResponse(
            method=self.method,
            checkout_url=self.config.payhere_checkout_url,
            pay_here_data=data,
        )

    def read_confirmation(self, evidence: Mapping[str, str]) -> Confirmation:
        values = {name: str(evidence.get(name) or "") for name in NOTIFICATION_FIELDS}
        received = str(evidence.get("md5sig") or evidence.get("signature") or "")
        missing = [name for name, value in values.items() if not value]
        if missing or not received:
            raise SignatureError(f"Incomplete notification: missing {', '.join(missing) or 'md5sig'}")
        if values["merchant_id"] != self.config.payhere_merchant_id:
            raise SignatureError("Unknown merchant")

        expected = self.notification_hash(
            values["merchant_id"],
            values["order_id"],
            values["amount"],
            values["currency"],
            values["status_code"],
        )
        if not hmac.compare_digest(expected, received.upper()):
            raise SignatureError("Invalid signature")

        if values["status_code"] != SUCCESS_STATUS:
            return Confirmation(
                booking_id=values["order_id"],
                succeeded=False,
                detail=f"status {values['status_code']}",
            )
        return Confirmation(booking_id=values["order_id"], succeeded=True)
