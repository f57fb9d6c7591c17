import logging
from dataclasses import dataclass
from typing import Optional

import stripe

from tourbook.core.config import PaymentConfig
from tourbook.core.errors import ExternalServiceError, SignatureError
from tourbook.models.schemas import PaymentIntentResponse
from tourbook.payments.base import CheckoutDetails, Confirmation, PaymentGateway

logger = logging.getLogger(__name__)

SUCCEEDED_EVENT = "payment_intent.succeeded"


@dataclass
class StripeEvidence:
    payload: bytes
    signature: Optional[str]


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


class StripeGateway(PaymentGateway):
    """
    Card payments through Stripe PaymentIntents. The booking id travels in the
    intent metadata and comes back in the signed ``payment_intent.succeeded``
    webhook.
    """

    method = "stripe"

    def __init__(self, config: PaymentConfig):
        self.config = config

    def start_payment(self, details: CheckoutDetails) -> PaymentIntentResponse:
        if not self.config.stripe_secret_key:
            raise ExternalServiceError("Card payments are not configured")
        booking = details.booking
        metadata = {
            "bookingId": booking.id,
            "touristId": booking.tourist_id,
            "providerId": booking.provider_id or "",
            "productType": booking.product_type or "",
        }
        try:
            intent = stripe.PaymentIntent.create(
                amount=to_minor_units(booking.total_price),
                currency=self.config.stripe_currency,
                description=details.item_name,
                metadata=metadata,
                api_key=self.config.stripe_secret_key,
            )
        except stripe.StripeError as exc:
            logger.error("Stripe intent creation failed for booking %s: %s", booking.id, exc)
            raise ExternalServiceError("Server error: Failed to create payment")

        logger.info("Stripe payment intent %s created for booking %s", intent["id"], booking.id)
        return PaymentIntentResponse(
            method=self.method,
            client_secret=intent["client_secret"],
            payment_intent_id=intent["id"],
        )

    def read_confirmation(self, evidence: StripeEvidence) -> Confirmation:
        if not self.config.stripe_webhook_secret:
            logger.error("Stripe webhook received but no webhook secret is configured")
            raise SignatureError("Webhook Error: signing secret not configured")
        if not evidence.signature:
            raise SignatureError("Webhook Error: missing signature")
        try:
            event = stripe.Webhook.construct_event(
                evidence.payload, evidence.signature, self.config.stripe_webhook_secret
            )
        except stripe.SignatureVerificationError as exc:
            logger.warning("Stripe webhook signature verification failed: %s", exc)
            raise SignatureError("Webhook Error: invalid signature")
        except ValueError as exc:
            logger.warning("Stripe webhook payload could not be parsed: %s", exc)
            raise SignatureError("Webhook Error: invalid payload")

        event_type = event["type"]
        if event_type != SUCCEEDED_EVENT:
            return Confirmation(booking_id=None, succeeded=False, detail=f"ignored {event_type}")
        try:
            booking_id = event["data"]["object"]["metadata"]["bookingId"]
        except KeyError:
            logger.warning("Stripe event %s carries no booking id", event["id"])
            return Confirmation(booking_id=None, succeeded=False, detail="missing booking id")
        return Confirmation(booking_id=str(booking_id), succeeded=True)
