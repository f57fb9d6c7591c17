import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from tourbook.core.errors import AppError, ValidationError
from tourbook.core.security import Principal
from tourbook.models.domain import BookingStatus
from tourbook.models.schemas import PaymentIntentRequest, PaymentIntentResponse
from tourbook.payments.base import CheckoutDetails, Confirmation, PaymentGateway
from tourbook.payments.stripe_gateway import StripeEvidence
from tourbook.services.booking_service import BookingService
from tourbook.storage.repository import Repository

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    booking_id: Optional[str]
    confirmed: bool
    detail: str = ""


class PaymentService:
    """
    Starts payments and reconciles gateway callbacks. Every gateway funnels into
    ``BookingService.confirm_payment``, which is idempotent, so redelivered
    callbacks are harmless.
    """

    def __init__(
        self,
        repository: Repository,
        booking_service: BookingService,
        gateways: Dict[str, PaymentGateway],
    ):
        self.repository = repository
        self.bookings = booking_service
        self.gateways = gateways

    def _gateway(self, method: str) -> PaymentGateway:
        gateway = self.gateways.get((method or "").lower())
        if gateway is None:
            raise ValidationError("Payment method must be one of: " + ", ".join(sorted(self.gateways)))
        return gateway

    def create_intent(self, principal: Principal, request: PaymentIntentRequest) -> PaymentIntentResponse:
        gateway = self._gateway(request.payment_method)
        booking = self.bookings.get_payable(principal, request.booking_id)
        view = self.bookings.view(booking)
        if view.provider is not None:
            item_name = view.provider.service_name
        else:
            item_name = booking.product_type or "Booking"
        contact = self.repository.get_contact(booking.contact_id) if booking.contact_id else None
        details = CheckoutDetails(
            booking=booking,
            item_name=item_name,
            tourist=view.tourist,
            contact=contact,
        )
        return gateway.start_payment(details)

    def handle_stripe_webhook(self, payload: bytes, signature: Optional[str]) -> ReconcileResult:
        """Verify a Stripe event; raises ``SignatureError`` if it is not authentic."""
        confirmation = self._gateway("stripe").read_confirmation(StripeEvidence(payload, signature))
        return self._reconcile("stripe", confirmation)

    def handle_payhere_notification(self, fields: Mapping[str, str]) -> ReconcileResult:
        """PayHere wants a 200 whatever happens, so nothing here raises."""
        order_id = fields.get("order_id")
        try:
            confirmation = self._gateway("payhere").read_confirmation(fields)
        except AppError as exc:
            logger.warning("Rejected PayHere notification for order %s: %s", order_id, exc.message)
            return ReconcileResult(booking_id=order_id, confirmed=False, detail=exc.message)
        return self._reconcile("payhere", confirmation)

    def _reconcile(self, method: str, confirmation: Confirmation) -> ReconcileResult:
        if not confirmation.succeeded or not confirmation.booking_id:
            logger.info(
                "%s notification for booking %s not applied: %s",
                method,
                confirmation.booking_id,
                confirmation.detail,
            )
            return ReconcileResult(confirmation.booking_id, False, confirmation.detail)
        try:
            booking = self.bookings.confirm_payment(confirmation.booking_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Verified %s payment for booking %s could not be applied: %s",
                method,
                confirmation.booking_id,
                exc,
            )
            return ReconcileResult(confirmation.booking_id, False, str(exc))
        return ReconcileResult(booking.id, booking.status == BookingStatus.confirmed, booking.status.value)
