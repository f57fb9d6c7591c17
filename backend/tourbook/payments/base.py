from dataclasses import dataclass
from typing import Any, Optional, Protocol

from tourbook.models.domain import Booking, ContactSubmission, Tourist
from tourbook.models.schemas import PaymentIntentResponse


@dataclass
class CheckoutDetails:
    booking: Booking
    item_name: str
    tourist: Optional[Tourist] = None
    contact: Optional[ContactSubmission] = None


@dataclass
class Confirmation:
    """A gateway's verified verdict about one payment notification."""

    booking_id: Optional[str]
    succeeded: bool
    detail: str = ""


class PaymentGateway(Protocol):
    """Payment backend abstraction; each gateway verifies its own evidence."""

    method: str

    def start_payment(self, details: CheckoutDetails) -> PaymentIntentResponse:
        ...

    def read_confirmation(self, evidence: Any) -> Confirmation:
        """Verify ``evidence`` and report which booking it pays for.

        Raises ``SignatureError`` when the evidence cannot be authenticated.
        """
        ...
