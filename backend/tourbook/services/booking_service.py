from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from tourbook.core.errors import (
    AuthorizationError,
    NotFoundError,
    PricingError,
    ValidationError,
)
from tourbook.core.security import Principal
from tourbook.models.domain import (
    BOOKING_TRANSITIONS,
    Booking,
    BookingStatus,
    Provider,
    Role,
    TargetKind,
    TargetRef,
    Tourist,
)
from tourbook.models.schemas import AdminBookingCreateRequest, BookingCreateRequest
from tourbook.services.catalog import ProductCatalog
from tourbook.services.contact_service import ContactService
from tourbook.services.ids import require_id
from tourbook.services.pricing import compute_price, convert_currency, validate_headcount
from tourbook.storage.repository import Repository, new_id

logger = logging.getLogger(__name__)


@dataclass
class BookingView:
    booking: Booking
    provider: Optional[Provider] = None
    tourist: Optional[Tourist] = None


class BookingService:
    """
    Owns booking creation and every status change.

    Prices are quoted in the catalog currency and converted with
    ``currency_multiplier`` exactly once, when the booking is created.
    """

    def __init__(
        self,
        repository: Repository,
        catalog: Optional[ProductCatalog] = None,
        currency_multiplier: float = 1.0,
    ):
        self.repository = repository
        self.catalog = catalog or ProductCatalog()
        self.currency_multiplier = currency_multiplier
        self.contacts = ContactService(repository)

    # creation

    def create_for_tourist(self, principal: Principal, request: BookingCreateRequest) -> Booking:
        if principal.role != Role.tourist:
            raise AuthorizationError("Only tourists can create bookings")
        if self.repository.get_tourist(principal.id) is None:
            raise NotFoundError("Tourist not found")
        if request.contact is None:
            raise ValidationError("contact is required")

        target = self._target_from(request)
        if target.kind == TargetKind.provider:
            provider = self.repository.get_provider(target.reference)
            if provider is None or not provider.approved:
                raise NotFoundError("Provider not found")
            price = compute_price(provider.price, request.adults, request.children)
        else:
            if request.total_price is None:
                raise ValidationError("totalPrice is required for product bookings")
            price = self._product_price(target.reference, request, supplied=request.total_price)

        return self._persist(principal.id, target, request, price)

    def create_for_admin(self, request: AdminBookingCreateRequest) -> Booking:
        require_id(request.tourist_id, "Tourist")
        if self.repository.get_tourist(request.tourist_id) is None:
            raise NotFoundError("Tourist not found")

        target = self._target_from(request)
        if target.kind == TargetKind.provider:
            provider = self.repository.get_provider(target.reference)
            if provider is None:
                raise NotFoundError("Provider not found")
            computed = compute_price(provider.price, request.adults, request.children)
            price = computed if request.total_price is None else self._checked_total(request)
        elif request.total_price is not None:
            self._product(target.reference)
            validate_headcount(request.adults, request.children)
            price = self._checked_total(request)
        else:
            price = self._product_price(target.reference, request, supplied=None)

        return self._persist(request.tourist_id, target, request, price)

    def _target_from(self, request: BookingCreateRequest) -> TargetRef:
        if request.provider_id and request.product_type:
            raise ValidationError("Cannot specify both providerId and productType")
        if request.provider_id:
            return TargetRef(TargetKind.provider, require_id(request.provider_id, "Provider"))
        if request.product_type:
            return TargetRef(TargetKind.product, request.product_type)
        raise ValidationError("Either providerId or productType is required")

    def _product(self, name: str):
        product = self.catalog.get(name)
        if product is None:
            raise NotFoundError(f"Product not found: {name}")
        return product

    def _product_price(
        self, name: str, request: BookingCreateRequest, supplied: Optional[float]
    ) -> float:
        product = self._product(name)
        if product.tiers:
            return compute_price(None, request.adults, request.children, tiers=product.tiers)
        if supplied is None:
            raise PricingError(f"No pricing available for {name}")
        # untiered products are priced by the caller
        validate_headcount(request.adults, request.children)
        return self._checked_total(request)

    @staticmethod
    def _checked_total(request: BookingCreateRequest) -> float:
        if request.total_price is None or request.total_price <= 0:
            raise ValidationError("totalPrice must be greater than zero")
        return round(float(request.total_price), 2)

    def _persist(
        self,
        tourist_id: str,
        target: TargetRef,
        request: BookingCreateRequest,
        price: float,
    ) -> Booking:
        contact_id = None
        if request.contact is not None:
            contact_id = self.contacts.submit(request.contact).id

        booking = Booking(
            id=new_id(),
            tourist_id=tourist_id,
            target=target,
            date=request.date,
            time=request.time,
            adults=request.adults,
            children=request.children,
            total_price=convert_currency(price, self.currency_multiplier),
            status=BookingStatus.pending,
            created_at=datetime.now(timezone.utc),
            special_notes=request.special_notes,
            contact_id=contact_id,
        )
        self.repository.add_booking(booking)
        logger.info(
            "Booking %s created for tourist %s on %s %s (total %.2f)",
            booking.id,
            tourist_id,
            target.kind.value,
            target.reference,
            booking.total_price,
        )
        return booking

    # status changes

    def approve(self, booking_id: str) -> Booking:
        require_id(booking_id, "Booking")
        booking = self.repository.set_booking_status(booking_id, BookingStatus.confirmed)
        if booking is None:
            raise NotFoundError("Booking not found")
        logger.info("Booking approved: %s", booking_id)
        return booking

    def cancel(self, booking_id: str) -> Booking:
        booking = self.get(booking_id)
        if booking.status == BookingStatus.cancelled:
            return booking
        if BookingStatus.cancelled not in BOOKING_TRANSITIONS[booking.status]:
            raise ValidationError(f"Cannot cancel a {booking.status.value} booking")
        updated = self.repository.set_booking_status(booking_id, BookingStatus.cancelled)
        if updated is None:
            raise NotFoundError("Booking not found")
        logger.info("Booking cancelled: %s", booking_id)
        return updated

    def confirm_payment(self, booking_id: str) -> Booking:
        """Mark a paid booking confirmed. Repeated calls are no-ops."""
        booking = self.get(booking_id)
        if booking.status == BookingStatus.confirmed:
            logger.info("Booking %s already confirmed", booking_id)
            return booking
        if BookingStatus.confirmed not in BOOKING_TRANSITIONS[booking.status]:
            logger.warning(
                "Payment received for %s booking %s; status left unchanged",
                booking.status.value,
                booking_id,
            )
            return booking
        updated = self.repository.set_booking_status(booking_id, BookingStatus.confirmed)
        if updated is None:
            raise NotFoundError("Booking not found")
        logger.info("Booking confirmed by payment: %s", booking_id)
        return updated

    def delete(self, booking_id: str) -> None:
        require_id(booking_id, "Booking")
        if not self.repository.delete_booking(booking_id):
            raise NotFoundError("Booking not found")
        logger.info("Booking deleted: %s", booking_id)

    # reads

    def get(self, booking_id: str) -> Booking:
        require_id(booking_id, "Booking")
        booking = self.repository.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def get_payable(self, principal: Principal, booking_id: str) -> Booking:
        if principal.role != Role.tourist:
            raise AuthorizationError("Only tourists can create payments")
        booking = self.get(booking_id)
        if booking.tourist_id != principal.id:
            raise AuthorizationError("Booking belongs to another tourist")
        if booking.status != BookingStatus.pending:
            raise ValidationError("Booking is not awaiting payment")
        return booking

    def list_for(self, principal: Principal) -> List[BookingView]:
        if principal.role == Role.tourist:
            bookings = self.repository.list_bookings(tourist_id=principal.id)
        elif principal.role == Role.provider:
            bookings = self.repository.list_bookings(
                target=TargetRef(TargetKind.provider, principal.id)
            )
        else:
            bookings = self.repository.list_bookings()
        return [self.view(b) for b in bookings]

    def list_all(self) -> List[BookingView]:
        return [self.view(b) for b in self.repository.list_bookings()]

    def view(self, booking: Booking) -> BookingView:
        provider = (
            self.repository.get_provider(booking.provider_id) if booking.provider_id else None
        )
        return BookingView(
            booking=booking,
            provider=provider,
            tourist=self.repository.get_tourist(booking.tourist_id),
        )
