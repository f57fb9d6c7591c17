from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional, Protocol

from bson import ObjectId

from tourbook.models.domain import (
    Admin,
    Booking,
    BookingStatus,
    ContactSubmission,
    Provider,
    Review,
    ReviewKind,
    TargetRef,
    Tourist,
)


def new_id() -> str:
    return str(ObjectId())


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value)


class Repository(Protocol):
    """Persistence contract shared by the in-memory and MongoDB stores."""

    backend: str

    def add_tourist(self, tourist: Tourist) -> Tourist: ...
    def get_tourist(self, tourist_id: str) -> Optional[Tourist]: ...
    def find_tourist_by_email(self, email: str) -> Optional[Tourist]: ...
    def list_tourists(self) -> List[Tourist]: ...
    def update_tourist(self, tourist_id: str, changes: Dict[str, Any]) -> Optional[Tourist]: ...
    def delete_tourist(self, tourist_id: str) -> bool: ...

    def add_provider(self, provider: Provider) -> Provider: ...
    def get_provider(self, provider_id: str) -> Optional[Provider]: ...
    def find_provider_by_email(self, email: str) -> Optional[Provider]: ...
    def list_providers(self, approved: Optional[bool] = None, limit: int = 0) -> List[Provider]: ...
    def update_provider(self, provider_id: str, changes: Dict[str, Any]) -> Optional[Provider]: ...
    def delete_provider(self, provider_id: str) -> bool: ...

    def add_admin(self, admin: Admin) -> Admin: ...
    def find_admin_by_username(self, username: str) -> Optional[Admin]: ...

    def add_contact(self, contact: ContactSubmission) -> ContactSubmission: ...
    def get_contact(self, contact_id: str) -> Optional[ContactSubmission]: ...
    def list_contacts(self) -> List[ContactSubmission]: ...
    def delete_contact(self, contact_id: str) -> bool: ...

    def add_booking(self, booking: Booking) -> Booking: ...
    def get_booking(self, booking_id: str) -> Optional[Booking]: ...
    def list_bookings(
        self, tourist_id: Optional[str] = None, target: Optional[TargetRef] = None
    ) -> List[Booking]: ...
    def set_booking_status(self, booking_id: str, status: BookingStatus) -> Optional[Booking]: ...
    def delete_booking(self, booking_id: str) -> bool: ...
    def find_confirmed_booking(self, tourist_id: str, target: TargetRef) -> Optional[Booking]: ...

    def add_review(self, review: Review) -> Review: ...
    def list_reviews(
        self,
        kind: Optional[ReviewKind] = None,
        target: Optional[TargetRef] = None,
        approved: Optional[bool] = None,
    ) -> List[Review]: ...
    def set_review_approved(self, review_id: str) -> Optional[Review]: ...
    def delete_review(self, review_id: str) -> bool: ...

    def ping(self) -> bool: ...
    def close(self) -> None: ...


class InMemoryRepository:
    backend = "memory"

    def __init__(self) -> None:
        self.tourists: Dict[str, Tourist] = {}
        self.providers: Dict[str, Provider] = {}
        self.admins: Dict[str, Admin] = {}
        self.contacts: Dict[str, ContactSubmission] = {}
        self.bookings: Dict[str, Booking] = {}
        self.reviews: Dict[str, Review] = {}

    # tourists

    def add_tourist(self, tourist: Tourist) -> Tourist:
        self.tourists[tourist.id] = tourist
        return tourist

    def get_tourist(self, tourist_id: str) -> Optional[Tourist]:
        return self.tourists.get(tourist_id)

    def find_tourist_by_email(self, email: str) -> Optional[Tourist]:
        return next((t for t in self.tourists.values() if t.email == email), None)

    def list_tourists(self) -> List[Tourist]:
        return list(self.tourists.values())

    def update_tourist(self, tourist_id: str, changes: Dict[str, Any]) -> Optional[Tourist]:
        tourist = self.tourists.get(tourist_id)
        if tourist is None:
            return None
        self.tourists[tourist_id] = replace(tourist, **changes)
        return self.tourists[tourist_id]

    def delete_tourist(self, tourist_id: str) -> bool:
        return self.tourists.pop(tourist_id, None) is not None

    # providers

    def add_provider(self, provider: Provider) -> Provider:
        self.providers[provider.id] = provider
        return provider

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        return self.providers.get(provider_id)

    def find_provider_by_email(self, email: str) -> Optional[Provider]:
        return next((p for p in self.providers.values() if p.email == email), None)

    def list_providers(self, approved: Optional[bool] = None, limit: int = 0) -> List[Provider]:
        providers = [
            p for p in self.providers.values() if approved is None or p.approved == approved
        ]
        return providers[:limit] if limit > 0 else providers

    def update_provider(self, provider_id: str, changes: Dict[str, Any]) -> Optional[Provider]:
        provider = self.providers.get(provider_id)
        if provider is None:
            return None
        self.providers[provider_id] = replace(provider, **changes)
        return self.providers[provider_id]

    def delete_provider(self, provider_id: str) -> bool:
        return self.providers.pop(provider_id, None) is not None

    # admins

    def add_admin(self, admin: Admin) -> Admin:
        self.admins[admin.id] = admin
        return admin

    def find_admin_by_username(self, username: str) -> Optional[Admin]:
        return next((a for a in self.admins.values() if a.username == username), None)

    # contact submissions

    def add_contact(self, contact: ContactSubmission) -> ContactSubmission:
        self.contacts[contact.id] = contact
        return contact

    def get_contact(self, contact_id: str) -> Optional[ContactSubmission]:
        return self.contacts.get(contact_id)

    def list_contacts(self) -> List[ContactSubmission]:
        return sorted(self.contacts.values(), key=lambda c: c.created_at, reverse=True)

    def delete_contact(self, contact_id: str) -> bool:
        return self.contacts.pop(contact_id, None) is not None

    # bookings

    def add_booking(self, booking: Booking) -> Booking:
        self.bookings[booking.id] = booking
        return booking

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self.bookings.get(booking_id)

    def list_bookings(
        self, tourist_id: Optional[str] = None, target: Optional[TargetRef] = None
    ) -> List[Booking]:
        return [
            b
            for b in self.bookings.values()
            if (tourist_id is None or b.tourist_id == tourist_id)
            and (target is None or b.target == target)
        ]

    def set_booking_status(self, booking_id: str, status: BookingStatus) -> Optional[Booking]:
        booking = self.bookings.get(booking_id)
        if booking is None:
            return None
        booking.status = status
        return booking

    def delete_booking(self, booking_id: str) -> bool:
        return self.bookings.pop(booking_id, None) is not None

    def find_confirmed_booking(self, tourist_id: str, target: TargetRef) -> Optional[Booking]:
        return next(
            (
                b
                for b in self.bookings.values()
                if b.tourist_id == tourist_id
                and b.target == target
                and b.status == BookingStatus.confirmed
            ),
            None,
        )

    # reviews

    def add_review(self, review: Review) -> Review:
        self.reviews[review.id] = review
        return review

    def list_reviews(
        self,
        kind: Optional[ReviewKind] = None,
        target: Optional[TargetRef] = None,
        approved: Optional[bool] = None,
    ) -> List[Review]:
        reviews = [
            r
            for r in self.reviews.values()
            if (kind is None or r.kind == kind)
            and (target is None or r.target == target)
            and (approved is None or r.approved == approved)
        ]
        return sorted(reviews, key=lambda r: r.created_at, reverse=True)

    def set_review_approved(self, review_id: str) -> Optional[Review]:
        review = self.reviews.get(review_id)
        if review is None:
            return None
        review.approved = True
        return review

    def delete_review(self, review_id: str) -> bool:
        return self.reviews.pop(review_id, None) is not None

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass
