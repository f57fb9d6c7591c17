from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class Role(str, Enum):
    tourist = "tourist"
    provider = "provider"
    admin = "admin"


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"


# Transitions reachable through the lifecycle manager. Admin approval is
# allowed from any state and is handled separately.
BOOKING_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.pending: frozenset({BookingStatus.confirmed, BookingStatus.cancelled}),
    BookingStatus.confirmed: frozenset({BookingStatus.cancelled}),
    BookingStatus.cancelled: frozenset(),
}


class ProviderCategory(str, Enum):
    jeep_safari = "Jeep Safari"
    tuk_tuk_ride = "Tuk Tuk Ride"
    catamaran_boat_ride = "Catamaran Boat Ride"
    bullock_cart_ride = "Bullock Cart Ride"
    village_lunch = "Village Lunch"


class TargetKind(str, Enum):
    provider = "provider"
    product = "product"
    tourist = "tourist"


class ReviewKind(str, Enum):
    service = "service"
    product = "product"
    tourist = "tourist"

    @property
    def target_kind(self) -> TargetKind:
        return _REVIEW_TARGETS[self]

    @property
    def auto_approved(self) -> bool:
        return self in (ReviewKind.service, ReviewKind.product)


_REVIEW_TARGETS = {
    ReviewKind.service: TargetKind.provider,
    ReviewKind.product: TargetKind.product,
    ReviewKind.tourist: TargetKind.tourist,
}


@dataclass(frozen=True)
class TargetRef:
    """What a booking or review points at: a record id or a catalog label."""

    kind: TargetKind
    reference: str


@dataclass
class Tourist:
    id: str
    full_name: str
    email: str
    password_hash: str
    country: str
    created_at: datetime


@dataclass
class Provider:
    id: str
    service_name: str
    full_name: str
    email: str
    contact: str
    category: ProviderCategory
    location: str
    price: float
    description: str
    password_hash: str
    approved: bool = False
    profile_picture: Optional[str] = None
    photos: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None


@dataclass
class Admin:
    id: str
    username: str
    password_hash: str


@dataclass
class ContactSubmission:
    id: str
    name: str
    email: str
    message: str
    phone: Optional[str]
    created_at: datetime


@dataclass
class Booking:
    id: str
    tourist_id: str
    target: TargetRef
    date: date
    time: str
    adults: int
    children: int
    total_price: float
    status: BookingStatus
    created_at: datetime
    special_notes: Optional[str] = None
    contact_id: Optional[str] = None

    @property
    def provider_id(self) -> Optional[str]:
        if self.target.kind == TargetKind.provider:
            return self.target.reference
        return None

    @property
    def product_type(self) -> Optional[str]:
        if self.target.kind == TargetKind.product:
            return self.target.reference
        return None


@dataclass
class Review:
    id: str
    target: TargetRef
    reviewer_id: str
    rating: int
    comment: str
    kind: ReviewKind
    approved: bool
    created_at: datetime


@dataclass(frozen=True)
class PriceTier:
    min_persons: int
    max_persons: Optional[int]
    unit_price: float

    def contains(self, persons: int) -> bool:
        if persons < self.min_persons:
            return False
        return self.max_persons is None or persons <= self.max_persons


@dataclass(frozen=True)
class Product:
    name: str
    price: Optional[float]
    description: str
    tiers: Optional[Tuple[PriceTier, ...]] = None
