from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tourbook.models.domain import (
    Booking,
    BookingStatus,
    ContactSubmission,
    PriceTier,
    Product,
    Provider,
    ProviderCategory,
    Review,
    ReviewKind,
    Role,
    Tourist,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    message: str


# auth


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    role: Role


class TokenResponse(CamelModel):
    token: str
    role: Role
    message: Optional[str] = None


class TouristSignupRequest(CamelModel):
    full_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    country: str = Field(min_length=1)


class TouristUpdateRequest(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    country: Optional[str] = None


class ProviderSignupRequest(CamelModel):
    service_name: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    contact: str = Field(min_length=1)
    category: ProviderCategory
    location: str = Field(min_length=1)
    price: float = Field(gt=0)
    description: str = Field(min_length=1)
    password: str = Field(min_length=1)
    profile_picture: Optional[str] = None
    photos: List[str] = Field(default_factory=list)


class ProviderUpdateRequest(CamelModel):
    service_name: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    contact: Optional[str] = None
    category: Optional[ProviderCategory] = None
    location: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None
    password: Optional[str] = None
    profile_picture: Optional[str] = None
    photos: Optional[List[str]] = None


# records


class TouristSchema(CamelModel):
    id: str
    full_name: str
    email: str
    country: str
    created_at: datetime

    @classmethod
    def from_domain(cls, obj: Tourist) -> "TouristSchema":
        return cls(
            id=obj.id,
            full_name=obj.full_name,
            email=obj.email,
            country=obj.country,
            created_at=obj.created_at,
        )


class ProviderSchema(CamelModel):
    id: str
    service_name: str
    full_name: str
    email: str
    contact: str
    category: ProviderCategory
    location: str
    price: float
    description: str
    approved: bool
    profile_picture: Optional[str] = None
    photos: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, obj: Provider) -> "ProviderSchema":
        return cls(
            id=obj.id,
            service_name=obj.service_name,
            full_name=obj.full_name,
            email=obj.email,
            contact=obj.contact,
            category=obj.category,
            location=obj.location,
            price=obj.price,
            description=obj.description,
            approved=obj.approved,
            profile_picture=obj.profile_picture,
            photos=list(obj.photos),
        )


class TouristEnvelope(CamelModel):
    message: str
    tourist: TouristSchema


class ProviderEnvelope(CamelModel):
    message: str
    provider: ProviderSchema


class ContactRequest(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    message: str = Field(min_length=1)
    phone: Optional[str] = None


class ContactSchema(CamelModel):
    id: str
    name: str
    email: str
    message: str
    phone: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, obj: ContactSubmission) -> "ContactSchema":
        return cls(
            id=obj.id,
            name=obj.name,
            email=obj.email,
            message=obj.message,
            phone=obj.phone,
            created_at=obj.created_at,
        )


# catalog


class PriceTierSchema(CamelModel):
    min: int
    max: Optional[int] = None
    price: float

    @classmethod
    def from_domain(cls, obj: PriceTier) -> "PriceTierSchema":
        return cls(min=obj.min_persons, max=obj.max_persons, price=obj.unit_price)


class ProductSchema(CamelModel):
    name: str
    price: Optional[float] = None
    description: str
    tiers: Optional[List[PriceTierSchema]] = None

    @classmethod
    def from_domain(cls, obj: Product) -> "ProductSchema":
        return cls(
            name=obj.name,
            price=obj.price,
            description=obj.description,
            tiers=[PriceTierSchema.from_domain(t) for t in obj.tiers] if obj.tiers else None,
        )


# bookings


class BookingCreateRequest(CamelModel):
    provider_id: Optional[str] = None
    product_type: Optional[str] = None
    date: date
    time: str = Field(min_length=1)
    adults: int
    children: int = 0
    total_price: Optional[float] = None
    special_notes: Optional[str] = None
    contact: Optional[ContactRequest] = None


class AdminBookingCreateRequest(BookingCreateRequest):
    tourist_id: str


class ProviderSummary(CamelModel):
    id: str
    service_name: str
    category: ProviderCategory
    price: float


class TouristSummary(CamelModel):
    id: str
    full_name: str
    email: Optional[str] = None


class BookingSchema(CamelModel):
    id: str
    tourist_id: str
    provider_id: Optional[str] = None
    product_type: Optional[str] = None
    date: date
    time: str
    adults: int
    children: int
    total_price: float
    status: BookingStatus
    special_notes: Optional[str] = None
    contact_id: Optional[str] = None
    created_at: datetime
    provider: Optional[ProviderSummary] = None
    tourist: Optional[TouristSummary] = None

    @classmethod
    def from_domain(
        cls,
        obj: Booking,
        provider: Optional[Provider] = None,
        tourist: Optional[Tourist] = None,
    ) -> "BookingSchema":
        return cls(
            id=obj.id,
            tourist_id=obj.tourist_id,
            provider_id=obj.provider_id,
            product_type=obj.product_type,
            date=obj.date,
            time=obj.time,
            adults=obj.adults,
            children=obj.children,
            total_price=obj.total_price,
            status=obj.status,
            special_notes=obj.special_notes,
            contact_id=obj.contact_id,
            created_at=obj.created_at,
            provider=(
                ProviderSummary(
                    id=provider.id,
                    service_name=provider.service_name,
                    category=provider.category,
                    price=provider.price,
                )
                if provider
                else None
            ),
            tourist=(
                TouristSummary(id=tourist.id, full_name=tourist.full_name, email=tourist.email)
                if tourist
                else None
            ),
        )


class BookingEnvelope(CamelModel):
    message: str
    booking: BookingSchema


# payments


class PaymentIntentRequest(CamelModel):
    booking_id: str
    payment_method: str


class PaymentIntentResponse(CamelModel):
    method: str
    client_secret: Optional[str] = None
    payment_intent_id: Optional[str] = None
    checkout_url: Optional[str] = None
    pay_here_data: Optional[Dict[str, Any]] = None


# reviews


class ReviewCreateRequest(CamelModel):
    target_id: str
    rating: int
    comment: str
    review_type: str


class ReviewSchema(CamelModel):
    id: str
    target_id: str
    reviewer_id: str
    rating: int
    comment: str
    review_type: ReviewKind
    approved: bool
    created_at: datetime
    reviewer_name: Optional[str] = None
    target_name: Optional[str] = None

    @classmethod
    def from_domain(
        cls,
        obj: Review,
        reviewer_name: Optional[str] = None,
        target_name: Optional[str] = None,
    ) -> "ReviewSchema":
        return cls(
            id=obj.id,
            target_id=obj.target.reference,
            reviewer_id=obj.reviewer_id,
            rating=obj.rating,
            comment=obj.comment,
            review_type=obj.kind,
            approved=obj.approved,
            created_at=obj.created_at,
            reviewer_name=reviewer_name,
            target_name=target_name,
        )


class ReviewEnvelope(CamelModel):
    message: str
    review: ReviewSchema
