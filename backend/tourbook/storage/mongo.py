from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from tourbook.models.domain import (
    Admin,
    Booking,
    BookingStatus,
    ContactSubmission,
    Provider,
    ProviderCategory,
    Review,
    ReviewKind,
    TargetKind,
    TargetRef,
    Tourist,
)
from tourbook.storage.repository import is_valid_id

logger = logging.getLogger(__name__)

# domain attribute -> document field, for partial updates
TOURIST_FIELDS = {
    "full_name": "fullName",
    "email": "email",
    "password_hash": "password",
    "country": "country",
}
PROVIDER_FIELDS = {
    "service_name": "serviceName",
    "full_name": "fullName",
    "email": "email",
    "contact": "contact",
    "category": "category",
    "location": "location",
    "price": "price",
    "description": "description",
    "password_hash": "password",
    "approved": "approved",
    "profile_picture": "profilePicture",
    "photos": "photos",
}


def _oid(value: str) -> Optional[ObjectId]:
    return ObjectId(value) if is_valid_id(value) else None


def _plain(value: Any) -> Any:
    if isinstance(value, ProviderCategory):
        return value.value
    return value


def _tourist_from_doc(doc: Dict[str, Any]) -> Tourist:
    return Tourist(
        id=str(doc["_id"]),
        full_name=doc.get("fullName", ""),
        email=doc.get("email", ""),
        password_hash=doc.get("password", ""),
        country=doc.get("country", ""),
        created_at=doc.get("createdAt") or doc["_id"].generation_time,
    )


def _provider_from_doc(doc: Dict[str, Any]) -> Provider:
    return Provider(
        id=str(doc["_id"]),
        service_name=doc.get("serviceName", ""),
        full_name=doc.get("fullName", ""),
        email=doc.get("email", ""),
        contact=doc.get("contact", ""),
        category=ProviderCategory(doc["category"]),
        location=doc.get("location", ""),
        price=float(doc.get("price", 0)),
        description=doc.get("description", ""),
        password_hash=doc.get("password", ""),
        approved=bool(doc.get("approved", False)),
        profile_picture=doc.get("profilePicture"),
        photos=list(doc.get("photos") or []),
        created_at=doc.get("createdAt"),
    )


def _contact_from_doc(doc: Dict[str, Any]) -> ContactSubmission:
    return ContactSubmission(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        email=doc.get("email", ""),
        message=doc.get("message", ""),
        phone=doc.get("phone"),
        created_at=doc.get("createdAt") or doc["_id"].generation_time,
    )


def _target_filter(target: TargetRef) -> Dict[str, Any]:
    if target.kind == TargetKind.product:
        return {"productType": target.reference}
    return {"providerId": _oid(target.reference)}


def _booking_to_doc(booking: Booking) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "_id": ObjectId(booking.id),
        "touristId": ObjectId(booking.tourist_id),
        "date": datetime.combine(booking.date, time.min),
        "time": booking.time,
        "adults": booking.adults,
        "children": booking.children,
        "totalPrice": booking.total_price,
        "status": booking.status.value,
        "specialNotes": booking.special_notes,
        "contactId": _oid(booking.contact_id) if booking.contact_id else None,
        "createdAt": booking.created_at,
    }
    doc.update(_target_filter(booking.target))
    return doc


def _booking_from_doc(doc: Dict[str, Any]) -> Booking:
    if doc.get("productType"):
        target = TargetRef(TargetKind.product, doc["productType"])
    else:
        target = TargetRef(TargetKind.provider, str(doc["providerId"]))
    raw_date = doc["date"]
    return Booking(
        id=str(doc["_id"]),
        tourist_id=str(doc["touristId"]),
        target=target,
        date=raw_date.date() if isinstance(raw_date, datetime) else date.fromisoformat(str(raw_date)),
        time=doc.get("time", ""),
        adults=int(doc.get("adults", 1)),
        children=int(doc.get("children", 0)),
        total_price=float(doc.get("totalPrice", 0)),
        status=BookingStatus(doc.get("status", BookingStatus.pending.value)),
        created_at=doc.get("createdAt") or doc["_id"].generation_time,
        special_notes=doc.get("specialNotes"),
        contact_id=str(doc["contactId"]) if doc.get("contactId") else None,
    )


def _review_from_doc(doc: Dict[str, Any]) -> Review:
    kind = ReviewKind(doc["reviewType"])
    return Review(
        id=str(doc["_id"]),
        target=TargetRef(kind.target_kind, str(doc["targetId"])),
        reviewer_id=str(doc["reviewerId"]),
        rating=int(doc["rating"]),
        comment=doc.get("comment", ""),
        kind=kind,
        approved=bool(doc.get("approved", False)),
        created_at=doc.get("createdAt") or doc["_id"].generation_time,
    )


class MongoRepository:
    """Repository backed by MongoDB collections, one per record type."""

    backend = "mongodb"

    def __init__(self, uri: str, db_name: str, client: Optional[MongoClient] = None) -> None:
        self.client = client or MongoClient(uri, tz_aware=True)
        self.db: Database = self.client[db_name]

    def ensure_indexes(self) -> None:
        self.db.tourists.create_index([("email", ASCENDING)], unique=True)
        self.db.providers.create_index([("email", ASCENDING)], unique=True)
        self.db.admins.create_index([("username", ASCENDING)], unique=True)
        self.db.bookings.create_index([("touristId", ASCENDING)])
        self.db.bookings.create_index([("providerId", ASCENDING)])
        self.db.reviews.create_index([("targetId", ASCENDING), ("reviewType", ASCENDING)])

    def close(self) -> None:
        self.client.close()

    def ping(self) -> bool:
        try:
            self.client.admin.command("ping")
        except PyMongoError as exc:
            logger.warning("MongoDB ping failed: %s", exc)
            return False
        return True

    def _delete(self, collection: str, record_id: str) -> bool:
        oid = _oid(record_id)
        if oid is None:
            return False
        return self.db[collection].delete_one({"_id": oid}).deleted_count == 1

    def _find(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        oid = _oid(record_id)
        if oid is None:
            return None
        return self.db[collection].find_one({"_id": oid})

    def _update(
        self, collection: str, record_id: str, changes: Dict[str, Any], fields: Dict[str, str]
    ) -> Optional[Dict[str, Any]]:
        oid = _oid(record_id)
        if oid is None:
            return None
        update = {fields[key]: _plain(value) for key, value in changes.items()}
        if not update:
            return self.db[collection].find_one({"_id": oid})
        return self.db[collection].find_one_and_update(
            {"_id": oid}, {"$set": update}, return_document=ReturnDocument.AFTER
        )

    # tourists

    def add_tourist(self, tourist: Tourist) -> Tourist:
        self.db.tourists.insert_one(
            {
                "_id": ObjectId(tourist.id),
                "fullName": tourist.full_name,
                "email": tourist.email,
                "password": tourist.password_hash,
                "country": tourist.country,
                "createdAt": tourist.created_at,
            }
        )
        return tourist

    def get_tourist(self, tourist_id: str) -> Optional[Tourist]:
        doc = self._find("tourists", tourist_id)
        return _tourist_from_doc(doc) if doc else None

    def find_tourist_by_email(self, email: str) -> Optional[Tourist]:
        doc = self.db.tourists.find_one({"email": email})
        return _tourist_from_doc(doc) if doc else None

    def list_tourists(self) -> List[Tourist]:
        return [_tourist_from_doc(doc) for doc in self.db.tourists.find()]

    def update_tourist(self, tourist_id: str, changes: Dict[str, Any]) -> Optional[Tourist]:
        doc = self._update("tourists", tourist_id, changes, TOURIST_FIELDS)
        return _tourist_from_doc(doc) if doc else None

    def delete_tourist(self, tourist_id: str) -> bool:
        return self._delete("tourists", tourist_id)

    # providers

    def add_provider(self, provider: Provider) -> Provider:
        doc = {field: _plain(getattr(provider, attr)) for attr, field in PROVIDER_FIELDS.items()}
        doc["_id"] = ObjectId(provider.id)
        doc["createdAt"] = provider.created_at
        self.db.providers.insert_one(doc)
        return provider

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        doc = self._find("providers", provider_id)
        return _provider_from_doc(doc) if doc else None

    def find_provider_by_email(self, email: str) -> Optional[Provider]:
        doc = self.db.providers.find_one({"email": email})
        return _provider_from_doc(doc) if doc else None

    def list_providers(self, approved: Optional[bool] = None, limit: int = 0) -> List[Provider]:
        query = {} if approved is None else {"approved": approved}
        return [_provider_from_doc(doc) for doc in self.db.providers.find(query).limit(max(limit, 0))]

    def update_provider(self, provider_id: str, changes: Dict[str, Any]) -> Optional[Provider]:
        doc = self._update("providers", provider_id, changes, PROVIDER_FIELDS)
        return _provider_from_doc(doc) if doc else None

    def delete_provider(self, provider_id: str) -> bool:
        return self._delete("providers", provider_id)

    # admins

    def add_admin(self, admin: Admin) -> Admin:
        self.db.admins.insert_one(
            {"_id": ObjectId(admin.id), "username": admin.username, "password": admin.password_hash}
        )
        return admin

    def find_admin_by_username(self, username: str) -> Optional[Admin]:
        doc = self.db.admins.find_one({"username": username})
        if not doc:
            return None
        return Admin(id=str(doc["_id"]), username=doc["username"], password_hash=doc.get("password", ""))

    # contact submissions

    def add_contact(self, contact: ContactSubmission) -> ContactSubmission:
        self.db.contacts.insert_one(
            {
                "_id": ObjectId(contact.id),
                "name": contact.name,
                "email": contact.email,
                "message": contact.message,
                "phone": contact.phone,
                "createdAt": contact.created_at,
            }
        )
        return contact

    def get_contact(self, contact_id: str) -> Optional[ContactSubmission]:
        doc = self._find("contacts", contact_id)
        return _contact_from_doc(doc) if doc else None

    def list_contacts(self) -> List[ContactSubmission]:
        cursor = self.db.contacts.find().sort("createdAt", DESCENDING)
        return [_contact_from_doc(doc) for doc in cursor]

    def delete_contact(self, contact_id: str) -> bool:
        return self._delete("contacts", contact_id)

    # bookings

    def add_booking(self, booking: Booking) -> Booking:
        self.db.bookings.insert_one(_booking_to_doc(booking))
        return booking

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        doc = self._find("bookings", booking_id)
        return _booking_from_doc(doc) if doc else None

    def list_bookings(
        self, tourist_id: Optional[str] = None, target: Optional[TargetRef] = None
    ) -> List[Booking]:
        query: Dict[str, Any] = {}
        if tourist_id is not None:
            query["touristId"] = _oid(tourist_id)
        if target is not None:
            query.update(_target_filter(target))
        cursor = self.db.bookings.find(query).sort("date", DESCENDING)
        return [_booking_from_doc(doc) for doc in cursor]

    def set_booking_status(self, booking_id: str, status: BookingStatus) -> Optional[Booking]:
        oid = _oid(booking_id)
        if oid is None:
            return None
        doc = self.db.bookings.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": status.value}},
            return_document=ReturnDocument.AFTER,
        )
        return _booking_from_doc(doc) if doc else None

    def delete_booking(self, booking_id: str) -> bool:
        return self._delete("bookings", booking_id)

    def find_confirmed_booking(self, tourist_id: str, target: TargetRef) -> Optional[Booking]:
        query = {"touristId": _oid(tourist_id), "status": BookingStatus.confirmed.value}
        query.update(_target_filter(target))
        doc = self.db.bookings.find_one(query)
        return _booking_from_doc(doc) if doc else None

    # reviews

    def add_review(self, review: Review) -> Review:
        self.db.reviews.insert_one(
            {
                "_id": ObjectId(review.id),
                "targetId": review.target.reference,
                "reviewerId": ObjectId(review.reviewer_id),
                "rating": review.rating,
                "comment": review.comment,
                "reviewType": review.kind.value,
                "approved": review.approved,
                "createdAt": review.created_at,
            }
        )
        return review

    def list_reviews(
        self,
        kind: Optional[ReviewKind] = None,
        target: Optional[TargetRef] = None,
        approved: Optional[bool] = None,
    ) -> List[Review]:
        query: Dict[str, Any] = {}
        if kind is not None:
            query["reviewType"] = kind.value
        if target is not None:
            query["targetId"] = target.reference
        if approved is not None:
            query["approved"] = approved
        cursor = self.db.reviews.find(query).sort("createdAt", DESCENDING)
        return [_review_from_doc(doc) for doc in cursor]

    def set_review_approved(self, review_id: str) -> Optional[Review]:
        oid = _oid(review_id)
        if oid is None:
            return None
        doc = self.db.reviews.find_one_and_update(
            {"_id": oid}, {"$set": {"approved": True}}, return_document=ReturnDocument.AFTER
        )
        return _review_from_doc(doc) if doc else None

    def delete_review(self, review_id: str) -> bool:
        return self._delete("reviews", review_id)
