from typing import List

from fastapi import APIRouter, Depends, status

from tourbook.api import get_booking_service, get_current_principal, require_admin, require_roles
from tourbook.core.security import Principal
from tourbook.models.domain import Role, TargetKind
from tourbook.models.schemas import (
    AdminBookingCreateRequest,
    BookingCreateRequest,
    BookingEnvelope,
    BookingSchema,
    MessageResponse,
)
from tourbook.services.booking_service import BookingService, BookingView

router = APIRouter()


def _schema(view: BookingView) -> BookingSchema:
    return BookingSchema.from_domain(view.booking, provider=view.provider, tourist=view.tourist)


@router.post("", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
def create_booking(
    request: BookingCreateRequest,
    principal: Principal = Depends(require_roles(Role.tourist)),
    service: BookingService = Depends(get_booking_service),
) -> BookingEnvelope:
    booking = service.create_for_tourist(principal, request)
    if booking.target.kind == TargetKind.product:
        message = "Booking created, awaiting admin approval"
    else:
        message = "Booking created successfully"
    return BookingEnvelope(message=message, booking=_schema(service.view(booking)))


@router.get("/mine", response_model=List[BookingSchema])
def my_bookings(
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> List[BookingSchema]:
    return [_schema(v) for v in service.list_for(principal)]


@router.get("/admin", response_model=List[BookingSchema], dependencies=[Depends(require_admin)])
def all_bookings(service: BookingService = Depends(get_booking_service)) -> List[BookingSchema]:
    return [_schema(v) for v in service.list_all()]


@router.post(
    "/admin",
    response_model=BookingEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def admin_create_booking(
    request: AdminBookingCreateRequest,
    service: BookingService = Depends(get_booking_service),
) -> BookingEnvelope:
    booking = service.create_for_admin(request)
    return BookingEnvelope(message="Booking created successfully", booking=_schema(service.view(booking)))


@router.put("/admin/{booking_id}/approve", response_model=BookingEnvelope, dependencies=[Depends(require_admin)])
def approve_booking(
    booking_id: str, service: BookingService = Depends(get_booking_service)
) -> BookingEnvelope:
    booking = service.approve(booking_id)
    return BookingEnvelope(message="Booking approved", booking=_schema(service.view(booking)))


@router.put("/admin/{booking_id}/cancel", response_model=BookingEnvelope, dependencies=[Depends(require_admin)])
def cancel_booking(
    booking_id: str, service: BookingService = Depends(get_booking_service)
) -> BookingEnvelope:
    booking = service.cancel(booking_id)
    return BookingEnvelope(message="Booking cancelled", booking=_schema(service.view(booking)))


@router.delete("/admin/{booking_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_booking(
    booking_id: str, service: BookingService = Depends(get_booking_service)
) -> MessageResponse:
    service.delete(booking_id)
    return MessageResponse(message="Booking deleted")
