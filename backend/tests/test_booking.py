import pytest

from factories import product_booking, provider_booking, provider_signup
from tourbook.core.errors import AuthorizationError, NotFoundError, PricingError, ValidationError
from tourbook.core.security import Principal
from tourbook.models.domain import BookingStatus, Role, TargetKind
from tourbook.models.schemas import AdminBookingCreateRequest
from tourbook.services.booking_service import BookingService
from tourbook.services.provider_service import ProviderService


def test_provider_booking_computes_price_and_saves_contact(repository, booking_service, tourist_principal, provider):
    booking = booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))

    assert booking.total_price == 95.0
    assert booking.status == BookingStatus.pending
    assert booking.target.kind == TargetKind.provider
    assert booking.provider_id == provider.id
    assert repository.get_contact(booking.contact_id) is not None


def test_currency_multiplier_applied_once(repository, tourist_principal, provider):
    service = BookingService(repository=repository, currency_multiplier=300)

    booking = service.create_for_tourist(tourist_principal, provider_booking(provider.id))

    assert booking.total_price == 28500.0
    approved = service.approve(booking.id)
    assert approved.total_price == 28500.0


def test_unapproved_provider_cannot_be_booked(repository, booking_service, tourist_principal, provider):
    repository.update_provider(provider.id, {"approved": False})

    with pytest.raises(NotFoundError):
        booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))
    assert repository.list_bookings() == []


def test_only_tourists_can_book(booking_service, provider_principal, provider):
    with pytest.raises(AuthorizationError):
        booking_service.create_for_tourist(provider_principal, provider_booking(provider.id))


def test_invalid_provider_id_rejected_before_lookup(booking_service, tourist_principal):
    with pytest.raises(ValidationError, match="Invalid Provider ID"):
        booking_service.create_for_tourist(tourist_principal, provider_booking("not-an-id"))


def test_contact_is_required(booking_service, tourist_principal, provider):
    request = provider_booking(provider.id)
    request.contact = None

    with pytest.raises(ValidationError, match="contact is required"):
        booking_service.create_for_tourist(tourist_principal, request)


def test_target_must_be_exactly_one_of_provider_or_product(booking_service, tourist_principal, provider):
    both = provider_booking(provider.id)
    both.product_type = "Jeep Safari"
    with pytest.raises(ValidationError, match="Cannot specify both"):
        booking_service.create_for_tourist(tourist_principal, both)

    neither = provider_booking(provider.id)
    neither.provider_id = None
    with pytest.raises(ValidationError, match="Either providerId or productType"):
        booking_service.create_for_tourist(tourist_principal, neither)


def test_tiered_product_booking_uses_tier_price(booking_service, tourist_principal):
    request = product_booking("Jeep Safari", adults=5, total_price=1.0)

    booking = booking_service.create_for_tourist(tourist_principal, request)

    assert booking.total_price == 150.0
    assert booking.product_type == "Jeep Safari"
    assert booking.status == BookingStatus.pending


def test_tiered_product_outside_tiers_is_rejected(repository, booking_service, tourist_principal):
    request = product_booking("Jeep Safari", adults=25, total_price=500.0)

    with pytest.raises(PricingError):
        booking_service.create_for_tourist(tourist_principal, request)
    assert repository.list_bookings() == []


def test_untiered_product_uses_supplied_total(booking_service, tourist_principal):
    booking = booking_service.create_for_tourist(
        tourist_principal, product_booking("High Tea", adults=2, total_price=42.5)
    )

    assert booking.total_price == 42.5


def test_product_booking_requires_total(booking_service, tourist_principal):
    with pytest.raises(ValidationError, match="totalPrice is required"):
        booking_service.create_for_tourist(tourist_principal, product_booking("High Tea", adults=2))


def test_unknown_product_is_not_found(booking_service, tourist_principal):
    with pytest.raises(NotFoundError):
        booking_service.create_for_tourist(
            tourist_principal, product_booking("Hot Air Balloon", adults=2, total_price=10)
        )


def test_admin_booking_computes_price_when_omitted(booking_service, tourist, provider):
    request = AdminBookingCreateRequest(tourist_id=tourist.id, **provider_booking(provider.id).model_dump())

    booking = booking_service.create_for_admin(request)

    assert booking.total_price == 95.0
    assert booking.status == BookingStatus.pending
    assert booking.tourist_id == tourist.id


def test_admin_booking_keeps_supplied_total(booking_service, tourist):
    fields = product_booking("Sundowners Cocktail", adults=3, total_price=60).model_dump()
    request = AdminBookingCreateRequest(tourist_id=tourist.id, **fields)

    assert booking_service.create_for_admin(request).total_price == 60.0


def test_admin_booking_for_missing_tourist(booking_service, provider):
    fields = provider_booking(provider.id).model_dump()
    request = AdminBookingCreateRequest(tourist_id="0" * 24, **fields)

    with pytest.raises(NotFoundError, match="Tourist not found"):
        booking_service.create_for_admin(request)


def test_approval_round_trip_keeps_price(booking_service, tourist_principal, provider):
    booking = booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))

    booking_service.approve(booking.id)
    stored = booking_service.get(booking.id)

    assert stored.status == BookingStatus.confirmed
    assert stored.total_price == 95.0


def test_approve_is_unconditional(booking_service, tourist_principal, provider):
    booking = booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))
    booking_service.cancel(booking.id)

    assert booking_service.approve(booking.id).status == BookingStatus.confirmed
    assert booking_service.approve(booking.id).status == BookingStatus.confirmed


def test_confirm_payment_is_idempotent(booking_service, tourist_principal, provider):
    booking = booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))

    first = booking_service.confirm_payment(booking.id)
    second = booking_service.confirm_payment(booking.id)

    assert first.status == second.status == BookingStatus.confirmed


def test_payment_does_not_revive_cancelled_booking(booking_service, tourist_principal, provider):
    booking = booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))
    booking_service.cancel(booking.id)

    assert booking_service.confirm_payment(booking.id).status == BookingStatus.cancelled


def test_delete_keeps_contact_submission(repository, booking_service, tourist_principal, provider):
    booking = booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))

    booking_service.delete(booking.id)

    assert repository.get_booking(booking.id) is None
    assert repository.get_contact(booking.contact_id) is not None
    with pytest.raises(NotFoundError):
        booking_service.delete(booking.id)


def test_listing_is_scoped_by_role(repository, booking_service, tourist_principal, provider, provider_principal):
    other = ProviderService(repository).register(provider_signup("Mirissa Boats", "boats@example.com"), approved=True)
    mine = booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))
    booking_service.create_for_tourist(tourist_principal, provider_booking(other.id))

    assert len(booking_service.list_for(tourist_principal)) == 2
    provider_view = booking_service.list_for(provider_principal)
    assert [v.booking.id for v in provider_view] == [mine.id]
    assert provider_view[0].provider.service_name == "Yala Jeep Tours"
    assert len(booking_service.list_for(Principal(id="0" * 24, role=Role.admin))) == 2
    assert booking_service.list_for(Principal(id="0" * 24, role=Role.tourist)) == []
