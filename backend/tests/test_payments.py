import hashlib
import json

import pytest
import stripe

from factories import (
    PAYHERE_MERCHANT_ID,
    PAYHERE_SECRET,
    product_booking,
    provider_booking,
    stripe_signature,
    succeeded_event,
)
from tourbook.core.errors import AuthorizationError, SignatureError, ValidationError
from tourbook.main import build_gateways
from tourbook.models.domain import BookingStatus
from tourbook.models.schemas import PaymentIntentRequest
from tourbook.payments.payhere_gateway import signature
from tourbook.services.payment_service import PaymentService


def payhere_fields(order_id: str, amount: str = "95.00", status_code: str = "2") -> dict:
    fields = {
        "merchant_id": PAYHERE_MERCHANT_ID,
        "order_id": order_id,
        "payhere_amount": amount,
        "amount": amount,
        "currency": "LKR",
        "status_code": status_code,
    }
    fields["md5sig"] = signature(
        PAYHERE_MERCHANT_ID,
        order_id,
        amount,
        "LKR",
        status_code,
        PAYHERE_SECRET,
    )
    return fields


@pytest.fixture
def payments(repository, booking_service, settings) -> PaymentService:
    return PaymentService(repository, booking_service, build_gateways(settings))


@pytest.fixture
def booking(booking_service, tourist_principal, provider):
    return booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))


def test_stripe_intent_tagged_with_booking(monkeypatch, payments, tourist_principal, booking):
    captured = {}

    def fake_create(**kwargs):
        captured.update(kwargs)
        return {"id": "pi_123", "client_secret": "pi_123_secret"}

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)

    response = payments.create_intent(
        tourist_principal, PaymentIntentRequest(booking_id=booking.id, payment_method="stripe")
    )

    assert response.client_secret == "pi_123_secret"
    assert captured["amount"] == 9500
    assert captured["metadata"]["bookingId"] == booking.id
    assert captured["metadata"]["providerId"] == booking.provider_id
    assert captured["metadata"]["touristId"] == tourist_principal.id


def test_payhere_checkout_hash(payments, tourist_principal, booking):
    response = payments.create_intent(
        tourist_principal, PaymentIntentRequest(booking_id=booking.id, payment_method="payhere")
    )

    data = response.pay_here_data
    expected = hashlib.md5(
        f"{PAYHERE_MERCHANT_ID}{booking.id}95.00LKR{PAYHERE_SECRET}".encode("utf-8")
    ).hexdigest().upper()
    assert data["hash"] == expected
    assert data["order_id"] == booking.id
    assert data["items"] == "Yala Jeep Tours"
    assert data["first_name"] == "Nimal"
    assert response.checkout_url.startswith("https://")


def test_intent_rejected_for_other_tourist(payments, booking, provider_principal):
    with pytest.raises(AuthorizationError):
        payments.create_intent(
            provider_principal, PaymentIntentRequest(booking_id=booking.id, payment_method="payhere")
        )


def test_intent_rejected_for_confirmed_booking(payments, booking_service, tourist_principal, booking):
    booking_service.approve(booking.id)

    with pytest.raises(ValidationError):
        payments.create_intent(
            tourist_principal, PaymentIntentRequest(booking_id=booking.id, payment_method="payhere")
        )


def test_unknown_payment_method(payments, tourist_principal, booking):
    with pytest.raises(ValidationError, match="Payment method"):
        payments.create_intent(
            tourist_principal, PaymentIntentRequest(booking_id=booking.id, payment_method="cash")
        )


def test_stripe_webhook_confirms_booking_once(payments, booking_service, booking):
    payload = succeeded_event(booking.id)

    first = payments.handle_stripe_webhook(payload, stripe_signature(payload))
    second = payments.handle_stripe_webhook(payload, stripe_signature(payload))

    assert first.confirmed and second.confirmed
    assert booking_service.get(booking.id).status == BookingStatus.confirmed


def test_stripe_webhook_bad_signature_changes_nothing(payments, booking_service, booking):
    payload = succeeded_event(booking.id)

    with pytest.raises(SignatureError):
        payments.handle_stripe_webhook(payload, stripe_signature(payload, secret="whsec_wrong"))
    with pytest.raises(SignatureError):
        payments.handle_stripe_webhook(payload, None)

    assert booking_service.get(booking.id).status == BookingStatus.pending


def test_stripe_webhook_ignores_other_events(payments, booking_service, booking):
    payload = json.dumps(
        {"id": "evt_2", "object": "event", "type": "payment_intent.created", "data": {"object": {}}}
    ).encode("utf-8")

    result = payments.handle_stripe_webhook(payload, stripe_signature(payload))

    assert not result.confirmed
    assert booking_service.get(booking.id).status == BookingStatus.pending


def test_stripe_webhook_for_missing_booking_is_acknowledged(payments):
    payload = succeeded_event("0" * 24)

    result = payments.handle_stripe_webhook(payload, stripe_signature(payload))

    assert not result.confirmed


def test_payhere_success_confirms_and_repeats_safely(payments, booking_service, booking):
    fields = payhere_fields(booking.id)

    assert payments.handle_payhere_notification(fields).confirmed
    assert payments.handle_payhere_notification(fields).confirmed
    assert booking_service.get(booking.id).status == BookingStatus.confirmed


def test_payhere_tampered_hash_is_ignored(payments, booking_service, booking):
    fields = payhere_fields(booking.id)
    fields["md5sig"] = "0" * 32

    result = payments.handle_payhere_notification(fields)

    assert not result.confirmed
    assert booking_service.get(booking.id).status == BookingStatus.pending


@pytest.mark.parametrize("field, value", [("amount", "1.00"), ("currency", "USD"), ("status_code", "0")])
def test_payhere_altered_field_is_ignored(payments, booking_service, booking, field, value):
    fields = payhere_fields(booking.id)
    fields[field] = value

    assert not payments.handle_payhere_notification(fields).confirmed
    assert booking_service.get(booking.id).status == BookingStatus.pending


def test_payhere_non_success_status_is_ignored(payments, booking_service, booking):
    fields = payhere_fields(booking.id, status_code="-2")

    result = payments.handle_payhere_notification(fields)

    assert not result.confirmed
    assert booking_service.get(booking.id).status == BookingStatus.pending


def test_payhere_signature_alias_is_accepted(payments, booking_service, booking):
    fields = payhere_fields(booking.id)
    fields["signature"] = fields.pop("md5sig")

    assert payments.handle_payhere_notification(fields).confirmed


def test_payhere_on_product_booking(payments, booking_service, tourist_principal):
    booking = booking_service.create_for_tourist(
        tourist_principal, product_booking("Catamaran Boat Ride", adults=2, total_price=1)
    )

    assert booking.total_price == 14.0
    assert payments.handle_payhere_notification(payhere_fields(booking.id, amount="14.00")).confirmed
