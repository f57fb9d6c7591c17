import pytest

from factories import product_booking, provider_booking
from tourbook.core.errors import AuthorizationError, NotFoundError, ValidationError
from tourbook.models.domain import ReviewKind, TargetKind, TargetRef
from tourbook.models.schemas import ReviewCreateRequest
from tourbook.services.review_service import ReviewService


@pytest.fixture
def reviews(repository) -> ReviewService:
    return ReviewService(repository=repository)


@pytest.fixture
def confirmed_booking(booking_service, tourist_principal, provider):
    booking = booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))
    return booking_service.approve(booking.id)


def service_review(provider_id: str, rating: int = 5, comment: str = "Saw three leopards!") -> ReviewCreateRequest:
    return ReviewCreateRequest(target_id=provider_id, rating=rating, comment=comment, review_type="service")


def test_review_requires_confirmed_booking(reviews, booking_service, tourist_principal, provider):
    with pytest.raises(AuthorizationError, match="No confirmed booking"):
        reviews.submit(tourist_principal, service_review(provider.id))

    booking = booking_service.create_for_tourist(tourist_principal, provider_booking(provider.id))
    with pytest.raises(AuthorizationError):
        reviews.submit(tourist_principal, service_review(provider.id))

    booking_service.approve(booking.id)
    review = reviews.submit(tourist_principal, service_review(provider.id))
    assert review.approved
    assert review.target == TargetRef(TargetKind.provider, provider.id)


def test_service_review_is_public_with_names(reviews, confirmed_booking, tourist_principal, provider):
    reviews.submit(tourist_principal, service_review(provider.id))

    listed = reviews.list_for_provider(provider.id)

    assert len(listed) == 1
    assert listed[0].reviewer_name == "Nimal Perera"
    assert listed[0].target_name == "Yala Jeep Tours"
    assert reviews.list_public(kind=ReviewKind.service)[0].review.comment == "Saw three leopards!"


def test_review_survives_booking_deletion(reviews, booking_service, confirmed_booking, tourist_principal, provider):
    review = reviews.submit(tourist_principal, service_review(provider.id))

    booking_service.delete(confirmed_booking.id)

    assert [v.review.id for v in reviews.list_for_provider(provider.id)] == [review.id]


def test_tourist_review_needs_admin_approval(reviews, confirmed_booking, provider_principal, tourist):
    request = ReviewCreateRequest(
        target_id=tourist.id, rating=4, comment="Punctual and friendly", review_type="tourist"
    )

    review = reviews.submit(provider_principal, request)

    assert not review.approved
    assert reviews.list_for_tourist(tourist.id) == []
    reviews.approve(review.id)
    assert [v.review.id for v in reviews.list_for_tourist(tourist.id)] == [review.id]
    assert reviews.list_for_tourist(tourist.id)[0].reviewer_name == "Yala Jeep Tours"


def test_product_review_matched_by_label(reviews, booking_service, tourist_principal):
    booking = booking_service.create_for_tourist(tourist_principal, product_booking("Jeep Safari", adults=2, total_price=1))
    request = ReviewCreateRequest(target_id="Jeep Safari", rating=5, comment="Great guide", review_type="product")

    with pytest.raises(AuthorizationError):
        reviews.submit(tourist_principal, request)

    booking_service.approve(booking.id)
    review = reviews.submit(tourist_principal, request)
    assert review.approved
    assert reviews.list_for_product("Jeep Safari")[0].target_name == "Jeep Safari"


def test_wrong_role_for_review_kind(reviews, confirmed_booking, provider_principal, provider):
    with pytest.raises(AuthorizationError, match="Access denied"):
        reviews.submit(provider_principal, service_review(provider.id))


@pytest.mark.parametrize(
    "rating, comment, kind, message",
    [
        (0, "ok", "service", "Rating"),
        (6, "ok", "service", "Rating"),
        (5, "   ", "service", "Comment is required"),
        (5, "ok", "hotel", "Review type"),
    ],
)
def test_review_input_validation(reviews, tourist_principal, provider, rating, comment, kind, message):
    request = ReviewCreateRequest(target_id=provider.id, rating=rating, comment=comment, review_type=kind)

    with pytest.raises(ValidationError, match=message):
        reviews.submit(tourist_principal, request)


def test_review_target_must_exist(reviews, tourist_principal):
    with pytest.raises(ValidationError, match="Invalid Service or Tourist ID"):
        reviews.submit(tourist_principal, service_review("abc"))
    with pytest.raises(NotFoundError):
        reviews.submit(tourist_principal, service_review("0" * 24))


def test_orphaned_reviews_are_dropped_from_public_lists(
    repository, reviews, confirmed_booking, tourist_principal, provider
):
    reviews.submit(tourist_principal, service_review(provider.id))

    repository.delete_tourist(tourist_principal.id)

    assert reviews.list_public(kind=ReviewKind.service) == []
    assert len(reviews.list_admin()) == 1


def test_public_listing_limit(reviews, confirmed_booking, tourist_principal, provider):
    for n in range(3):
        reviews.submit(tourist_principal, service_review(provider.id, comment=f"Visit {n}"))

    assert len(reviews.list_public(kind=ReviewKind.service, limit=2)) == 2


def test_admin_delete_review(reviews, confirmed_booking, tourist_principal, provider):
    review = reviews.submit(tourist_principal, service_review(provider.id))

    reviews.delete(review.id)

    assert reviews.list_for_provider(provider.id) == []
    with pytest.raises(NotFoundError):
        reviews.delete(review.id)
