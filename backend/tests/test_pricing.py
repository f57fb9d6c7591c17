import pytest

from tourbook.core.errors import PricingError
from tourbook.services.catalog import ProductCatalog
from tourbook.services.pricing import compute_price, convert_currency, find_tier


def test_provider_rate_charges_half_for_children():
    assert compute_price(38, adults=2, children=1) == 95.0
    assert compute_price(20, adults=1) == 20.0


def test_tiered_product_uses_unit_price_for_headcount():
    jeep = ProductCatalog().get("Jeep Safari")

    assert compute_price(None, adults=2, children=1, tiers=jeep.tiers) == 3 * 38
    assert compute_price(None, adults=4, children=2, tiers=jeep.tiers) == 6 * 20
    assert compute_price(None, adults=20, tiers=jeep.tiers) == 20 * 15


def test_open_ended_tier_matches_large_groups():
    catamaran = ProductCatalog().get("Catamaran Boat Ride")

    assert compute_price(None, adults=1, tiers=catamaran.tiers) == 9.8
    assert compute_price(None, adults=40, tiers=catamaran.tiers) == 280.0


def test_headcount_outside_every_tier_is_rejected():
    jeep = ProductCatalog().get("Jeep Safari")
    assert find_tier(jeep.tiers, 21) is None

    with pytest.raises(PricingError, match="No pricing available"):
        compute_price(None, adults=21, tiers=jeep.tiers)


@pytest.mark.parametrize(
    "adults, children",
    [(0, 1), (-1, 0), (2, -1), (1.5, 0), (True, 0)],
)
def test_invalid_headcounts_are_rejected(adults, children):
    with pytest.raises(PricingError):
        compute_price(38, adults=adults, children=children)


def test_untiered_product_without_rate_has_no_price():
    with pytest.raises(PricingError):
        compute_price(None, adults=2)


def test_currency_conversion_rounds_to_cents():
    assert convert_currency(95.0, 300) == 28500.0
    assert convert_currency(9.8, 1.0) == 9.8
