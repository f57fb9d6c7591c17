"""
Booking price rules.

Provider bookings are charged the provider's base rate per adult and half of
it per child. Curated products with a tier table are charged a flat unit price
per person, where the unit price depends on the total headcount.
"""
from typing import Optional, Sequence

from tourbook.core.errors import PricingError
from tourbook.models.domain import PriceTier

CHILD_RATE = 0.5


def validate_headcount(adults, children) -> None:
    for name, value in (("adults", adults), ("children", children)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise PricingError(f"{name} must be a whole number")
    if adults < 1:
        raise PricingError("At least one adult is required")
    if children < 0:
        raise PricingError("children cannot be negative")


def find_tier(tiers: Sequence[PriceTier], persons: int) -> Optional[PriceTier]:
    for tier in tiers:
        if tier.contains(persons):
            return tier
    return None


def compute_price(
    base_rate: Optional[float],
    adults: int,
    children: int = 0,
    tiers: Optional[Sequence[PriceTier]] = None,
) -> float:
    validate_headcount(adults, children)
    if tiers:
        persons = adults + children
        tier = find_tier(tiers, persons)
        if tier is None:
            raise PricingError(f"No pricing available for {persons} persons")
        return round(persons * tier.unit_price, 2)
    if base_rate is None:
        raise PricingError("No pricing available")
    if base_rate < 0:
        raise PricingError("Base rate cannot be negative")
    return round(base_rate * (adults + CHILD_RATE * children), 2)


def convert_currency(amount: float, multiplier: float) -> float:
    return round(amount * multiplier, 2)
