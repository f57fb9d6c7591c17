from typing import Dict, List, Optional

from tourbook.models.domain import PriceTier, Product


def _tiers(*rows):
    return tuple(PriceTier(min_persons=lo, max_persons=hi, unit_price=price) for lo, hi, price in rows)


# Headline prices and tiers are in the catalog currency (USD).
PRODUCTS: List[Product] = [
    Product(
        name="Jeep Safari",
        price=38,
        description="Explore the wilderness with an exciting jeep safari adventure.",
        tiers=_tiers((1, 3, 38), (4, 5, 30), (6, 10, 20), (11, 20, 15)),
    ),
    Product(
        name="Tuk Tuk Adventures",
        price=None,
        description="Experience the local culture with a thrilling tuk-tuk ride.",
    ),
    Product(
        name="Catamaran Boat Ride",
        price=9.8,
        description="Sail on a traditional catamaran for a serene experience.",
        tiers=_tiers((1, 1, 9.8), (2, None, 7)),
    ),
    Product(
        name="Village Cooking Experience",
        price=15,
        description="Learn to cook authentic local dishes with villagers.",
        tiers=_tiers((1, 5, 15), (6, 10, 13), (11, 20, 11), (21, 50, 10)),
    ),
    Product(
        name="Traditional Village Lunch",
        price=15,
        description="Enjoy a delicious traditional meal in a village setting.",
        tiers=_tiers((1, None, 15)),
    ),
    Product(
        name="Sundowners Cocktail",
        price=None,
        description="Relax with a cocktail while watching the sunset.",
    ),
    Product(
        name="High Tea",
        price=None,
        description="Indulge in a classic high tea experience.",
    ),
    Product(
        name="Bullock Cart Ride",
        price=9.9,
        description="Travel back in time with a traditional bullock cart ride.",
        tiers=_tiers((1, 5, 9.9), (6, 20, 5), (21, 50, 4)),
    ),
    Product(
        name="Budget Village Tour",
        price=19.9,
        description="Discover village life on a budget-friendly tour.",
    ),
    Product(
        name="Village Tour",
        price=19.9,
        description="Immerse yourself in the rich culture and traditions of a local village.",
        tiers=_tiers((1, 5, 19.9), (6, 10, 18.2), (11, 20, 17.3), (21, 30, 16.3), (31, 50, 15)),
    ),
]


class ProductCatalog:
    """Static curated products; lookups are by exact display name."""

    def __init__(self, products: Optional[List[Product]] = None) -> None:
        self._products: Dict[str, Product] = {p.name: p for p in (products or PRODUCTS)}

    def list_products(self) -> List[Product]:
        return list(self._products.values())

    def get(self, name: str) -> Optional[Product]:
        return self._products.get(name)

    def has_product(self, name: str) -> bool:
        return name in self._products
