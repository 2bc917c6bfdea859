from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


def non_negative(value: Any) -> float:
    """Coerce a price or quantity to a non-negative float, zero when malformed."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number or number < 0:
        return 0.0
    return number


@dataclass
class Category:
    name: str
    image_url: str
    category_id: Optional[int] = None
    id: Optional[int] = None


@dataclass
class Feature:
    name: str
    id: Optional[int] = None


@dataclass
class Packing:
    name: str
    size: float
    unit: str
    unit_abbreviation: str
    cost: float
    id: Optional[int] = None


@dataclass
class ProductPacking:
    """Price and quantity of one packing for one product."""

    product_id: int
    packing_id: int
    price: float = 0.0
    quantity: float = 0.0
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.price = non_negative(self.price)
        self.quantity = non_negative(self.quantity)


@dataclass
class PackingOption(Packing):
    """A packing definition as offered by a specific product."""

    product_packing: Optional[ProductPacking] = None


@dataclass
class Product:
    name: str
    description: str
    is_packed: bool
    unit_cost: float
    category_id: int
    is_activated: bool = True
    unit_price: Optional[float] = None
    id: Optional[int] = None
    packings: List[PackingOption] = field(default_factory=list)
    features: List[Feature] = field(default_factory=list)
    category: Optional[Category] = None

    def packing_option(self, packing_id: int) -> Optional[PackingOption]:
        """Return the packing option priced for this product, if any."""
        for option in self.packings:
            entry = option.product_packing
            if option.id != packing_id or entry is None:
                continue
            if entry.packing_id == packing_id and entry.product_id == self.id:
                return option
        return None
