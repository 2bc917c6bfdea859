from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from domain.catalog import Packing, Product
from domain.customer import Customer
from domain.errors import InvalidStateError


class OrderStatus(str, Enum):
    REGISTERED = "Registered"
    FINISHED = "Finished"
    CANCELED = "Canceled"


ORDER_FIELDS = (
    "customer_id",
    "order_date",
    "delivery_date",
    "status",
    "discount",
    "shipping",
    "observation",
    "items",
)
ITEM_FIELDS = ("amount", "product_id", "packing_id", "unit_price")

# Registered is the only state with outgoing transitions
TRANSITIONS = {
    OrderStatus.REGISTERED: {OrderStatus.FINISHED, OrderStatus.CANCELED},
    OrderStatus.FINISHED: set(),
    OrderStatus.CANCELED: set(),
}


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class OrderItem:
    product_id: int
    amount: float
    packing_id: Optional[int] = None
    unit_price: Optional[float] = None
    id: Optional[int] = None
    order_id: Optional[int] = None
    product: Optional[Product] = None
    packing: Optional[Packing] = None

    def total(self) -> float:
        return self.amount * (self.unit_price or 0.0)


@dataclass
class Order:
    customer_id: int
    order_date: str
    delivery_date: str
    status: str = OrderStatus.REGISTERED.value
    discount: float = 0.0
    shipping: float = 0.0
    observation: Optional[str] = None
    items: List[OrderItem] = field(default_factory=list)
    id: Optional[int] = None
    customer: Optional[Customer] = None

    @property
    def total_amount(self) -> float:
        return sum(item.total() for item in self.items) - self.discount + self.shipping

    def values(self) -> Dict[str, Any]:
        """Fields written on create/update; items are replaced as a whole."""
        return {
            "customer_id": self.customer_id,
            "order_date": self.order_date,
            "delivery_date": self.delivery_date,
            "status": self.status,
            "discount": self.discount,
            "shipping": self.shipping,
            "observation": self.observation,
            "items": self.items,
        }


def ensure_transition(current: str, target: OrderStatus) -> None:
    """Raise InvalidStateError unless current -> target is allowed."""
    if current == OrderStatus.FINISHED.value:
        raise InvalidStateError("The order is already finished")
    if current == OrderStatus.CANCELED.value:
        raise InvalidStateError("The order is already canceled")

    try:
        allowed = TRANSITIONS[OrderStatus(current)]
    except ValueError:
        raise InvalidStateError(f"Unknown order status: {current}") from None
    if target not in allowed:
        raise InvalidStateError(f"Cannot change order from {current} to {target.value}")
