from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from application.pricing import PriceResolver, normalize_items
from domain.errors import DomainError, InvalidOrderItemsError, OrderNotProvidedError, ValidationError
from domain.fields import is_integer, is_number, project
from domain.order import ORDER_FIELDS, Order, OrderStatus, utcnow


class OrderAssembler:
    """Turns a raw order payload into a validated, priced Order.

    Nothing is persisted here; the only side effects are the catalog
    lookups made by the price resolver.
    """

    def __init__(self, resolver: PriceResolver):
        self.resolver = resolver

    async def assemble(self, payload: Any, attach_catalog: bool = False) -> Order:
        if not payload:
            raise OrderNotProvidedError()
        if not isinstance(payload, Mapping):
            raise ValidationError(detail="Order must be an object")

        fields = project(payload, ORDER_FIELDS)
        if fields.get("customer_id") is None:
            raise ValidationError(detail="Customer's id is required")
        if not is_integer(fields["customer_id"]):
            raise ValidationError(detail="Customer's id must be an integer")

        status = fields.get("status")
        if status is None:
            status = OrderStatus.REGISTERED.value
        elif not isinstance(status, str) or status not in {s.value for s in OrderStatus}:
            raise ValidationError(detail=f"Unknown order status: {status}")

        discount = self._amount(fields, "discount")
        shipping = self._amount(fields, "shipping")

        order_date = self._date(fields, "order_date", "Order date")
        delivery_date = self._date(fields, "delivery_date", "Delivery date")
        observation = fields.get("observation")
        if observation is not None and not isinstance(observation, str):
            raise ValidationError(detail="Observation must be a string")

        try:
            items = normalize_items(fields.get("items"))
            items = await self.resolver.resolve(items, attach_catalog=attach_catalog)
        except InvalidOrderItemsError:
            raise
        except DomainError as exc:
            raise InvalidOrderItemsError(detail=exc.detail or exc.message) from exc

        now = utcnow()
        return Order(
            customer_id=fields["customer_id"],
            order_date=now if order_date is None else order_date,
            delivery_date=now if delivery_date is None else delivery_date,
            status=status,
            discount=discount,
            shipping=shipping,
            observation=observation,
            items=items,
        )

    @staticmethod
    def _amount(fields: Mapping[str, Any], name: str) -> float:
        value = fields.get(name)
        if value is None:
            return 0
        if not is_number(value) or value < 0:
            raise ValidationError(detail=f"{name.capitalize()} must be a non-negative number")
        return value

    @staticmethod
    def _date(fields: Mapping[str, Any], name: str, label: str) -> Optional[str]:
        value = fields.get(name)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValidationError(detail=f"{label} must be an ISO-8601 string")
        try:
            datetime.fromisoformat(value)
        except ValueError:
            raise ValidationError(detail=f"{label} must be an ISO-8601 string") from None
        return value
