"""Line item normalization and server-side price resolution."""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from domain.catalog import Packing, Product
from domain.errors import InvalidOrderItemsError, NotFoundError, ValidationError
from domain.fields import is_integer, is_number, project
from domain.order import ITEM_FIELDS, OrderItem

PACKED_WITHOUT_PACKING = "Items without packing_id, but the product is packed"
PACKING_NOT_FOUND = "Item packing not found"
PRODUCT_NOT_FOUND = "Item product not found"
PRODUCT_WITHOUT_PRICE = "Item product has no unit price"


class CatalogLookup(Protocol):
    async def show(self, product_id: int) -> Product: ...
    async def list_packings(self) -> List[Packing]: ...


def normalize_items(raw_items: Any) -> List[OrderItem]:
    """Validate raw line items and keep only the recognized fields.

    A single invalid item rejects the whole batch.
    """
    if raw_items is None:
        return []
    if not isinstance(raw_items, (list, tuple)):
        raise ValidationError("Invalid order item", detail="Items must be a list")

    items = []
    for raw in raw_items:
        if not isinstance(raw, Mapping):
            raise ValidationError("Invalid order item", detail="Item must be an object")

        fields = project(raw, ITEM_FIELDS)
        amount = fields.get("amount")
        if amount is None:
            raise ValidationError("Invalid order item", detail="Item's amount is required")
        if not is_number(amount):
            raise ValidationError("Invalid order item", detail="Item's amount must be a number")
        if amount < 0:
            raise ValidationError("Invalid order item", detail="Item's amount must not be negative")
        if fields.get("product_id") is None:
            raise ValidationError("Invalid order item", detail="Item's product_id is required")
        if not is_integer(fields["product_id"]):
            raise ValidationError("Invalid order item", detail="Item's product_id must be an integer")
        if fields.get("packing_id") is not None and not is_integer(fields["packing_id"]):
            raise ValidationError("Invalid order item", detail="Item's packing_id must be an integer")

        items.append(
            OrderItem(
                product_id=fields["product_id"],
                packing_id=fields.get("packing_id"),
                amount=amount,
                unit_price=fields.get("unit_price"),
            )
        )
    return items


class PriceResolver:
    """Recomputes every item's unit price from the current catalog."""

    def __init__(self, catalog: CatalogLookup):
        self.catalog = catalog

    async def resolve(self, items: Sequence[OrderItem], attach_catalog: bool = False) -> List[OrderItem]:
        if not items:
            return []

        packings: Dict[Any, Packing] = {packing.id: packing for packing in await self.catalog.list_packings()}
        resolved = []
        for item in items:
            product = await self._product(item.product_id)
            packing: Optional[Packing] = None

            if product.is_packed:
                if item.packing_id is None:
                    raise InvalidOrderItemsError(detail=PACKED_WITHOUT_PACKING)
                packing = packings.get(item.packing_id)
                option = product.packing_option(item.packing_id)
                if packing is None or option is None:
                    raise InvalidOrderItemsError(detail=PACKING_NOT_FOUND)
                unit_price = option.product_packing.price
            else:
                if product.unit_price is None:
                    raise InvalidOrderItemsError(detail=PRODUCT_WITHOUT_PRICE)
                unit_price = product.unit_price

            priced = replace(item, unit_price=unit_price)
            if attach_catalog:
                priced = replace(priced, product=product, packing=packing)
            resolved.append(priced)
        return resolved

    async def _product(self, product_id: int) -> Product:
        try:
            return await self.catalog.show(product_id)
        except NotFoundError as exc:
            raise InvalidOrderItemsError(detail=PRODUCT_NOT_FOUND) from exc
