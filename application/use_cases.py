from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol

from application.assembler import OrderAssembler
from application.pricing import CatalogLookup, PriceResolver
from domain.catalog import Packing, Product
from domain.customer import Customer
from domain.errors import DomainError, InvalidStateError
from domain.order import Order, OrderItem, OrderStatus, ensure_transition
from infrastructure.logging import get_logger
from infrastructure.metrics import metrics

logger = get_logger()


class OrderRepository(Protocol):
    async def create(self, order: Order) -> int: ...
    async def update(self, order_id: int, values: Mapping[str, Any], where: Optional[Mapping[str, Any]] = None) -> bool: ...
    async def show(self, order_id: int) -> Order: ...
    async def list(self) -> List[Order]: ...
    async def delete(self, order_id: int) -> None: ...


class CustomerRepository(Protocol):
    async def show(self, customer_id: int) -> Customer: ...


class UnitOfWork(Protocol):
    async def __aenter__(self) -> "UnitOfWork": ...
    async def __aexit__(self, exc_type, exc, tb) -> None: ...
    async def commit(self) -> None: ...
    @property
    def orders(self) -> OrderRepository: ...
    @property
    def products(self) -> CatalogLookup: ...
    @property
    def customers(self) -> CustomerRepository: ...


async def _assemble(uow: UnitOfWork, payload: Any) -> Order:
    """Validate and price a submission; items come back with their product and packing."""
    assembler = OrderAssembler(PriceResolver(uow.products))
    try:
        return await assembler.assemble(payload, attach_catalog=True)
    except DomainError:
        metrics.increment("order_submissions_rejected_total")
        raise


class CreateOrderUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, payload: Any) -> Order:
        async with self.uow:
            order = await _assemble(self.uow, payload)
            order.id = await self.uow.orders.create(order)
            await self.uow.commit()
        metrics.increment("orders_created_total")
        logger.info("Order created", order_id=order.id, customer_id=order.customer_id, items=len(order.items))
        return order


class UpdateOrderUseCase:
    """Replaces an order, items included, with a freshly priced submission."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, order_id: int, payload: Any) -> Order:
        async with self.uow:
            order = await _assemble(self.uow, payload)
            await self.uow.orders.update(order_id, order.values())
            await self.uow.commit()
        order.id = order_id
        metrics.increment("orders_updated_total")
        logger.info("Order updated", order_id=order_id, items=len(order.items))
        return order


class DeleteOrderUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, order_id: int) -> None:
        async with self.uow:
            await self.uow.orders.delete(order_id)
            await self.uow.commit()
        metrics.increment("orders_deleted_total")
        logger.info("Order deleted", order_id=order_id)


class OrderDetailsLoader:
    """Attaches customer, product and packing records to stored orders.

    Stored unit prices are kept; nothing is repriced on the read path.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self._customers: Dict[Any, Customer] = {}
        self._products: Dict[Any, Product] = {}
        self._packings: Optional[Dict[Any, Packing]] = None

    async def load(self, order: Order) -> Order:
        if order.customer_id not in self._customers:
            self._customers[order.customer_id] = await self.uow.customers.show(order.customer_id)
        order.customer = self._customers[order.customer_id]
        order.items = [await self._load_item(item) for item in order.items]
        return order

    async def _load_item(self, item: OrderItem) -> OrderItem:
        if item.product_id not in self._products:
            self._products[item.product_id] = await self.uow.products.show(item.product_id)
        item.product = self._products[item.product_id]

        if item.packing_id is not None:
            if self._packings is None:
                self._packings = {p.id: p for p in await self.uow.products.list_packings()}
            item.packing = self._packings.get(item.packing_id)
        return item


class ShowOrderUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, order_id: int) -> Order:
        async with self.uow:
            order = await self.uow.orders.show(order_id)
            return await OrderDetailsLoader(self.uow).load(order)


class ListOrdersUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> List[Order]:
        async with self.uow:
            loader = OrderDetailsLoader(self.uow)
            return [await loader.load(order) for order in await self.uow.orders.list()]


class ChangeOrderStatusUseCase:
    """Finish or cancel a Registered order.

    The write is conditional on the status that was read, so a concurrent
    transition makes this one fail instead of overwriting it.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, order_id: int, target: OrderStatus) -> Order:
        async with self.uow:
            order = await self.uow.orders.show(order_id)
            ensure_transition(order.status, target)

            written = await self.uow.orders.update(
                order_id, {"status": target.value}, where={"status": order.status}
            )
            if not written:
                current = await self.uow.orders.show(order_id)
                ensure_transition(current.status, target)
                raise InvalidStateError(f"The order changed to {current.status} concurrently")
            await self.uow.commit()

        previous, order.status = order.status, target.value
        metrics.increment(f"orders_{target.value.lower()}_total")
        logger.info("Order status changed", order_id=order_id, previous=previous, status=target.value)
        return order
