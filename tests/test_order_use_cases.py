import pytest

from application.use_cases import (
    ChangeOrderStatusUseCase,
    CreateOrderUseCase,
    DeleteOrderUseCase,
    ListOrdersUseCase,
    ShowOrderUseCase,
    UpdateOrderUseCase,
)
from domain.errors import InvalidOrderItemsError, InvalidStateError, NotFoundError
from domain.order import Order, OrderItem, OrderStatus
from fakes import (
    InMemoryCustomerRepo,
    InMemoryOrderRepo,
    InMemoryProductRepo,
    InMemoryUoW,
    customer,
    packed_product,
    packing_definition,
    unpacked_product,
)
from infrastructure.metrics import metrics


def stored_order(order_id: int = 123, status: str = "Registered") -> Order:
    return Order(
        id=order_id,
        customer_id=2,
        order_date="2026-10-17T10:00:00+00:00",
        delivery_date="2026-10-18T10:00:00+00:00",
        status=status,
        discount=5.0,
        shipping=4.5,
        items=[
            OrderItem(id=1, order_id=order_id, product_id=1, packing_id=10, amount=5, unit_price=25.0),
            OrderItem(id=2, order_id=order_id, product_id=2, packing_id=None, amount=5, unit_price=16.0),
        ],
    )


def make_uow(*orders) -> InMemoryUoW:
    return InMemoryUoW(
        orders=InMemoryOrderRepo(orders),
        products=InMemoryProductRepo([packed_product(), unpacked_product()], [packing_definition(10)]),
        customers=InMemoryCustomerRepo([customer(2)]),
    )


@pytest.mark.asyncio
async def test_create_order_prices_and_saves():
    uow = make_uow()
    payload = {"customer_id": 2, "items": [{"product_id": 1, "packing_id": 10, "amount": 5, "unit_price": 1}]}

    order = await CreateOrderUseCase(uow).execute(payload)

    assert order.id == 1
    assert uow.committed is True
    assert uow.orders.storage[1].items[0].unit_price == 25.00
    assert order.items[0].product == packed_product()
    assert order.items[0].packing == packing_definition(10)
    assert metrics.value("orders_created_total") == 1


@pytest.mark.asyncio
async def test_create_order_with_invalid_items_saves_nothing():
    uow = make_uow()
    payload = {"customer_id": 2, "items": [{"product_id": 1, "amount": 5}]}

    with pytest.raises(InvalidOrderItemsError):
        await CreateOrderUseCase(uow).execute(payload)

    assert uow.orders.created == []
    assert uow.committed is False
    assert metrics.value("order_submissions_rejected_total") == 1


@pytest.mark.asyncio
async def test_update_order_replaces_fields_and_items():
    uow = make_uow(stored_order())
    payload = {"customer_id": 2, "items": [{"product_id": 2, "amount": 1}]}

    order = await UpdateOrderUseCase(uow).execute(123, payload)

    assert order.id == 123
    order_id, values, where = uow.orders.updates[0]
    assert order_id == 123
    assert where is None
    assert values["discount"] == 0
    assert [(i.product_id, i.amount, i.unit_price) for i in values["items"]] == [(2, 1, 16.0)]
    assert uow.orders.storage[123].items == values["items"]


@pytest.mark.asyncio
async def test_update_missing_order_raises_not_found():
    uow = make_uow()

    with pytest.raises(NotFoundError):
        await UpdateOrderUseCase(uow).execute(999, {"customer_id": 2})

    assert uow.committed is False


@pytest.mark.asyncio
async def test_delete_order():
    uow = make_uow(stored_order())

    await DeleteOrderUseCase(uow).execute(123)

    assert uow.orders.deleted == [123]
    assert uow.committed is True


@pytest.mark.asyncio
async def test_show_order_attaches_customer_products_and_packings():
    uow = make_uow(stored_order())

    order = await ShowOrderUseCase(uow).execute(123)

    assert order.customer == customer(2)
    assert [item.product.id for item in order.items] == [1, 2]
    assert order.items[0].packing == packing_definition(10)
    assert order.items[1].packing is None
    # stored prices are not recomputed on read
    assert [item.unit_price for item in order.items] == [25.0, 16.0]


@pytest.mark.asyncio
async def test_list_orders_fetches_packings_once():
    uow = make_uow(stored_order(1), stored_order(2))

    orders = await ListOrdersUseCase(uow).execute()

    assert [order.id for order in orders] == [1, 2]
    assert all(order.customer is not None for order in orders)
    assert uow.products.list_packings_calls == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("target", [OrderStatus.FINISHED, OrderStatus.CANCELED])
async def test_registered_order_status_write_touches_only_status(target):
    uow = make_uow(stored_order(123))

    order = await ChangeOrderStatusUseCase(uow).execute(123, target)

    assert order.status == target.value
    assert uow.orders.updates == [(123, {"status": target.value}, {"status": "Registered"})]
    assert uow.orders.storage[123].discount == 5.0
    assert uow.committed is True
    assert metrics.value(f"orders_{target.value.lower()}_total") == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, message",
    [("Finished", "The order is already finished"), ("Canceled", "The order is already canceled")],
)
@pytest.mark.parametrize("target", [OrderStatus.FINISHED, OrderStatus.CANCELED])
async def test_terminal_order_status_is_never_written(status, message, target):
    uow = make_uow(stored_order(123, status=status))

    with pytest.raises(InvalidStateError) as exc_info:
        await ChangeOrderStatusUseCase(uow).execute(123, target)

    assert exc_info.value.message == message
    assert uow.orders.updates == []
    assert uow.committed is False


@pytest.mark.asyncio
async def test_status_change_on_missing_order_raises_not_found():
    uow = make_uow()

    with pytest.raises(NotFoundError):
        await ChangeOrderStatusUseCase(uow).execute(123, OrderStatus.FINISHED)

    assert uow.orders.updates == []


class RacingOrderRepo(InMemoryOrderRepo):
    """Another request cancels the order between our read and our write."""

    async def show(self, order_id):
        order = await super().show(order_id)
        if not self.updates:
            self.storage[order_id] = stored_order(order_id, status="Canceled")
        return order


@pytest.mark.asyncio
async def test_concurrent_transition_loses_instead_of_overwriting():
    uow = make_uow()
    uow.orders = RacingOrderRepo([stored_order(123)])

    with pytest.raises(InvalidStateError) as exc_info:
        await ChangeOrderStatusUseCase(uow).execute(123, OrderStatus.FINISHED)

    assert exc_info.value.message == "The order is already canceled"
    assert uow.orders.storage[123].status == "Canceled"
    assert uow.committed is False
