import pytest
import pytest_asyncio
from sqlalchemy import select

from domain.errors import NotFoundError
from domain.order import Order, OrderItem
from infrastructure import db, tables
from seed import seed_catalog


@pytest_asyncio.fixture
async def catalog(db_engine):
    return await seed_catalog(db_engine)


def new_order(catalog, status="Registered") -> Order:
    return Order(
        customer_id=catalog["customer_id"],
        order_date="2026-10-17T10:00:00+00:00",
        delivery_date="2026-10-18T10:00:00+00:00",
        status=status,
        discount=5.0,
        shipping=4.5,
        observation="leave at the door",
        items=[
            OrderItem(product_id=catalog["packed_id"], packing_id=catalog["packing_id"], amount=2, unit_price=25.0),
            OrderItem(product_id=catalog["unpacked_id"], amount=1, unit_price=16.0),
        ],
    )


@pytest.mark.asyncio
async def test_order_repo_create_and_show(db_engine, catalog):
    uow = db.SqlAlchemyUnitOfWork(db_engine)

    async with uow:
        order_id = await uow.orders.create(new_order(catalog))
        await uow.commit()

    async with uow:
        fetched = await uow.orders.show(order_id)

    assert fetched.id == order_id
    assert fetched.status == "Registered"
    assert fetched.observation == "leave at the door"
    assert [(i.product_id, i.unit_price) for i in fetched.items] == [
        (catalog["packed_id"], 25.0),
        (catalog["unpacked_id"], 16.0),
    ]
    assert all(item.order_id == order_id for item in fetched.items)
    assert fetched.total_amount == 65.5


@pytest.mark.asyncio
async def test_order_repo_update_replaces_items(db_engine, catalog):
    uow = db.SqlAlchemyUnitOfWork(db_engine)
    async with uow:
        order_id = await uow.orders.create(new_order(catalog))
        await uow.commit()

    replacement = new_order(catalog)
    replacement.items = [OrderItem(product_id=catalog["unpacked_id"], amount=3, unit_price=16.0)]
    replacement.discount = 0
    async with uow:
        assert await uow.orders.update(order_id, replacement.values()) is True
        await uow.commit()

    async with uow:
        fetched = await uow.orders.show(order_id)
        items = await uow.orders.list_items(order_id)

    assert fetched.discount == 0
    assert len(items) == 1
    assert items[0].amount == 3


@pytest.mark.asyncio
async def test_order_repo_update_missing_order_raises_not_found(db_engine, catalog):
    uow = db.SqlAlchemyUnitOfWork(db_engine)

    async with uow:
        with pytest.raises(NotFoundError) as exc_info:
            await uow.orders.update(999, new_order(catalog).values())

    assert exc_info.value.message == "Order not found"


@pytest.mark.asyncio
async def test_conditional_status_write_only_matches_expected_status(db_engine, catalog):
    uow = db.SqlAlchemyUnitOfWork(db_engine)
    async with uow:
        order_id = await uow.orders.create(new_order(catalog, status="Canceled"))
        await uow.commit()

    async with uow:
        written = await uow.orders.update(order_id, {"status": "Finished"}, where={"status": "Registered"})
        await uow.commit()

    async with uow:
        fetched = await uow.orders.show(order_id)

    assert written is False
    assert fetched.status == "Canceled"
    # a status-only write leaves the items alone
    assert len(fetched.items) == 2


@pytest.mark.asyncio
async def test_order_repo_list_groups_items_per_order(db_engine, catalog):
    uow = db.SqlAlchemyUnitOfWork(db_engine)
    async with uow:
        first = await uow.orders.create(new_order(catalog))
        second = new_order(catalog)
        second.items = second.items[:1]
        second_id = await uow.orders.create(second)
        await uow.commit()

    async with uow:
        orders = await uow.orders.list()

    assert [o.id for o in orders] == [first, second_id]
    assert [len(o.items) for o in orders] == [2, 1]


@pytest.mark.asyncio
async def test_order_repo_delete_removes_items(db_engine, catalog):
    uow = db.SqlAlchemyUnitOfWork(db_engine)
    async with uow:
        order_id = await uow.orders.create(new_order(catalog))
        await uow.commit()

    async with uow:
        await uow.orders.delete(order_id)
        await uow.commit()

    async with db_engine.begin() as conn:
        rows = (await conn.execute(select(tables.order_items))).fetchall()

    assert rows == []
    async with uow:
        with pytest.raises(NotFoundError):
            await uow.orders.show(order_id)
        with pytest.raises(NotFoundError):
            await uow.orders.delete(order_id)


@pytest.mark.asyncio
async def test_uncommitted_writes_are_rolled_back(db_engine, catalog):
    uow = db.SqlAlchemyUnitOfWork(db_engine)

    async with uow:
        await uow.orders.create(new_order(catalog))

    async with uow:
        assert await uow.orders.list() == []
