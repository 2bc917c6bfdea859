import pytest

from application.pricing import PriceResolver, normalize_items
from domain.errors import InvalidOrderItemsError, ValidationError
from domain.order import OrderItem
from fakes import InMemoryProductRepo, packed_product, packing_definition, unpacked_product


def test_normalize_items_keeps_only_recognized_fields():
    items = normalize_items([
        {"product_id": 1, "packing_id": 10, "amount": 5, "unit_price": 1.0, "discount": 99, "id": 7},
    ])

    assert items == [OrderItem(product_id=1, packing_id=10, amount=5, unit_price=1.0)]


def test_normalize_items_allows_explicit_zero():
    items = normalize_items([{"product_id": 0, "amount": 0}])

    assert items[0].product_id == 0
    assert items[0].amount == 0
    assert items[0].packing_id is None


def test_normalize_items_treats_missing_items_as_empty():
    assert normalize_items(None) == []
    assert normalize_items([]) == []


@pytest.mark.parametrize(
    "raw, detail",
    [
        ({"product_id": 1}, "Item's amount is required"),
        ({"product_id": 1, "amount": None}, "Item's amount is required"),
        ({"product_id": 1, "amount": -1}, "Item's amount must not be negative"),
        ({"product_id": 1, "amount": "5"}, "Item's amount must be a number"),
        ({"amount": 5}, "Item's product_id is required"),
        ({"product_id": "1", "amount": 5}, "Item's product_id must be an integer"),
        ({"product_id": 1, "packing_id": "x", "amount": 5}, "Item's packing_id must be an integer"),
        ({"wrongProp": "XXXX"}, "Item's amount is required"),
        ("not-an-item", "Item must be an object"),
    ],
)
def test_normalize_items_rejects_invalid_items(raw, detail):
    with pytest.raises(ValidationError) as exc_info:
        normalize_items([{"product_id": 3, "amount": 1}, raw])

    assert exc_info.value.detail == detail


def test_normalize_items_requires_a_list():
    with pytest.raises(ValidationError):
        normalize_items({"product_id": 1, "amount": 1})


@pytest.mark.asyncio
async def test_packed_item_is_priced_from_its_packing():
    catalog = InMemoryProductRepo([packed_product()], [packing_definition(10)])
    resolver = PriceResolver(catalog)

    items = await resolver.resolve([OrderItem(product_id=1, packing_id=10, amount=5)])

    assert items == [OrderItem(product_id=1, packing_id=10, amount=5, unit_price=25.00)]


@pytest.mark.asyncio
async def test_unpacked_item_uses_product_price_and_ignores_packing():
    catalog = InMemoryProductRepo([unpacked_product()], [packing_definition(10)])
    resolver = PriceResolver(catalog)

    items = await resolver.resolve([
        OrderItem(product_id=2, packing_id=None, amount=5),
        OrderItem(product_id=2, packing_id=10, amount=1, unit_price=0.01),
    ])

    assert [item.unit_price for item in items] == [16.00, 16.00]
    assert items[1].packing_id == 10


@pytest.mark.asyncio
async def test_client_supplied_price_is_replaced():
    catalog = InMemoryProductRepo([packed_product()], [packing_definition(10)])

    items = await PriceResolver(catalog).resolve([OrderItem(product_id=1, packing_id=10, amount=5, unit_price=0.5)])

    assert items[0].unit_price == 25.00


@pytest.mark.asyncio
async def test_packed_item_without_packing_id_is_rejected():
    catalog = InMemoryProductRepo([packed_product()], [packing_definition(10)])

    with pytest.raises(InvalidOrderItemsError) as exc_info:
        await PriceResolver(catalog).resolve([OrderItem(product_id=1, packing_id=None, amount=5)])

    assert exc_info.value.detail == "Items without packing_id, but the product is packed"


@pytest.mark.asyncio
@pytest.mark.parametrize("known_packings, packing_id", [([], 10), ([packing_definition(11)], 11)])
async def test_packed_item_with_unknown_packing_is_rejected(known_packings, packing_id):
    catalog = InMemoryProductRepo([packed_product(packing_id=10)], known_packings)

    with pytest.raises(InvalidOrderItemsError) as exc_info:
        await PriceResolver(catalog).resolve([OrderItem(product_id=1, packing_id=packing_id, amount=5)])

    assert exc_info.value.detail == "Item packing not found"


@pytest.mark.asyncio
async def test_unknown_product_is_rejected():
    catalog = InMemoryProductRepo([], [])

    with pytest.raises(InvalidOrderItemsError) as exc_info:
        await PriceResolver(catalog).resolve([OrderItem(product_id=42, amount=1)])

    assert exc_info.value.detail == "Item product not found"


@pytest.mark.asyncio
async def test_packings_are_fetched_once_per_batch_and_order_is_preserved():
    catalog = InMemoryProductRepo(
        [packed_product(product_id=1), unpacked_product(product_id=2, price=3.0)],
        [packing_definition(10)],
    )

    items = await PriceResolver(catalog).resolve([
        OrderItem(product_id=2, amount=1),
        OrderItem(product_id=1, packing_id=10, amount=2),
        OrderItem(product_id=2, amount=3),
    ])

    assert catalog.list_packings_calls == 1
    assert catalog.show_calls == [2, 1, 2]
    assert [(i.product_id, i.unit_price) for i in items] == [(2, 3.0), (1, 25.0), (2, 3.0)]


@pytest.mark.asyncio
async def test_empty_batch_makes_no_catalog_calls():
    catalog = InMemoryProductRepo()

    assert await PriceResolver(catalog).resolve([]) == []
    assert catalog.list_packings_calls == 0


@pytest.mark.asyncio
async def test_attach_catalog_adds_product_and_packing():
    product = packed_product()
    catalog = InMemoryProductRepo([product], [packing_definition(10)])

    items = await PriceResolver(catalog).resolve(
        [OrderItem(product_id=1, packing_id=10, amount=5)], attach_catalog=True
    )

    assert items[0].product is product
    assert items[0].packing == packing_definition(10)
