from __future__ import annotations

from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Type, TypeVar, Union

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.catalog import Category, Feature, Packing, PackingOption, Product, ProductPacking
from domain.errors import ConflictError, NotFoundError
from domain.order import Order, OrderItem
from infrastructure import tables

E = TypeVar("E")


def _as_mapping(entity: Any) -> Mapping[str, Any]:
    return entity if isinstance(entity, Mapping) else vars(entity)


class TableRepository(Generic[E]):
    """CRUD over one table, mapping rows to entity dataclasses by column name."""

    def __init__(self, session: AsyncSession, table: Table, entity_type: Type[E], entity_name: str):
        self.session = session
        self.table = table
        self.entity_type = entity_type
        self.entity_name = entity_name

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.entity_name} not found")

    def _columns(self, values: Union[E, Mapping[str, Any]]) -> Dict[str, Any]:
        data = _as_mapping(values)
        return {c.name: data[c.name] for c in self.table.columns if c.name != "id" and c.name in data}

    def _entity(self, row) -> E:
        return self.entity_type(**dict(row._mapping))

    async def create(self, entity: Union[E, Mapping[str, Any]]) -> int:
        result = await self.session.execute(insert(self.table).values(**self._columns(entity)))
        return result.inserted_primary_key[0]

    async def update(
        self,
        entity_id: int,
        values: Union[E, Mapping[str, Any]],
        where: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Write the given columns of one row.

        With ``where`` the write only happens if those columns still hold the
        expected values and a miss returns False; without it a miss raises
        NotFoundError.
        """
        columns = self._columns(values)
        if not columns:
            await self.show(entity_id)
            return True

        stmt = update(self.table).where(self.table.c.id == entity_id).values(**columns)
        for name, expected in (where or {}).items():
            stmt = stmt.where(self.table.c[name] == expected)
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            if where is None:
                raise self._not_found()
            return False
        return True

    async def show(self, entity_id: int) -> E:
        result = await self.session.execute(select(self.table).where(self.table.c.id == entity_id))
        row = result.first()
        if not row:
            raise self._not_found()
        return self._entity(row)

    async def list(self) -> List[E]:
        result = await self.session.execute(select(self.table).order_by(self.table.c.id))
        return [self._entity(row) for row in result]

    async def delete(self, entity_id: int) -> None:
        try:
            result = await self.session.execute(delete(self.table).where(self.table.c.id == entity_id))
        except IntegrityError as exc:
            raise ConflictError(f"{self.entity_name} is still referenced") from exc
        if result.rowcount == 0:
            raise self._not_found()


class ProductRepository(TableRepository[Product]):
    """Products together with their category, features and priced packings."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, tables.products, Product, "Product")

    async def create(self, entity: Union[Product, Mapping[str, Any]]) -> int:
        product_id = await super().create(entity)
        data = _as_mapping(entity)
        await self._write_packings(product_id, data.get("packings") or [])
        await self._write_features(product_id, data.get("features") or [])
        return product_id

    async def update(self, entity_id, values, where=None) -> bool:
        matched = await super().update(entity_id, values, where)
        data = _as_mapping(values)
        if matched and data.get("packings") is not None:
            await self.session.execute(
                delete(tables.product_packings).where(tables.product_packings.c.product_id == entity_id)
            )
            await self._write_packings(entity_id, data["packings"])
        if matched and data.get("features") is not None:
            await self.session.execute(
                delete(tables.product_features).where(tables.product_features.c.product_id == entity_id)
            )
            await self._write_features(entity_id, data["features"])
        return matched

    async def show(self, entity_id: int) -> Product:
        product = await super().show(entity_id)
        return await self._load(product)

    async def list(self) -> List[Product]:
        return [await self._load(product) for product in await super().list()]

    async def delete(self, entity_id: int) -> None:
        await self.session.execute(
            delete(tables.product_packings).where(tables.product_packings.c.product_id == entity_id)
        )
        await self.session.execute(
            delete(tables.product_features).where(tables.product_features.c.product_id == entity_id)
        )
        await super().delete(entity_id)

    async def list_packings(self) -> List[Packing]:
        result = await self.session.execute(select(tables.packings).order_by(tables.packings.c.id))
        return [Packing(**dict(row._mapping)) for row in result]

    async def _load(self, product: Product) -> Product:
        category = await self.session.execute(
            select(tables.categories).where(tables.categories.c.id == product.category_id)
        )
        row = category.first()
        product.category = Category(**dict(row._mapping)) if row else None

        result = await self.session.execute(
            select(tables.features)
            .join(tables.product_features, tables.product_features.c.feature_id == tables.features.c.id)
            .where(tables.product_features.c.product_id == product.id)
            .order_by(tables.features.c.id)
        )
        product.features = [Feature(**dict(row._mapping)) for row in result]

        pp = tables.product_packings
        result = await self.session.execute(
            select(
                tables.packings,
                pp.c.id.label("pp_id"),
                pp.c.product_id,
                pp.c.price,
                pp.c.quantity,
            )
            .join(pp, pp.c.packing_id == tables.packings.c.id)
            .where(pp.c.product_id == product.id)
            .order_by(tables.packings.c.id)
        )
        product.packings = []
        for row in result:
            data = dict(row._mapping)
            entry = ProductPacking(
                id=data.pop("pp_id"),
                product_id=data.pop("product_id"),
                packing_id=data["id"],
                price=data.pop("price"),
                quantity=data.pop("quantity"),
            )
            product.packings.append(PackingOption(**data, product_packing=entry))
        return product

    async def _write_packings(self, product_id: int, packings: Iterable[Any]) -> None:
        for packing in packings:
            if isinstance(packing, PackingOption):
                packing = packing.product_packing
            data = _as_mapping(packing)
            entry = ProductPacking(
                product_id=product_id,
                packing_id=data["packing_id"],
                price=data.get("price"),
                quantity=data.get("quantity"),
            )
            await self.session.execute(
                insert(tables.product_packings).values(
                    product_id=product_id,
                    packing_id=entry.packing_id,
                    price=entry.price,
                    quantity=entry.quantity,
                )
            )

    async def _write_features(self, product_id: int, features: Iterable[Any]) -> None:
        for feature in features:
            feature_id = feature if isinstance(feature, int) else _as_mapping(feature)["id"]
            await self.session.execute(
                insert(tables.product_features).values(product_id=product_id, feature_id=feature_id)
            )


class OrderRepository(TableRepository[Order]):
    """Orders and their line items; items are replaced as a whole on update."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, tables.orders, Order, "Order")

    async def create(self, entity: Union[Order, Mapping[str, Any]]) -> int:
        order_id = await super().create(entity)
        await self._write_items(order_id, _as_mapping(entity).get("items") or [])
        return order_id

    async def update(self, entity_id, values, where=None) -> bool:
        matched = await super().update(entity_id, values, where)
        data = _as_mapping(values)
        if matched and data.get("items") is not None:
            await self.session.execute(delete(tables.order_items).where(tables.order_items.c.order_id == entity_id))
            await self._write_items(entity_id, data["items"])
        return matched

    async def show(self, entity_id: int) -> Order:
        order = await super().show(entity_id)
        order.items = await self.list_items(entity_id)
        return order

    async def list(self) -> List[Order]:
        orders = await super().list()
        result = await self.session.execute(select(tables.order_items).order_by(tables.order_items.c.id))
        items: Dict[int, List[OrderItem]] = {}
        for row in result:
            item = OrderItem(**dict(row._mapping))
            items.setdefault(item.order_id, []).append(item)
        for order in orders:
            order.items = items.get(order.id, [])
        return orders

    async def delete(self, entity_id: int) -> None:
        await self.session.execute(delete(tables.order_items).where(tables.order_items.c.order_id == entity_id))
        await super().delete(entity_id)

    async def list_items(self, order_id: int) -> List[OrderItem]:
        result = await self.session.execute(
            select(tables.order_items)
            .where(tables.order_items.c.order_id == order_id)
            .order_by(tables.order_items.c.id)
        )
        return [OrderItem(**dict(row._mapping)) for row in result]

    async def _write_items(self, order_id: int, items: Iterable[Any]) -> None:
        for item in items:
            data = _as_mapping(item)
            await self.session.execute(
                insert(tables.order_items).values(
                    order_id=order_id,
                    product_id=data["product_id"],
                    packing_id=data.get("packing_id"),
                    amount=data["amount"],
                    unit_price=data["unit_price"],
                )
            )
