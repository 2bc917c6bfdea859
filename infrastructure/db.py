from __future__ import annotations

import os
from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from domain.catalog import Category, Feature, Packing
from domain.customer import Customer
from infrastructure.repositories import OrderRepository, ProductRepository, TableRepository
from infrastructure import tables
from infrastructure.tables import metadata  # noqa: F401


def get_engine(dsn: Optional[str] = None) -> AsyncEngine:
    url = dsn or os.getenv("APP__DB_DSN")
    if not url:
        raise RuntimeError("APP__DB_DSN not set")
    engine = create_async_engine(url)
    if engine.dialect.name == "sqlite":
        enable_sqlite_foreign_keys(engine)
    return engine


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite only enforces foreign keys when asked to, per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class SqlAlchemyUnitOfWork:
    """One session per unit of work; repositories are created lazily on it."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(bind=self.engine, expire_on_commit=False)
        self.session: AsyncSession | None = None
        self._repositories: dict = {}

    async def __aenter__(self):
        self.session = self.session_factory()
        await self.session.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.session:
            await self.session.__aexit__(exc_type, exc, tb)
        self.session = None
        self._repositories = {}

    async def commit(self) -> None:
        if self.session:
            await self.session.commit()

    def _repository(self, name: str, factory):
        if name not in self._repositories:
            if not self.session:
                raise RuntimeError("Session not initialized")
            self._repositories[name] = factory(self.session)
        return self._repositories[name]

    @property
    def customers(self) -> TableRepository[Customer]:
        return self._repository("customers", lambda s: TableRepository(s, tables.customers, Customer, "Customer"))

    @property
    def categories(self) -> TableRepository[Category]:
        return self._repository("categories", lambda s: TableRepository(s, tables.categories, Category, "Category"))

    @property
    def features(self) -> TableRepository[Feature]:
        return self._repository("features", lambda s: TableRepository(s, tables.features, Feature, "Feature"))

    @property
    def packings(self) -> TableRepository[Packing]:
        return self._repository("packings", lambda s: TableRepository(s, tables.packings, Packing, "Packing"))

    @property
    def products(self) -> ProductRepository:
        return self._repository("products", ProductRepository)

    @property
    def orders(self) -> OrderRepository:
        return self._repository("orders", OrderRepository)
