"""
SQLAlchemy integration — async ORM repositories for the inventory tables.

Usage:
    store, engine = await create_sqlalchemy_store("sqlite+aiosqlite:///:memory:")
    try:
        await seed(store)
        items = await store.items.all()
    finally:
        await engine.dispose()

Entities and rows share column names; conversion is field-by-field.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Hashable, Mapping, Sequence
from dataclasses import asdict, fields
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, InstrumentedAttribute, Mapped, mapped_column

from quarry.store._types import Customer, InventoryStore, Item, Order, OrderItem, StoreError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Tables
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class ItemRow(Base):
    __tablename__ = "items"

    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    barcode: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    selling_price: Mapped[Decimal] = mapped_column(Numeric(12, 2, asdecimal=True), nullable=False)


class CustomerRow(Base):
    __tablename__ = "customers"

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    billing_address: Mapped[str] = mapped_column(String(255), nullable=False)


class OrderRow(Base):
    __tablename__ = "orders"

    order_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tag: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.customer_id"), nullable=False, index=True
    )


class OrderItemRow(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("items.item_id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.order_id"), nullable=False, index=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Generic repository
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyRepository[E, R: Base]:
    """
    Repository over one mapped table.

    Type parameters:
        E: entity dataclass (e.g., Item)
        R: row model (e.g., ItemRow)

    Example:
        items = SQLAlchemyRepository(session_factory, entity=Item, row=ItemRow, key="item_id")
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        entity: type[E],
        row: type[R],
        key: str,
    ) -> None:
        self._session_factory = session_factory
        self._entity = entity
        self._row = row
        self._key = key
        self._fields = tuple(f.name for f in fields(entity))  # type: ignore[arg-type]

    def _column(self, name: str) -> InstrumentedAttribute[Any]:
        if name not in self._row.__table__.columns:
            raise StoreError(f"{self._row.__tablename__} has no column '{name}'")
        return getattr(self._row, name)

    def _to_entity(self, row: R) -> E:
        return self._entity(**{name: getattr(row, name) for name in self._fields})

    def _to_row(self, entity: E) -> R:
        values = asdict(entity)  # type: ignore[call-overload]
        if values.get(self._key) is None:
            values.pop(self._key, None)
        return self._row(**values)

    async def all(self) -> Sequence[E]:
        async with self._session_factory() as session:
            result = await session.scalars(select(self._row).order_by(self._column(self._key)))
            return [self._to_entity(row) for row in result]

    async def get_by_id(self, id: Hashable) -> E | None:
        async with self._session_factory() as session:
            row = await session.get(self._row, id)
            return self._to_entity(row) if row is not None else None

    async def get_by_ids(self, ids: Collection[Hashable]) -> Mapping[Hashable, E]:
        key = self._column(self._key)
        async with self._session_factory() as session:
            result = await session.scalars(select(self._row).where(key.in_(list(ids))))
            return {getattr(row, self._key): self._to_entity(row) for row in result}

    async def get_by_foreign_key(
        self,
        column: str,
        ids: Collection[Hashable],
    ) -> Mapping[Hashable, Sequence[E]]:
        fk = self._column(column)
        async with self._session_factory() as session:
            result = await session.scalars(
                select(self._row).where(fk.in_(list(ids))).order_by(self._column(self._key))
            )
            groups: dict[Hashable, list[E]] = {}
            for row in result:
                groups.setdefault(getattr(row, column), []).append(self._to_entity(row))
            return groups

    async def find_one(self, column: str, value: Any) -> E | None:
        col = self._column(column)
        async with self._session_factory() as session:
            row = await session.scalar(
                select(self._row).where(col == value).order_by(self._column(self._key)).limit(1)
            )
            return self._to_entity(row) if row is not None else None

    async def create(self, entity: E) -> E:
        async with self._session_factory() as session:
            row = self._to_row(entity)
            session.add(row)
            await session.commit()
            created = self._to_entity(row)
        logger.debug("Created %s %s=%s", self._entity.__name__, self._key, getattr(created, self._key))
        return created


# ═══════════════════════════════════════════════════════════════════════════════
# Database Setup
# ═══════════════════════════════════════════════════════════════════════════════


async def create_sqlalchemy_store(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[InventoryStore, AsyncEngine]:
    """Create tables and return (store, engine). Caller disposes the engine."""
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    store = InventoryStore(
        items=SQLAlchemyRepository(session_factory, Item, ItemRow, key="item_id"),
        customers=SQLAlchemyRepository(session_factory, Customer, CustomerRow, key="customer_id"),
        orders=SQLAlchemyRepository(session_factory, Order, OrderRow, key="order_id"),
        order_items=SQLAlchemyRepository(session_factory, OrderItem, OrderItemRow, key="id"),
    )
    logger.debug("SQLAlchemy store ready at %s", engine.url.render_as_string(hide_password=True))
    return store, engine


__all__ = (
    "Base",
    "ItemRow",
    "CustomerRow",
    "OrderRow",
    "OrderItemRow",
    "SQLAlchemyRepository",
    "create_sqlalchemy_store",
)
