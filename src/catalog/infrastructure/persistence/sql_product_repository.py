"""SQL implementation of ProductRepository (SQLAlchemy Core).

The version compare-and-swap is a single conditional UPDATE, so the
database enforces atomicity. When it matches no row, a follow-up
existence check tells a vanished row apart from a stale version.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from loguru import logger
from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    func,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from catalog.domain.exceptions import (
    AlreadyExistsError,
    EntityNotFoundError,
    InternalError,
    StorageConnectionError,
    VersionConflictError,
)
from catalog.domain.model.product import Product
from catalog.domain.repository.product_repository import ProductRepository

metadata = MetaData()

products_table = Table(
    "products",
    metadata,
    Column("id", String(26), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("reference_number", String(255), nullable=False),
    Column("category", String(255), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("sku", String(255), nullable=False, default=""),
    Column("brand", String(255), nullable=False, default=""),
    Column("stock", Integer, nullable=False, default=0),
    Column("images", Text, nullable=False, default="[]"),
    Column("specifications", Text, nullable=False, default="{}"),
    Column("version", Integer, nullable=False, default=1),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_products_category", "category"),
    Index("ix_products_name", "name"),
    Index("ix_products_created_at", "created_at"),
)


def create_sql_engine(database_url: str) -> Engine:
    return create_engine(database_url, pool_pre_ping=True, future=True)


class SqlProductRepository(ProductRepository):

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create_schema(self) -> None:
        with _translate_errors("create_schema"):
            metadata.create_all(self._engine)

    # --- ProductRepository interface ------------------------------------------

    def create(self, product: Product) -> None:
        try:
            with _translate_errors("create"), self._engine.begin() as conn:
                conn.execute(insert(products_table).values(**self._to_row(product)))
        except IntegrityError as exc:
            raise AlreadyExistsError(
                f"Product with ID '{product.id}' already exists"
            ) from exc

    def update(self, product: Product, expected_version: int) -> None:
        row = self._to_row(product)
        del row["id"], row["reference_number"], row["created_at"]
        statement = (
            update(products_table)
            .where(products_table.c.id == product.id)
            .where(products_table.c.version == expected_version)
            .values(**row)
        )
        with _translate_errors("update"), self._engine.begin() as conn:
            result = conn.execute(statement)

        if result.rowcount == 0:
            if not self.exists(product.id):
                raise EntityNotFoundError(f"Product with ID '{product.id}' not found")
            raise VersionConflictError(
                f"Product '{product.id}' was modified concurrently "
                f"(expected version {expected_version})"
            )

    def delete(self, product_id: str) -> None:
        statement = delete(products_table).where(products_table.c.id == product_id)
        with _translate_errors("delete"), self._engine.begin() as conn:
            result = conn.execute(statement)
        if result.rowcount == 0:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

    def find_by_id(self, product_id: str) -> Product | None:
        statement = select(products_table).where(products_table.c.id == product_id)
        with _translate_errors("find_by_id"), self._engine.connect() as conn:
            row = conn.execute(statement).first()
        return None if row is None else self._to_domain(row)

    def find_all(self, limit: int, offset: int) -> list[Product]:
        statement = (
            select(products_table)
            .order_by(products_table.c.created_at.desc(), products_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        return self._fetch("find_all", statement)

    def find_by_category(self, category: str, limit: int, offset: int) -> list[Product]:
        statement = (
            select(products_table)
            .where(func.lower(products_table.c.category) == category.strip().lower())
            .order_by(products_table.c.created_at.desc(), products_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        return self._fetch("find_by_category", statement)

    def find_by_name(self, name: str, limit: int, offset: int) -> list[Product]:
        pattern = f"%{_escape_like(name.lower())}%"
        statement = (
            select(products_table)
            .where(func.lower(products_table.c.name).like(pattern, escape="\\"))
            .order_by(func.lower(products_table.c.name), products_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        return self._fetch("find_by_name", statement)

    def exists(self, product_id: str) -> bool:
        statement = select(products_table.c.id).where(products_table.c.id == product_id)
        with _translate_errors("exists"), self._engine.connect() as conn:
            return conn.execute(statement).first() is not None

    def health_check(self) -> None:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StorageConnectionError(f"Database health check failed: {exc}") from exc

    # --- Mapping --------------------------------------------------------------

    def _fetch(self, operation: str, statement) -> list[Product]:
        with _translate_errors(operation), self._engine.connect() as conn:
            rows = conn.execute(statement).all()
        return [self._to_domain(row) for row in rows]

    @staticmethod
    def _to_row(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "reference_number": product.reference_number,
            "category": product.category,
            "description": product.description,
            "sku": product.sku,
            "brand": product.brand,
            "stock": product.stock,
            "images": json.dumps(product.images),
            "specifications": json.dumps(product.specifications),
            "version": product.version,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
        }

    @staticmethod
    def _to_domain(row: Row) -> Product:
        data = row._mapping
        try:
            images = json.loads(data["images"]) if data["images"] else []
            specifications = json.loads(data["specifications"]) if data["specifications"] else {}
        except ValueError as exc:
            raise InternalError(f"Corrupt attributes for product {data['id']}") from exc
        return Product(
            id=data["id"],
            name=data["name"],
            reference_number=data["reference_number"],
            category=data["category"],
            description=data["description"],
            sku=data["sku"],
            brand=data["brand"],
            stock=data["stock"],
            images=images,
            specifications=specifications,
            version=data["version"],
            created_at=_as_utc(data["created_at"]),
            updated_at=_as_utc(data["updated_at"]),
        )


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except IntegrityError:
        raise
    except OperationalError as exc:
        logger.error("Database {} failed: {}", operation, exc)
        raise StorageConnectionError(f"Database unavailable during {operation}") from exc
    except SQLAlchemyError as exc:
        logger.error("Database {} failed: {}", operation, exc)
        raise InternalError(f"Database {operation} failed") from exc


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
