# core/store.py
"""
Relational store + RPC gateway.

Everything above this module talks to the database through the same small
surface a hosted backend would offer: per-table select / insert / update /
delete with simple filters, plus named remote procedures. Rows cross the
boundary as plain dicts.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union
import logging

from sqlalchemy import and_, delete as sa_delete, or_, update as sa_update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from models.models import TABLES

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised for any failed store call (database error, unknown table or column)."""


# ========================================
# 🔎 Filters
# ========================================
@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any = None


@dataclass(frozen=True)
class AnyOf:
    filters: tuple


FilterLike = Union[Filter, AnyOf]


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def neq(column: str, value: Any) -> Filter:
    return Filter(column, "neq", value)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, "lt", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def gt(column: str, value: Any) -> Filter:
    return Filter(column, "gt", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def in_(column: str, values: Iterable[Any]) -> Filter:
    return Filter(column, "in", tuple(values))


def is_null(column: str) -> Filter:
    return Filter(column, "is_null")


def not_null(column: str) -> Filter:
    return Filter(column, "not_null")


def any_of(*filters: FilterLike) -> AnyOf:
    """OR together several filters."""
    return AnyOf(tuple(filters))


# ========================================
# 🧩 Remote procedures registry
# ========================================
PROCEDURES: Dict[str, Callable[..., Any]] = {}


def procedure(name: str):
    """Register a function as a named remote procedure callable via Store.rpc()."""
    def decorator(func):
        PROCEDURES[name] = func
        return func
    return decorator


# ========================================
# 🗄️ Store
# ========================================
class Store:
    def __init__(self, session: Session):
        self.session = session

    # ---------- helpers ----------
    def _model(self, table: str):
        model = TABLES.get(table)
        if model is None:
            raise StoreError(f"Unknown table: {table}")
        return model

    def _column(self, model, name: str):
        column = model.__table__.columns.get(name)
        if column is None:
            raise StoreError(f"Unknown column {model.__tablename__}.{name}")
        return column

    def _compile(self, model, f: FilterLike):
        if isinstance(f, AnyOf):
            return or_(*[self._compile(model, sub) for sub in f.filters])

        column = self._column(model, f.column)
        if f.op == "eq":
            return column == f.value
        if f.op == "neq":
            return column != f.value
        if f.op == "lt":
            return column < f.value
        if f.op == "lte":
            return column <= f.value
        if f.op == "gt":
            return column > f.value
        if f.op == "gte":
            return column >= f.value
        if f.op == "in":
            return column.in_(list(f.value))
        if f.op == "is_null":
            return column.is_(None)
        if f.op == "not_null":
            return column.is_not(None)
        raise StoreError(f"Unsupported filter operator: {f.op}")

    def _where(self, model, filters: Sequence[FilterLike]):
        return and_(*[self._compile(model, f) for f in filters])

    @staticmethod
    def _to_row(obj, columns: Optional[List[str]] = None) -> dict:
        row = obj.model_dump()
        if columns:
            return {key: row.get(key) for key in columns}
        return row

    # ---------- table API ----------
    def select(
        self,
        table: str,
        filters: Sequence[FilterLike] = (),
        columns: str = "*",
        order_by: Optional[str] = "created_at",
        desc: bool = True,
        limit: Optional[int] = None,
    ) -> List[dict]:
        model = self._model(table)
        wanted = None
        if columns and columns != "*":
            wanted = [c.strip() for c in columns.split(",") if c.strip()]
            for name in wanted:
                self._column(model, name)

        statement = select(model)
        if filters:
            statement = statement.where(self._where(model, filters))
        if order_by:
            column = self._column(model, order_by)
            statement = statement.order_by(column.desc() if desc else column.asc())
        if limit is not None:
            statement = statement.limit(limit)

        try:
            rows = self.session.exec(statement).all()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"❌ Store select on {table} failed: {e}")
            raise StoreError(str(e)) from e
        return [self._to_row(row, wanted) for row in rows]

    def insert(self, table: str, row: dict) -> dict:
        model = self._model(table)
        for name in row:
            self._column(model, name)

        obj = model(**row)
        try:
            self.session.add(obj)
            self.session.commit()
            self.session.refresh(obj)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"❌ Store insert into {table} failed: {e}")
            raise StoreError(str(e)) from e
        return self._to_row(obj)

    def update(self, table: str, patch: dict, filters: Sequence[FilterLike]) -> int:
        """Apply `patch` to every row matching `filters`; returns the matched row count."""
        model = self._model(table)
        if not filters:
            raise StoreError(f"Refusing unfiltered update on {table}")
        values = dict(patch)
        for name in values:
            self._column(model, name)
        if "updated_at" in model.__table__.columns and "updated_at" not in values:
            values["updated_at"] = datetime.utcnow()

        statement = sa_update(model.__table__).where(self._where(model, filters)).values(**values)
        try:
            result = self.session.exec(statement)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"❌ Store update on {table} failed: {e}")
            raise StoreError(str(e)) from e
        # bulk UPDATE bypasses the identity map
        self.session.expire_all()
        return result.rowcount

    def delete(self, table: str, filters: Sequence[FilterLike]) -> int:
        model = self._model(table)
        if not filters:
            raise StoreError(f"Refusing unfiltered delete on {table}")

        statement = sa_delete(model.__table__).where(self._where(model, filters))
        try:
            result = self.session.exec(statement)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"❌ Store delete on {table} failed: {e}")
            raise StoreError(str(e)) from e
        self.session.expire_all()
        return result.rowcount

    # ---------- RPC ----------
    def rpc(self, name: str, **params: Any) -> Any:
        # Registered lazily so the procedures module can import this one.
        import core.procedures  # noqa: F401

        func = PROCEDURES.get(name)
        if func is None:
            raise StoreError(f"Unknown remote procedure: {name}")
        return func(self, **params)
