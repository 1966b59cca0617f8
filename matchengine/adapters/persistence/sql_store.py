"""SQL record store — implements RecordStore on the SQLAlchemy tables."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Table, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import matchengine.adapters.persistence.models  # noqa: F401  registers tables on Base.metadata
from matchengine.adapters.persistence.database import Base
from matchengine.application.ports.record_store import (
    Filters,
    Op,
    Predicate,
    RecordStore,
    as_predicates,
)
from matchengine.domain.errors import EngineError, ErrorKind

logger = logging.getLogger(__name__)


def _to_column(table: Table, field: str, value: Any) -> Any:
    # Records carry ISO-8601 strings; DateTime columns want datetimes
    if isinstance(value, str) and isinstance(table.c[field].type, DateTime):
        return datetime.fromisoformat(value)
    return value


def _from_row(row: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v.isoformat() if isinstance(v, datetime) else v for k, v in row.items()}


def _clause(table: Table, predicate: Predicate):
    column = table.c[predicate.field]
    if predicate.op is Op.IN:
        return column.in_([_to_column(table, predicate.field, v) for v in predicate.value])
    value = _to_column(table, predicate.field, predicate.value)
    if predicate.op is Op.EQ:
        return column.is_(None) if value is None else column == value
    if predicate.op is Op.NEQ:
        return column.is_not(None) if value is None else column != value
    if predicate.op is Op.LT:
        return column < value
    if predicate.op is Op.LTE:
        return column <= value
    if predicate.op is Op.GT:
        return column > value
    return column >= value


class SqlRecordStore(RecordStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._sessions = session_factory

    @staticmethod
    def _table(collection: str) -> Table:
        table = Base.metadata.tables.get(collection)
        if table is None:
            raise ValueError(f"Unknown collection: {collection}")
        return table

    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        table = self._table(collection)
        stmt = select(table).where(*(_clause(table, p) for p in as_predicates(filters)))
        if order_by:
            column = table.c[order_by]
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self._sessions() as session:
                result = await session.execute(stmt)
                return [_from_row(row) for row in result.mappings().all()]
        except SQLAlchemyError as e:
            logger.error("SELECT %s failed: %s", collection, e)
            raise EngineError(
                ErrorKind.DEPENDENCY_FAILURE, f"Could not read {collection}", {"collection": collection}
            ) from e

    async def insert(self, collection: str, body: Mapping[str, Any]) -> dict[str, Any]:
        table = self._table(collection)
        values = {k: _to_column(table, k, v) for k, v in body.items()}
        try:
            async with self._sessions() as session, session.begin():
                await session.execute(insert(table).values(**values))
        except SQLAlchemyError as e:
            logger.error("INSERT %s failed: %s", collection, e)
            raise EngineError(
                ErrorKind.DEPENDENCY_FAILURE, f"Could not write {collection}", {"collection": collection}
            ) from e
        return dict(body)

    async def update(self, collection: str, filters: Filters, patch: Mapping[str, Any]) -> int:
        table = self._table(collection)
        predicates = as_predicates(filters)
        if not predicates:
            raise ValueError("Refusing to update a whole collection without filters")
        stmt = (
            update(table)
            .where(*(_clause(table, p) for p in predicates))
            .values(**{k: _to_column(table, k, v) for k, v in patch.items()})
        )
        try:
            async with self._sessions() as session, session.begin():
                result = await session.execute(stmt)
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error("UPDATE %s failed: %s", collection, e)
            raise EngineError(
                ErrorKind.DEPENDENCY_FAILURE, f"Could not update {collection}", {"collection": collection}
            ) from e
