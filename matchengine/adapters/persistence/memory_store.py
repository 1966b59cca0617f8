"""In-memory record store — local runs and tests."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from matchengine.application.ports.record_store import (
    Filters,
    Op,
    Predicate,
    RecordStore,
    as_predicates,
)


def _matches(record: Mapping[str, Any], predicate: Predicate) -> bool:
    value = record.get(predicate.field)
    if predicate.op is Op.EQ:
        return value == predicate.value
    if predicate.op is Op.NEQ:
        return value != predicate.value
    if predicate.op is Op.IN:
        return value in predicate.value
    if value is None or predicate.value is None:
        return False
    if predicate.op is Op.LT:
        return value < predicate.value
    if predicate.op is Op.LTE:
        return value <= predicate.value
    if predicate.op is Op.GT:
        return value > predicate.value
    return value >= predicate.value


class InMemoryRecordStore(RecordStore):
    """Dict-backed store.

    ``update`` evaluates the filter and applies the patch without yielding to
    the event loop, so conditional updates are atomic within one process.
    """

    def __init__(self, seed: Mapping[str, list[dict[str, Any]]] | None = None):
        self._collections: dict[str, list[dict[str, Any]]] = {}
        for collection, records in (seed or {}).items():
            self._collections[collection] = [dict(r) for r in records]

    def _rows(self, collection: str) -> list[dict[str, Any]]:
        return self._collections.setdefault(collection, [])

    def _select(self, collection: str, filters: Filters | None) -> list[tuple[int, dict[str, Any]]]:
        predicates = as_predicates(filters)
        return [
            (position, row)
            for position, row in enumerate(self._rows(collection))
            if all(_matches(row, p) for p in predicates)
        ]

    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        selected = self._select(collection, filters)
        if order_by:
            # Insertion order breaks ties, newest first when descending
            selected.sort(
                key=lambda item: (item[1].get(order_by) is not None, item[1].get(order_by) or 0, item[0]),
                reverse=descending,
            )
        rows = [copy.deepcopy(row) for _, row in selected]
        return rows[:limit] if limit is not None else rows

    async def insert(self, collection: str, body: Mapping[str, Any]) -> dict[str, Any]:
        row = copy.deepcopy(dict(body))
        self._rows(collection).append(row)
        return copy.deepcopy(row)

    async def update(self, collection: str, filters: Filters, patch: Mapping[str, Any]) -> int:
        selected = self._select(collection, filters)
        for _, row in selected:
            row.update(copy.deepcopy(dict(patch)))
        return len(selected)

    def dump(self, collection: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self._rows(collection))
