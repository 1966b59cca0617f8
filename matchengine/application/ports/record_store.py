"""Port interface for the generic record store (find / insert / update)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Op(str, Enum):
    EQ = "eq"
    NEQ = "neq"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    IN = "in"


@dataclass(frozen=True)
class Predicate:
    field: str
    op: Op
    value: Any


def eq(field: str, value: Any) -> Predicate:
    return Predicate(field, Op.EQ, value)


def gte(field: str, value: Any) -> Predicate:
    return Predicate(field, Op.GTE, value)


def in_(field: str, values: Sequence[Any]) -> Predicate:
    return Predicate(field, Op.IN, tuple(values))


Filters = Sequence[Predicate] | Mapping[str, Any]


def as_predicates(filters: Filters | None) -> list[Predicate]:
    """Accept either a predicate list or a ``{field: value}`` equality mapping."""
    if not filters:
        return []
    if isinstance(filters, Mapping):
        return [eq(field, value) for field, value in filters.items()]
    return list(filters)


class RecordStore(ABC):
    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    async def insert(self, collection: str, body: Mapping[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def update(
        self,
        collection: str,
        filters: Filters,
        patch: Mapping[str, Any],
    ) -> int:
        """Patch every matching record and return how many matched.

        A conditional write (e.g. ``status == "open"``) that matches nothing
        returns 0; callers use that to detect a lost race.
        """
        ...
