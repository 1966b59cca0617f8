"""Result wrapper returned by the public use cases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from matchengine.domain.errors import EngineError

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    value: T | None = None
    error: EngineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value
