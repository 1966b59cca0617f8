"""Typed engine errors.

Every failure the engine reports carries one of a closed set of kinds so
callers can map it to a stable outward-facing code.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    BELOW_MINIMUM = "BELOW_MINIMUM"
    TIMEOUT = "TIMEOUT"
    DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"


class EngineError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"EngineError({self.kind.value}, {self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.kind.value,
            "detail": self.message,
            "details": self.details,
        }
