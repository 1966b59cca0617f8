"""Bounded awaits — every store call and search runs under a timeout."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from matchengine.domain.errors import EngineError, ErrorKind

T = TypeVar("T")


async def bounded(awaitable: Awaitable[T], timeout: float | None, operation: str) -> T:
    """Await *awaitable*, failing with TIMEOUT after *timeout* seconds.

    ``None`` means no limit.
    """
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as exc:
        raise EngineError(
            ErrorKind.TIMEOUT,
            f"{operation} did not finish within {timeout:g}s",
            {"operation": operation, "timeout_seconds": timeout},
        ) from exc
