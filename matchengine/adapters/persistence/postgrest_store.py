"""PostgREST record store — implements RecordStore over HTTP with httpx."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from matchengine.application.ports.record_store import (
    Filters,
    Op,
    Predicate,
    RecordStore,
    as_predicates,
)
from matchengine.domain.errors import EngineError, ErrorKind

logger = logging.getLogger(__name__)


def _encode(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _query_param(predicate: Predicate) -> tuple[str, str]:
    if predicate.op is Op.IN:
        values = ",".join(_encode(v) for v in predicate.value)
        return predicate.field, f"in.({values})"
    if predicate.value is None and predicate.op in (Op.EQ, Op.NEQ):
        return predicate.field, "is.null" if predicate.op is Op.EQ else "not.is.null"
    return predicate.field, f"{predicate.op.value}.{_encode(predicate.value)}"


class PostgrestRecordStore(RecordStore):
    """Talks to ``{base_url}/rest/v1/{collection}``.

    A client can be injected (tests, connection reuse); otherwise a short-lived
    client is opened per call.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _url(self, collection: str) -> str:
        return f"{self._base_url}/rest/v1/{collection}"

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(self, method: str, collection: str, **kwargs) -> httpx.Response:
        url = self._url(collection)
        try:
            if self._client is not None:
                response = await self._client.request(method, url, timeout=self._timeout, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, collection, e)
            raise EngineError(
                ErrorKind.DEPENDENCY_FAILURE,
                f"Record store unreachable ({method} {collection})",
                {"collection": collection},
            ) from e

        if response.is_error:
            logger.error(
                "%s %s returned %d: %s", method, collection, response.status_code, response.text
            )
            raise EngineError(
                ErrorKind.DEPENDENCY_FAILURE,
                f"Record store returned {response.status_code} ({method} {collection})",
                {"collection": collection, "status_code": response.status_code},
            )
        return response

    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params = [("select", "*")]
        params.extend(_query_param(p) for p in as_predicates(filters))
        if order_by:
            params.append(("order", f"{order_by}.{'desc' if descending else 'asc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))

        response = await self._request("GET", collection, params=params, headers=self._headers())
        return response.json() or []

    async def insert(self, collection: str, body: Mapping[str, Any]) -> dict[str, Any]:
        response = await self._request(
            "POST",
            collection,
            json=dict(body),
            headers=self._headers(prefer="return=representation"),
        )
        rows = response.json()
        return rows[0] if rows else dict(body)

    async def update(self, collection: str, filters: Filters, patch: Mapping[str, Any]) -> int:
        predicates = as_predicates(filters)
        if not predicates:
            raise ValueError("Refusing to update a whole collection without filters")
        response = await self._request(
            "PATCH",
            collection,
            params=[_query_param(p) for p in predicates],
            json=dict(patch),
            headers=self._headers(prefer="return=representation"),
        )
        return len(response.json() or [])
