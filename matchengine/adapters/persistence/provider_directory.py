"""Provider directory backed by the record store."""

from __future__ import annotations

import logging
from typing import Any

from matchengine.application.ports.provider_directory import ProviderDirectory
from matchengine.application.ports.record_store import RecordStore, eq, gte
from matchengine.domain.entities.provider import ProviderMatch
from matchengine.domain.entities.work import WorkRecord

logger = logging.getLogger(__name__)

PROVIDERS = "providers"


def _provider_to_domain(r: dict[str, Any]) -> ProviderMatch:
    return ProviderMatch(
        id=r["id"],
        first_name=r.get("first_name"),
        last_name=r.get("last_name"),
        email=r.get("email"),
        rating=r.get("rating"),
        active_clients=r.get("active_clients") or 0,
    )


class RecordStoreProviderDirectory(ProviderDirectory):
    """Active providers in the work's city with enough free hours."""

    def __init__(self, store: RecordStore):
        self._store = store

    async def candidates_for(self, work: WorkRecord) -> list[ProviderMatch]:
        if not work.city:
            logger.info("Work %s has no city, no candidates", work.ref)
            return []

        filters = [eq("city", work.city), eq("active", True)]
        if work.hours:
            filters.append(gte("available_hours", work.hours))

        rows = await self._store.find(PROVIDERS, filters)
        return [_provider_to_domain(r) for r in rows]
