"""Replacement policy — who may be offered a piece of work next."""

from __future__ import annotations

from collections.abc import Iterable

from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.entities.provider import ProviderMatch
from matchengine.domain.value_objects.enums import AssignmentStatus


def exclusion_set(history: Iterable[Assignment], rejecting_provider_id: str) -> frozenset[str]:
    """Providers that must never be offered this work again.

    Every provider with a rejected assignment in *history*, plus the provider
    rejecting right now (the read may predate that write). Duplicates collapse.
    """
    excluded = {
        a.provider_id for a in history
        if a.status is AssignmentStatus.REJECTED and a.provider_id
    }
    excluded.add(rejecting_provider_id)
    return frozenset(excluded)


def _rank(candidate: ProviderMatch) -> tuple:
    # Highest rating first, then the least busy, then id for determinism
    rating = candidate.rating if candidate.rating is not None else float("-inf")
    return (-rating, candidate.active_clients, candidate.id)


def select_replacement(
    candidates: Iterable[ProviderMatch],
    excluded: Iterable[str],
) -> ProviderMatch | None:
    """Pick the best candidate outside *excluded*, or None when nobody is left."""
    blocked = set(excluded)
    eligible = [c for c in candidates if c.id not in blocked]
    if not eligible:
        return None
    return min(eligible, key=_rank)
