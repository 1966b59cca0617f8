"""Tests for the replacement policy (exclusion set and candidate ranking)."""

from datetime import datetime, timezone

from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.entities.provider import ProviderMatch
from matchengine.domain.policies.replacement import exclusion_set, select_replacement
from matchengine.domain.value_objects.enums import AssignmentStatus
from matchengine.domain.value_objects.work_ref import WorkRef

TS = datetime(2026, 3, 2, tzinfo=timezone.utc)


def _a(aid: str, provider_id: str, status: AssignmentStatus) -> Assignment:
    return Assignment(
        id=aid, work_ref=WorkRef.job("J1"), provider_id=provider_id,
        status=status, created_at=TS, updated_at=TS,
    )


def _p(pid: str, rating=None, clients=0) -> ProviderMatch:
    return ProviderMatch(id=pid, rating=rating, active_clients=clients)


def test_exclusion_includes_current_rejecter():
    assert exclusion_set([], "P1") == {"P1"}


def test_exclusion_accumulates_previous_rejections():
    history = [
        _a("A3", "P3", AssignmentStatus.OPEN),
        _a("A2", "P2", AssignmentStatus.REJECTED),
        _a("A1", "P1", AssignmentStatus.REJECTED),
    ]
    assert exclusion_set(history, "P3") == {"P1", "P2", "P3"}


def test_exclusion_is_deduplicated():
    history = [
        _a("A2", "P1", AssignmentStatus.REJECTED),
        _a("A1", "P1", AssignmentStatus.REJECTED),
    ]
    result = exclusion_set(history, "P1")
    assert result == frozenset({"P1"})
    assert len(result) == 1


def test_accepted_providers_are_not_excluded():
    history = [_a("A1", "P7", AssignmentStatus.ACCEPTED)]
    assert "P7" not in exclusion_set(history, "P1")


def test_select_highest_rating():
    chosen = select_replacement([_p("P2", 4.1), _p("P3", 4.8), _p("P4", 4.5)], set())
    assert chosen.id == "P3"


def test_select_breaks_rating_tie_by_fewest_clients():
    chosen = select_replacement([_p("P2", 4.8, clients=5), _p("P3", 4.8, clients=2)], set())
    assert chosen.id == "P3"


def test_select_breaks_full_tie_by_id():
    chosen = select_replacement([_p("P9", 4.0, 1), _p("P5", 4.0, 1)], set())
    assert chosen.id == "P5"


def test_unrated_providers_rank_last():
    chosen = select_replacement([_p("P2", None), _p("P3", 1.0)], set())
    assert chosen.id == "P3"


def test_excluded_providers_are_never_returned():
    candidates = [_p("P1", 5.0), _p("P2", 4.0)]
    assert select_replacement(candidates, {"P1"}).id == "P2"
    assert select_replacement(candidates, {"P1", "P2"}) is None


def test_no_candidates_returns_none():
    assert select_replacement([], set()) is None
