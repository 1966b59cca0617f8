"""Tests for the assignment state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.policies.assignment_transitions import approve, reject
from matchengine.domain.value_objects.enums import AssignmentStatus
from matchengine.domain.value_objects.work_ref import WorkRef

CREATED = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
NOW = CREATED + timedelta(hours=2)


def _assignment(status=AssignmentStatus.OPEN, provider_id="P1", reason=None) -> Assignment:
    return Assignment(
        id="A1", work_ref=WorkRef.request("R1"), provider_id=provider_id,
        status=status, created_at=CREATED, updated_at=CREATED, rejection_reason=reason,
    )


def test_approve_open_assignment():
    a = _assignment()
    accepted = approve(a, "P1", NOW)
    assert accepted.status is AssignmentStatus.ACCEPTED
    assert accepted.updated_at == NOW
    assert accepted.created_at == CREATED
    # Original is untouched
    assert a.status is AssignmentStatus.OPEN


def test_reject_open_assignment_records_reason():
    rejected = reject(_assignment(), "P1", "too far", NOW)
    assert rejected.status is AssignmentStatus.REJECTED
    assert rejected.rejection_reason == "too far"


def test_reject_without_reason_stores_none():
    rejected = reject(_assignment(), "P1", "", NOW)
    assert rejected.rejection_reason is None


@pytest.mark.parametrize(
    "status, expected",
    [
        (AssignmentStatus.ACCEPTED, ErrorKind.ALREADY_PROCESSED),
        (AssignmentStatus.REJECTED, ErrorKind.INVALID_TRANSITION),
    ],
)
def test_approve_terminal_assignment_fails(status, expected):
    with pytest.raises(EngineError) as exc:
        approve(_assignment(status=status), "P1", NOW)
    assert exc.value.kind is expected


@pytest.mark.parametrize(
    "status, expected",
    [
        (AssignmentStatus.REJECTED, ErrorKind.ALREADY_PROCESSED),
        (AssignmentStatus.ACCEPTED, ErrorKind.INVALID_TRANSITION),
    ],
)
def test_reject_terminal_assignment_fails(status, expected):
    with pytest.raises(EngineError) as exc:
        reject(_assignment(status=status, reason="x"), "P1", "again", NOW)
    assert exc.value.kind is expected


def test_wrong_provider_is_forbidden_before_status_check():
    """A stranger gets FORBIDDEN even when the assignment is already terminal."""
    with pytest.raises(EngineError) as exc:
        approve(_assignment(status=AssignmentStatus.ACCEPTED), "P9", NOW)
    assert exc.value.kind is ErrorKind.FORBIDDEN

    with pytest.raises(EngineError) as exc:
        reject(_assignment(), "P9", None, NOW)
    assert exc.value.kind is ErrorKind.FORBIDDEN


def test_terminal_states_never_change():
    for status in (AssignmentStatus.ACCEPTED, AssignmentStatus.REJECTED):
        a = _assignment(status=status, reason="kept")
        for transition in (
            lambda x: approve(x, "P1", NOW),
            lambda x: reject(x, "P1", "new reason", NOW),
        ):
            with pytest.raises(EngineError):
                transition(a)
        assert a.status is status
        assert a.rejection_reason == "kept"
