"""Tests for the WorkRef value object."""

import pytest

from matchengine.domain.value_objects.enums import WorkKind
from matchengine.domain.value_objects.work_ref import WorkRef


def test_constructors_and_column():
    assert WorkRef.request("R1") == WorkRef(WorkKind.REQUEST, "R1")
    assert WorkRef.request("R1").column == "request_id"
    assert WorkRef.job("J1").column == "job_id"


def test_str():
    assert str(WorkRef.job("J1")) == "job:J1"


def test_refs_are_hashable_and_distinct_by_kind():
    assert len({WorkRef.request("X"), WorkRef.job("X"), WorkRef.request("X")}) == 2


def test_from_record():
    assert WorkRef.from_record({"id": "A1", "request_id": "R1", "job_id": None}) == WorkRef.request("R1")
    assert WorkRef.from_record({"id": "A2", "job_id": "J1"}) == WorkRef.job("J1")


@pytest.mark.parametrize(
    "record",
    [
        {"id": "A1", "request_id": "R1", "job_id": "J1"},
        {"id": "A1", "request_id": None, "job_id": None},
    ],
)
def test_from_record_requires_exactly_one_reference(record):
    with pytest.raises(ValueError):
        WorkRef.from_record(record)
