"""Pytest configuration and shared fixtures."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from matchengine.adapters.persistence.memory_store import InMemoryRecordStore

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class StepClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime = T0):
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


def id_sequence(prefix: str):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


def seed_records() -> dict[str, list[dict]]:
    """One recurring request R1 and one job J1, both offered to P1, in Utrecht."""
    return {
        "recurring_requests": [
            {
                "id": "R1", "status": "requested", "customer_name": "Sanne de Vries",
                "customer_email": "sanne@example.com", "city": "Utrecht", "hours": 3.0,
                "frequency": "weekly", "start_week": "2026-W11",
            },
        ],
        "subscriptions": [
            {
                "id": "S1", "request_id": "R1", "provider_id": None, "status": "pending",
                "hours": 3.0, "minimum_hours": 3.0, "frequency": "weekly",
                "customer_email": "sanne@example.com",
            },
        ],
        "jobs": [
            {
                "id": "J1", "status": "requested", "provider_id": None,
                "customer_name": "Daan Bakker", "customer_email": "daan@example.com",
                "city": "Utrecht", "hours": 4.0, "preferred_date": "2026-03-14",
            },
        ],
        "assignments": [
            {
                "id": "A1", "request_id": "R1", "job_id": None, "provider_id": "P1",
                "status": "open", "rejection_reason": None,
                "created_at": T0.isoformat(), "updated_at": T0.isoformat(),
            },
            {
                "id": "AJ1", "request_id": None, "job_id": "J1", "provider_id": "P1",
                "status": "open", "rejection_reason": None,
                "created_at": T0.isoformat(), "updated_at": T0.isoformat(),
            },
        ],
        "providers": [
            {
                "id": "P1", "first_name": "Fatima", "last_name": "El Amrani",
                "email": "fatima@example.com", "city": "Utrecht", "active": True,
                "available_hours": 20.0, "rating": 4.9, "active_clients": 3,
            },
            {
                "id": "P2", "first_name": "Joris", "last_name": "Jansen",
                "email": "joris@example.com", "city": "Utrecht", "active": True,
                "available_hours": 12.0, "rating": 4.7, "active_clients": 1,
            },
            {
                "id": "P3", "first_name": "Emma", "last_name": "Visser",
                "email": "emma@example.com", "city": "Amsterdam", "active": True,
                "available_hours": 30.0, "rating": 5.0, "active_clients": 0,
            },
        ],
    }


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store():
    return InMemoryRecordStore(seed_records())


@pytest.fixture
def records():
    return seed_records()


@pytest.fixture
def id_factory():
    return id_sequence("A-new-")


@pytest.fixture
def t0():
    return T0
