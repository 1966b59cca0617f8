"""Audit entry — append-only record of a completed state change."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class AuditEntry:
    module: str
    entity_id: str
    action: str
    performed_by: str | None
    timestamp: datetime
    details: dict = field(default_factory=dict)
