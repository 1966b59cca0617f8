"""Notification intent — a message the engine wants sent, not yet sent."""

from dataclasses import dataclass, field

from matchengine.domain.value_objects.enums import NotificationKind, RecipientRole
from matchengine.domain.value_objects.work_ref import WorkRef


@dataclass(frozen=True)
class NotificationIntent:
    kind: NotificationKind
    recipient_role: RecipientRole
    work_ref: WorkRef
    payload: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "recipient_role": self.recipient_role.value,
            "work_ref": {"kind": self.work_ref.kind.value, "id": self.work_ref.id},
            "payload": self.payload,
        }
