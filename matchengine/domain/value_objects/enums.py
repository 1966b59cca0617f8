"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class WorkKind(str, Enum):
    REQUEST = "request"
    JOB = "job"


class AssignmentStatus(str, Enum):
    OPEN = "open"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not AssignmentStatus.OPEN


class WorkStatus(str, Enum):
    REQUESTED = "requested"
    ACCEPTED = "accepted"
    PLANNED = "planned"
    REJECTED_NEEDS_MANUAL = "rejected_needs_manual"
    CANCELLED = "cancelled"


class SubscriptionStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    PAUSED = "paused"
    STOPPED = "stopped"


class Frequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    FOURWEEKLY = "fourweekly"


class RecipientRole(str, Enum):
    CUSTOMER = "customer"
    PROVIDER = "provider"
    ADMIN = "admin"


class NotificationKind(str, Enum):
    ASSIGNMENT_ACCEPTED = "assignment_accepted"
    ASSIGNMENT_ACCEPTED_CONFIRMATION = "assignment_accepted_confirmation"
    ASSIGNMENT_ACCEPTED_NOTICE = "assignment_accepted_notice"
    ASSIGNMENT_OFFER = "assignment_offer"
    REMATCH_FOUND_NOTICE = "rematch_found_notice"
    MANUAL_ASSIGNMENT_REQUIRED = "manual_assignment_required"
    SEARCHING_NEW_PROVIDER = "searching_new_provider"
    SUBSCRIPTION_CHANGED = "subscription_changed"
