"""Which notifications each workflow outcome produces, and for whom."""

from __future__ import annotations

from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.entities.notification import NotificationIntent
from matchengine.domain.entities.work import Subscription, WorkRecord
from matchengine.domain.value_objects.enums import NotificationKind, RecipientRole
from matchengine.domain.value_objects.work_ref import WorkRef


def _intent(kind, role, work: WorkRecord, **payload) -> NotificationIntent:
    return NotificationIntent(
        kind=kind,
        recipient_role=role,
        work_ref=work.ref,
        payload={**work.summary(), **payload},
    )


def approval_intents(work: WorkRecord, assignment: Assignment) -> list[NotificationIntent]:
    common = {"assignment_id": assignment.id, "provider_id": assignment.provider_id}
    return [
        _intent(NotificationKind.ASSIGNMENT_ACCEPTED, RecipientRole.CUSTOMER, work, **common),
        _intent(
            NotificationKind.ASSIGNMENT_ACCEPTED_CONFIRMATION, RecipientRole.PROVIDER, work, **common
        ),
        _intent(NotificationKind.ASSIGNMENT_ACCEPTED_NOTICE, RecipientRole.ADMIN, work, **common),
    ]


def rematch_intents(
    work: WorkRecord,
    rejected: Assignment,
    new_assignment: Assignment,
) -> list[NotificationIntent]:
    return [
        _intent(
            NotificationKind.ASSIGNMENT_OFFER,
            RecipientRole.PROVIDER,
            work,
            assignment_id=new_assignment.id,
            provider_id=new_assignment.provider_id,
        ),
        _intent(
            NotificationKind.REMATCH_FOUND_NOTICE,
            RecipientRole.ADMIN,
            work,
            rejected_assignment_id=rejected.id,
            rejected_by=rejected.provider_id,
            reason=rejected.rejection_reason,
            assignment_id=new_assignment.id,
            provider_id=new_assignment.provider_id,
        ),
    ]


def exhausted_intents(
    work: WorkRecord,
    rejected: Assignment,
    excluded: frozenset[str],
) -> list[NotificationIntent]:
    # The customer message deliberately carries no timeline
    return [
        _intent(
            NotificationKind.MANUAL_ASSIGNMENT_REQUIRED,
            RecipientRole.ADMIN,
            work,
            urgent=True,
            rejected_assignment_id=rejected.id,
            rejected_by=rejected.provider_id,
            reason=rejected.rejection_reason,
            excluded_providers=sorted(excluded),
        ),
        _intent(NotificationKind.SEARCHING_NEW_PROVIDER, RecipientRole.CUSTOMER, work),
    ]


def subscription_change_intents(
    work_ref: WorkRef,
    before: Subscription,
    after: Subscription,
) -> list[NotificationIntent]:
    change = {
        "subscription_id": after.id,
        "customer_email": after.customer_email,
        "previous_hours": before.hours,
        "hours": after.hours,
        "previous_frequency": before.frequency.value,
        "frequency": after.frequency.value,
        "bundle_amount_cents": after.bundle_amount_cents,
    }
    roles = [RecipientRole.CUSTOMER, RecipientRole.ADMIN]
    if after.provider_id:
        roles.insert(1, RecipientRole.PROVIDER)
        change["provider_id"] = after.provider_id
    return [
        NotificationIntent(
            kind=NotificationKind.SUBSCRIPTION_CHANGED,
            recipient_role=role,
            work_ref=work_ref,
            payload=dict(change),
        )
        for role in roles
    ]
