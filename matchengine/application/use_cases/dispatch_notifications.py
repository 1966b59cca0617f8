"""NotificationDispatcher — fire-and-forget delivery of notification intents."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from matchengine.application.ports.notification_sink import NotificationSink
from matchengine.domain.entities.notification import NotificationIntent

logger = logging.getLogger(__name__)


@dataclass
class DispatchReport:
    sent: list[NotificationIntent] = field(default_factory=list)
    failed: list[NotificationIntent] = field(default_factory=list)


class NotificationDispatcher:
    """Sends every intent concurrently; one failure never cancels the others."""

    def __init__(self, sink: NotificationSink):
        self._sink = sink

    async def dispatch(
        self, intents: list[NotificationIntent], correlation_id: str | None = None
    ) -> DispatchReport:
        cid = correlation_id or "-"
        report = DispatchReport()
        if not intents:
            return report

        outcomes = await asyncio.gather(
            *(self._sink.send(intent) for intent in intents),
            return_exceptions=True,
        )
        for intent, outcome in zip(intents, outcomes):
            if isinstance(outcome, BaseException):
                report.failed.append(intent)
                logger.warning(
                    "[%s] Notification %s → %s for %s failed (non-critical): %s",
                    cid, intent.kind.value, intent.recipient_role.value, intent.work_ref, outcome,
                )
            else:
                report.sent.append(intent)

        logger.info("[%s] Notifications: %d sent, %d failed", cid, len(report.sent), len(report.failed))
        return report
