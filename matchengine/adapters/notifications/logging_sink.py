"""Logging notification sink — local runs without a mail/webhook backend."""

from __future__ import annotations

import json
import logging

from matchengine.application.ports.notification_sink import NotificationSink
from matchengine.domain.entities.notification import NotificationIntent

logger = logging.getLogger(__name__)


class LoggingNotificationSink(NotificationSink):
    async def send(self, intent: NotificationIntent) -> None:
        logger.info(
            "Notify %s (%s) for %s: %s",
            intent.recipient_role.value,
            intent.kind.value,
            intent.work_ref,
            json.dumps(intent.payload, default=str, ensure_ascii=False),
        )
