"""Webhook notification sink — posts each intent to the mail service."""

from __future__ import annotations

import logging

import httpx

from matchengine.application.ports.notification_sink import NotificationSink
from matchengine.domain.entities.notification import NotificationIntent

logger = logging.getLogger(__name__)


class WebhookNotificationSink(NotificationSink):
    """POSTs ``intent.to_dict()`` as JSON; the receiver owns templates and addresses.

    Errors propagate so the dispatcher can count the delivery as failed.
    """

    def __init__(
        self,
        url: str,
        admin_email: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._url = url
        self._admin_email = admin_email
        self._timeout = timeout
        self._client = client

    def _body(self, intent: NotificationIntent) -> dict:
        body = intent.to_dict()
        if self._admin_email:
            body["admin_email"] = self._admin_email
        return body

    async def send(self, intent: NotificationIntent) -> None:
        body = self._body(intent)
        if self._client is not None:
            response = await self._client.post(self._url, json=body, timeout=self._timeout)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._url, json=body)
        response.raise_for_status()
        logger.debug("Webhook accepted %s for %s", intent.kind.value, intent.work_ref)
