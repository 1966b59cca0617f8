"""Port interface for notification delivery."""

from abc import ABC, abstractmethod

from matchengine.domain.entities.notification import NotificationIntent


class NotificationSink(ABC):
    @abstractmethod
    async def send(self, intent: NotificationIntent) -> None:
        """Deliver one notification. Templating and retries are the sink's business."""
        ...
