from abc import ABC, abstractmethod

import httpx

from doctransform.config.settings import Settings
from doctransform.logging.logger import Log


class BaseNotifier(ABC):
    """Contract for fire-and-forget notices about job progress."""

    @abstractmethod
    def notify(self, title: str, content: str) -> None:
        """Deliver one notice. May raise; callers use notify_safely."""


class LogNotifier(BaseNotifier):
    """Writes notices to the application log."""

    def notify(self, title: str, content: str) -> None:
        Log.info(f"{title}: {content}")


class WebhookNotifier(BaseNotifier):
    """POSTs notices as JSON to a webhook."""

    def __init__(self, url: str, timeout_seconds: float = 5.0) -> None:
        self._url = url
        self._timeout = timeout_seconds

    def notify(self, title: str, content: str) -> None:
        response = httpx.post(
            self._url,
            json={"title": title, "content": content},
            timeout=self._timeout,
        )
        response.raise_for_status()


def notify_safely(notifier: BaseNotifier, title: str, content: str) -> None:
    """Send a notice; a failure is logged and never propagates."""
    try:
        notifier.notify(title, content)
    except Exception as exc:
        Log.warning(f"Notification '{title}' failed: {exc}")


def create_notifier(settings: Settings) -> BaseNotifier:
    if settings.notification_webhook_url:
        return WebhookNotifier(
            settings.notification_webhook_url,
            timeout_seconds=settings.notification_timeout_seconds,
        )
    return LogNotifier()
