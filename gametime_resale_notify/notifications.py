"""
Notification handling for the Gametime Resale Notifier.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional, List

import httpx

from .models import Notification, NotificationConfig

logger = logging.getLogger(__name__)

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"


def notification_due(
    last_sent_at: Optional[datetime],
    now: datetime,
    min_interval_minutes: float,
) -> bool:
    """Return True if enough time has passed since the last notification."""
    if last_sent_at is None:
        return True
    return now - last_sent_at >= timedelta(minutes=min_interval_minutes)


class NotificationService:
    """Base class for notification services."""

    def __init__(self, config: NotificationConfig):
        self.config = config
        self.retry_attempts = config.retry_attempts
        self.retry_delay = config.retry_delay

    async def send(self, notification: Notification) -> bool:
        """Send a notification with retry logic."""
        for attempt in range(1, self.retry_attempts + 1):
            try:
                return await self._send_impl(notification)
            except Exception as e:
                if attempt == self.retry_attempts:
                    logger.error(
                        f"Failed to send notification after {self.retry_attempts} attempts: {e}"
                    )
                    return False

                delay = self.retry_delay * attempt
                logger.warning(
                    f"Attempt {attempt}/{self.retry_attempts} failed. Retrying in {delay}s... Error: {e}"
                )
                await asyncio.sleep(delay)

        return False

    async def _send_impl(self, notification: Notification) -> bool:
        """Implementation of the notification sending logic."""
        raise NotImplementedError("Subclasses must implement this method")


class NtfyNotificationService(NotificationService):
    """Notification service for ntfy.sh."""

    def __init__(self, topic: str, **kwargs):
        super().__init__(**kwargs)
        self.topic = topic
        self.base_url = f"https://ntfy.sh/{self.topic}"

    async def _send_impl(self, notification: Notification) -> bool:
        """Send notification via ntfy.sh."""
        # header values must be ASCII
        headers = {
            "Title": notification.title.encode("ascii", "ignore").decode().strip(),
            "Priority": str(notification.priority),
        }
        if notification.tags:
            headers["Tags"] = ",".join(notification.tags)
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.post(
                self.base_url,
                content=notification.message.encode("utf-8"),
                headers=headers
            )
            response.raise_for_status()
            return True


class PushoverNotificationService(NotificationService):
    """Notification service for Pushover."""

    def __init__(self, token: str, user: str, **kwargs):
        super().__init__(**kwargs)
        self.token = token
        self.user = user

    async def _send_impl(self, notification: Notification) -> bool:
        """Send notification via the Pushover messages API."""
        # Pushover priorities run from -2 to 2
        priority = max(-2, min(2, notification.priority - 3))
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.post(
                PUSHOVER_URL,
                data={
                    "token": self.token,
                    "user": self.user,
                    "title": notification.title,
                    "message": notification.message,
                    "priority": str(priority),
                },
            )
            response.raise_for_status()
            return True


class NotificationManager:
    """Manages different notification services."""

    def __init__(self, config: NotificationConfig):
        self.config = config
        self.services: List[NotificationService] = []
        self._setup_services()

    def _setup_services(self) -> None:
        """Set up notification services based on config."""
        if not self.config.enabled:
            logger.warning("Notifications are disabled in config")
            return

        service = self.config.service.lower()
        if service == "ntfy" and self.config.topic:
            self.services.append(NtfyNotificationService(
                topic=self.config.topic,
                config=self.config
            ))
        elif service == "pushover" and self.config.pushover_token and self.config.pushover_user:
            self.services.append(PushoverNotificationService(
                token=self.config.pushover_token,
                user=self.config.pushover_user,
                config=self.config
            ))
        else:
            logger.warning(f"No valid notification service configured for '{self.config.service}'")

    async def send_notification(
        self,
        title: str,
        message: str,
        priority: int = 3,
        tags: Optional[List[str]] = None,
    ) -> bool:
        """Send a notification using all available services."""
        if not self.services:
            logger.warning("No notification services configured")
            return False

        notification = Notification(
            title=title,
            message=message,
            priority=priority,
            tags=tags,
        )

        results = await asyncio.gather(
            *(service.send(notification) for service in self.services),
            return_exceptions=True
        )

        # Log any failures
        for service, result in zip(self.services, results):
            if isinstance(result, Exception):
                logger.error(
                    f"Error sending notification via {service.__class__.__name__}: {result}",
                    exc_info=result
                )

        return any(not isinstance(r, Exception) and r for r in results)


def create_notification_manager(config: NotificationConfig) -> NotificationManager:
    """Create a notification manager with the given config."""
    return NotificationManager(config)
