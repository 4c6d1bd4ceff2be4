"""
Best-effort fan-out of business events to the email and SMS sinks.

Nothing here raises: a delivery failure is logged and dropped. Route
handlers submit notifications as background tasks after the data change is
committed, so the HTTP outcome never depends on delivery.
"""

from enum import Enum
from typing import Optional

import httpx

from fintech_index.config import Settings, get_settings
from fintech_index.kernel.notifications.messages import Notice
from fintech_index.kernel.notifications.sinks import EmailSink, SmsSink
from fintech_index.logging_config import get_logger

logger = get_logger(__name__)


class Channel(str, Enum):
    EMAIL = "email"
    SMS = "sms"


class NotificationDispatcher:
    """Routes notices to a recipient over one or both channels."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.email = EmailSink(self.settings)
        self.sms = SmsSink(self.settings, client=client)
        self._client = client

    async def notify(self, channel: Channel, recipient: str, subject: str, message: str) -> bool:
        """
        Deliver one message. Returns True when the sink accepted it.

        Any exception from the sink is logged and swallowed.
        """
        try:
            if channel == Channel.EMAIL:
                return await self.email.send(recipient, subject, message)
            return await self.sms.send(recipient, message)
        except Exception:
            logger.exception(
                "Notification delivery failed",
                extra={"channel": channel.value, "recipient": recipient, "subject": subject},
            )
            return False

    async def notify_admin(self, notice: Notice) -> None:
        """Email (and, when the notice has an SMS text, text) the admin contact."""
        await self.notify(
            Channel.EMAIL,
            self.settings.admin_contact_email,
            notice.subject,
            notice.body,
        )
        if notice.sms:
            await self.notify(
                Channel.SMS,
                self.settings.admin_contact_phone,
                notice.subject,
                notice.sms,
            )

    async def notify_user(self, email: str, notice: Notice, phone: Optional[str] = None) -> None:
        """Email a user, and text them when a phone number is on file."""
        await self.notify(Channel.EMAIL, email, notice.subject, notice.body)
        if phone and notice.sms:
            await self.notify(Channel.SMS, phone, notice.subject, notice.sms)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()


_dispatcher: Optional[NotificationDispatcher] = None


def init_dispatcher(settings: Optional[Settings] = None) -> NotificationDispatcher:
    """Create the process-wide dispatcher with a shared HTTP client."""
    global _dispatcher
    settings = settings or get_settings()
    client = httpx.AsyncClient(timeout=settings.sms_timeout_seconds)
    _dispatcher = NotificationDispatcher(settings, client=client)
    return _dispatcher


def get_dispatcher() -> NotificationDispatcher:
    """FastAPI dependency; falls back to a client-less dispatcher before startup."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = NotificationDispatcher()
    return _dispatcher


async def close_dispatcher() -> None:
    global _dispatcher
    if _dispatcher is not None:
        await _dispatcher.aclose()
        _dispatcher = None
