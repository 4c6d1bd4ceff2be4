"""
Delivery channels for notifications.

Both sinks degrade to logging when their credentials are not configured, so
local and test runs never need a mail server or an SMS account.
"""

import asyncio
import smtplib
from email.mime.text import MIMEText
from typing import Optional

import httpx

from fintech_index.config import Settings
from fintech_index.logging_config import get_logger

logger = get_logger(__name__)


class EmailSink:
    """Sends plain-text mail over SMTP with STARTTLS."""

    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.user = settings.smtp_user
        self.password = settings.smtp_password
        self.sender = settings.smtp_from_email or settings.smtp_user

    @property
    def configured(self) -> bool:
        return bool(self.host)

    def _send_blocking(self, to: str, subject: str, body: str) -> None:
        msg = MIMEText(body)
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
            smtp.starttls()
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(msg)

    async def send(self, to: str, subject: str, body: str) -> bool:
        if not self.configured:
            logger.info("EMAIL (not configured) to=%s subject=%s", to, subject)
            return False
        # smtplib is blocking; keep it off the event loop
        await asyncio.to_thread(self._send_blocking, to, subject, body)
        logger.info("Email sent", extra={"recipient": to, "subject": subject})
        return True


class SmsSink:
    """
    Sends SMS through an HTTP messaging API.

    The request shape follows Africa's Talking: form-encoded ``username``,
    ``to``, ``message`` and optional ``from`` with an ``apiKey`` header.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.api_url = settings.sms_api_url
        self.username = settings.sms_username
        self.api_key = settings.sms_api_key
        self.sender_id = settings.sms_sender_id
        self.timeout = settings.sms_timeout_seconds
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_url and self.username and self.api_key)

    async def send(self, to: str, message: str) -> bool:
        if not self.configured or not to:
            logger.info("SMS (not configured) to=%s message=%s", to or "-", message[:160])
            return False

        data = {"username": self.username, "to": to, "message": message}
        if self.sender_id:
            data["from"] = self.sender_id
        headers = {"apiKey": self.api_key, "Accept": "application/json"}

        if self._client is not None:
            response = await self._client.post(self.api_url, data=data, headers=headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.api_url, data=data, headers=headers)
        response.raise_for_status()
        logger.info("SMS sent", extra={"recipient": to})
        return True
