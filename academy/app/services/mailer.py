"""Transactional email client."""

import logging
from typing import Optional

import requests

from academy.app.core.errors import EmailDeliveryError
from academy.app.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailClient:
    """Sends HTML email through the configured HTTP email API."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        settings = settings or get_settings()
        self.api_url = settings.email_api_url
        self.api_key = settings.email_api_key
        self.from_email = settings.email_from
        self.reply_to = settings.admin_email
        self.timeout = settings.email_timeout_seconds
        self.http = session or requests.Session()

    def send(self, to_email: str, subject: str, html: str) -> Optional[str]:
        """Send one message and return the provider's message id."""
        if not self.api_key:
            raise EmailDeliveryError("Email API key is not configured")

        payload = {"from": self.from_email, "to": [to_email], "subject": subject, "html": html}
        if self.reply_to:
            payload["reply_to"] = self.reply_to
        try:
            resp = self.http.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Email transport error for %s: %s", to_email, exc)
            raise EmailDeliveryError(f"Email transport error: {exc}") from exc

        if resp.status_code >= 300:
            logger.error("Email API rejected message to %s: %s %s", to_email, resp.status_code, resp.text[:200])
            raise EmailDeliveryError(f"Email API returned {resp.status_code}")
        try:
            return resp.json().get("id")
        except ValueError:
            return None


def get_email_client() -> EmailClient:
    return EmailClient()
