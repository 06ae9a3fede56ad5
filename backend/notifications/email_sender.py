"""
Email delivery via the Resend HTTP API.

Sends one rendered notification per call. The call is bounded by a timeout;
any non-2xx response, network error, or timeout is reported as a failure
carrying the provider's message.
"""

from typing import Any, Dict, Optional

import requests

from config.settings import DEFAULT_FROM_ADDRESS, DEFAULT_FROM_NAME, RESEND_API_URL
from models.notification import RenderedContent
from notifications.errors import ConfigurationError


class ResendEmailSender:
    """Thin client for POST /emails on a transactional email provider."""

    def __init__(
        self,
        api_key: Optional[str],
        from_address: str = DEFAULT_FROM_ADDRESS,
        from_name: Optional[str] = DEFAULT_FROM_NAME,
        api_url: str = RESEND_API_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ConfigurationError("RESEND_API_KEY is not configured")
        self.api_key = api_key
        self.from_address = from_address
        self.from_name = from_name
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def sender(self) -> str:
        if self.from_name:
            return f"{self.from_name} <{self.from_address}>"
        return self.from_address

    def send_email(
        self, to: str, subject: str, content: RenderedContent
    ) -> Dict[str, Any]:
        """
        Send a single email.

        Args:
            to: Recipient email address
            subject: Subject line
            content: Rendered HTML and text bodies

        Returns:
            Dictionary with 'success' (bool), 'email_id' (str if success), 'error' (str if failed)
        """
        payload: Dict[str, Any] = {
            "from": self.sender,
            "to": to,
            "subject": subject,
        }
        if content.html:
            payload["html"] = content.html
        if content.text:
            payload["text"] = content.text

        try:
            response = self.session.post(
                self.api_url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.Timeout:
            return {
                "success": False,
                "error": f"Email service timed out after {self.timeout:g}s",
            }
        except requests.RequestException as e:
            return {"success": False, "error": f"Email service unreachable: {e}"}

        if not 200 <= response.status_code < 300:
            return {
                "success": False,
                "error": f"Email service error: {response.status_code} - {response.text}",
            }

        try:
            body = response.json()
        except ValueError:
            body = {}

        return {
            "success": True,
            "email_id": body.get("id") if isinstance(body, dict) else None,
        }
