"""
Send the signup verification email via Resend.
Unlike receipt emails, a failed send is an error: the caller reports
signup as failed (the account row stays as written).
"""
import logging
from urllib.parse import urlencode

import resend

from app.core.errors import NotificationError

logger = logging.getLogger(__name__)

VERIFY_SUBJECT = "Verify Your Email"


class VerificationMailer:
    def __init__(self, api_key: str, sender: str, base_url: str):
        self.api_key = api_key
        self.sender = sender
        self.base_url = base_url.rstrip("/")

    def build_verification_url(self, email: str, token: str) -> str:
        query = urlencode({"token": token, "email": email})
        return f"{self.base_url}/verify-email?{query}"

    def send_verification_email(self, to_email: str, token: str) -> None:
        if not self.api_key:
            raise NotificationError("RESEND_API_KEY is not set; cannot send verification email")

        verify_url = self.build_verification_url(to_email, token)
        params = {
            "from": self.sender,
            "to": [to_email],
            "subject": VERIFY_SUBJECT,
            "html": f'<p>Click to verify: <a href="{verify_url}">{verify_url}</a></p>',
        }
        resend.api_key = self.api_key
        try:
            result = resend.Emails.send(params)
        except Exception as e:
            logger.error("Failed to send verification email to %s: %s", to_email, e)
            raise NotificationError(f"Failed to send verification email: {e}") from e
        logger.info("Verification email sent to %s (id: %s)", to_email, _message_id(result))


def _message_id(result):
    if isinstance(result, dict):
        return result.get("id")
    return getattr(result, "id", None)
