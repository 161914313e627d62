"""
Brevo transactional email client (template based).
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from promojour import config
from promojour.utils import get_logger
from .http import JsonHttpClient

logger = get_logger(__name__)


class BrevoError(Exception):
    """Raised when Brevo refuses to send an email."""


class BrevoClient(JsonHttpClient):
    async def send_template(
        self,
        *,
        to_email: str,
        template_id: int,
        params: Dict[str, Any],
        sender_name: Optional[str] = None,
        sender_email: Optional[str] = None,
    ) -> str | None:
        api_key = config.require_setting("BREVO_API_KEY")
        response = await self.post(
            config.BREVO_API_URL,
            json={
                "sender": {
                    "name": sender_name or config.ALERT_SETTINGS["sender_name"],
                    "email": sender_email or config.ALERT_SETTINGS["sender_email"],
                },
                "to": [{"email": to_email}],
                "templateId": template_id,
                "params": params,
            },
            headers={"Accept": "application/json", "api-key": api_key},
        )
        if not response.ok:
            logger.error("Brevo email rejected", status=response.status, to_email=to_email)
            raise BrevoError(str(response.data.get("message") or "Failed to send email"))
        message_id = response.data.get("messageId")
        logger.info("Brevo email sent", message_id=message_id, template_id=template_id)
        return message_id


__all__ = ["BrevoClient", "BrevoError"]
