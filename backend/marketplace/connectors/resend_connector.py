"""
Resend Email Connector
Transactional email for important notifications
"""
from html import escape
from typing import Optional
import httpx
import logging

logger = logging.getLogger(__name__)


def render_notification_email(title: str, body: str) -> str:
    """HTML body used for notification emails"""
    return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <h2 style="color: #2563EB;">{escape(title)}</h2>
          <p>{escape(body)}</p>
          <hr style="border: none; border-top: 1px solid #eee; margin: 20px 0;">
          <p style="color: #666; font-size: 12px;">
            Este es un mensaje automático de Sergio Marketplace
          </p>
        </div>
    """


class ResendConnector:
    """Client for https://api.resend.com/emails"""

    def __init__(self, api_key: str, sender: str, base_url: str = "https://api.resend.com",
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.sender = sender
        self.base_url = base_url.rstrip('/')
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send_email(self, to: str, subject: str, html: str) -> bool:
        """
        Send one email

        Returns:
            False when no API key is configured or Resend rejects the request
        """
        if not self.enabled:
            logger.info("No RESEND_API_KEY configured, skipping email")
            return False

        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
        }
        payload = {'from': self.sender, 'to': to, 'subject': subject, 'html': html}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(f"{self.base_url}/emails", headers=headers, json=payload, timeout=30.0)
            response.raise_for_status()
            return True
        except httpx.HTTPStatusError as e:
            logger.error(f"Resend API error: {e.response.status_code} - {e.response.text}")
            return False
        except Exception as e:
            logger.error(f"Error sending email: {e}")
            return False
