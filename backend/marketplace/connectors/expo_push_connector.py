"""
Expo Push Connector
Sends push notifications to Expo device tokens
"""
from typing import Dict, Optional, Any
import httpx
import logging

logger = logging.getLogger(__name__)


class ExpoPushConnector:
    """Thin client for Expo's push send endpoint"""

    def __init__(self, push_url: str = "https://exp.host/--/api/v2/push/send",
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.push_url = push_url
        self._transport = transport

    async def send_push(self, token: str, title: str, body: str,
                        data: Optional[Dict[str, Any]] = None) -> bool:
        """
        Send a push notification to a single device

        Returns:
            True unless Expo reports an error ticket or the call fails
        """
        message = {
            'to': token,
            'sound': 'default',
            'title': title,
            'body': body,
            'data': data or {},
        }
        headers = {
            'Accept': 'application/json',
            'Accept-encoding': 'gzip, deflate',
            'Content-Type': 'application/json',
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(self.push_url, headers=headers, json=message, timeout=30.0)
            result = response.json()
        except Exception as e:
            logger.error(f"Error sending push: {e}")
            return False

        ticket = result.get('data') if isinstance(result, dict) else None
        if isinstance(ticket, dict) and ticket.get('status') == 'error':
            logger.error(f"Push error: {ticket.get('message')}")
            return False

        return True
