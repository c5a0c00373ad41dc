"""
Notification Service - notification_history fan-out and inbox helpers

NotificationDispatcher drains the pending queue: push to every active Expo
token of the recipient, optionally email through Resend, and record the
outcome on each row. Rows are processed one after another; only the pushes
for a single row run concurrently.

Author: Mapu Team
Date: 2025-11-21
"""
import asyncio
import logging
from typing import Dict, Any, List, Optional

from marketplace.core.config import settings
from marketplace.connectors.expo_push_connector import ExpoPushConnector
from marketplace.connectors.resend_connector import ResendConnector, render_notification_email
from marketplace.domain.notification import Notification, DispatchResult, NotificationPayload
from marketplace.repositories.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)


def clamp_batch_size(requested: Optional[int] = None) -> int:
    """
    Rows to take from the queue in one run

    None means the configured NOTIFICATION_BATCH_SIZE; larger requests are
    capped to it.

    Raises:
        ValueError: requested size below 1
    """
    if requested is None:
        return settings.NOTIFICATION_BATCH_SIZE
    if requested < 1:
        raise ValueError(f"Batch size must be at least 1 (got {requested})")
    return min(requested, settings.NOTIFICATION_BATCH_SIZE)


class NotificationDispatcher:
    """Processes pending notification_history rows"""

    def __init__(self,
                 repo: Optional[NotificationRepository] = None,
                 push: Optional[ExpoPushConnector] = None,
                 email: Optional[ResendConnector] = None,
                 batch_size: Optional[int] = None):
        self.repo = repo or NotificationRepository()
        self.push = push or ExpoPushConnector(settings.EXPO_PUSH_URL)
        self.email = email or ResendConnector(settings.RESEND_API_KEY, settings.EMAIL_FROM)
        self.batch_size = clamp_batch_size(batch_size)

    async def process_pending(self, dry_run: bool = False) -> Dict[str, Any]:
        """
        Process one batch of pending notifications

        Returns:
            {"message": "No pending notifications"} when the queue is empty,
            otherwise {"processed": n, "results": [...]}
        """
        notifications = self.repo.find_pending(limit=self.batch_size)

        if not notifications:
            return {'message': 'No pending notifications'}

        if dry_run:
            return {
                'processed': 0,
                'pending': [notification.id for notification in notifications],
            }

        results: List[DispatchResult] = []
        for notification in notifications:
            try:
                results.append(await self._dispatch(notification))
            except Exception as e:
                logger.error(f"Error processing notification {notification.id}: {e}")
                self.repo.mark_status(notification.id, 'failed', stamp=False)
                results.append(DispatchResult(id=notification.id, status='error', error=str(e)))

        logger.info(f"Processed {len(results)} notifications")
        return {
            'processed': len(results),
            'results': [result.to_dict() for result in results],
        }

    async def _dispatch(self, notification: Notification) -> DispatchResult:
        tokens = self.repo.find_active_tokens(notification.user_id)

        if tokens:
            outcomes = await asyncio.gather(*[
                self.push.send_push(token, notification.title, notification.body, notification.data)
                for token in tokens
            ])
            status = 'sent' if any(outcomes) else 'failed'
            self.repo.mark_status(notification.id, status)
            result = DispatchResult(id=notification.id, status=status, tokens_count=len(tokens))
        else:
            # Users without push enabled still get the row closed
            self.repo.mark_status(notification.id, 'sent')
            result = DispatchResult(id=notification.id, status='no_tokens')

        if notification.wants_email:
            await self._send_email(notification)

        return result

    async def _send_email(self, notification: Notification):
        """Email the recipient; failures are logged only"""
        try:
            email = self.repo.find_profile_email(notification.user_id)
            if not email:
                email = self.repo.find_auth_email(notification.user_id)
            if not email:
                return

            await self.email.send_email(
                email,
                notification.title,
                render_notification_email(notification.title, notification.body),
            )
        except Exception as e:
            logger.error(f"Error sending email: {e}")


class NotificationService:
    """Storefront-side helpers: push tokens, inbox and queueing"""

    def __init__(self, repo: Optional[NotificationRepository] = None):
        self.repo = repo or NotificationRepository()

    def save_push_token(self, user_id: str, token: str, platform: Optional[str] = None,
                        device_name: Optional[str] = None):
        self.repo.upsert_token(user_id, token, platform, device_name)

    def remove_push_token(self, user_id: str, token: str):
        self.repo.delete_token(user_id, token)

    def deactivate_user_tokens(self, user_id: str):
        """Logout: stop pushing to any of the user's devices"""
        self.repo.deactivate_tokens(user_id)

    def get_user_notifications(self, user_id: str, limit: int = 50) -> List[Notification]:
        return self.repo.find_by_user(user_id, limit)

    def mark_notification_as_read(self, notification_id: str, user_id: str):
        self.repo.mark_read(notification_id, user_id)

    def get_unread_count(self, user_id: str) -> int:
        return self.repo.count_unread(user_id)

    def queue_notification(self, payload: NotificationPayload) -> Notification:
        """Insert a pending row for the next dispatcher run"""
        return self.repo.insert(payload.user_id, payload.title, payload.body, payload.data)
