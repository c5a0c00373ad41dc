"""
Notifications API Endpoints
Fan-out trigger for the notification_history queue plus the user's inbox
and push-token registration

Security:
- POST /dispatch requires X-Notifications-Key header with NOTIFICATIONS_API_KEY
- Inbox and push-token endpoints require a Supabase session

Author: Mapu Team
Date: 2025-11-23
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Header, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from marketplace.core.auth import TokenUser, get_current_user, require_admin
from marketplace.core.config import settings
from marketplace.domain.notification import NotificationPayload
from marketplace.services.notification_service import NotificationDispatcher, NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Security - API Key Verification
# ============================================================================

async def verify_notifications_key(x_notifications_key: str = Header(None, alias="X-Notifications-Key")):
    """
    Verify the dispatcher API key from X-Notifications-Key header.

    If NOTIFICATIONS_API_KEY is not configured, allows all requests (local development).
    """
    if not settings.NOTIFICATIONS_API_KEY:
        logger.warning("NOTIFICATIONS_API_KEY not configured - dispatch endpoint is unprotected!")
        return

    if not x_notifications_key:
        logger.warning("Dispatch request without X-Notifications-Key header")
        raise HTTPException(
            status_code=401,
            detail="Missing X-Notifications-Key header. Authentication required."
        )

    if x_notifications_key != settings.NOTIFICATIONS_API_KEY:
        logger.warning("Invalid notifications key attempt")
        raise HTTPException(
            status_code=401,
            detail="Invalid API key"
        )


class PushTokenRequest(BaseModel):
    token: str
    platform: Optional[str] = None
    device_name: Optional[str] = None


# ============================================================================
# Fan-out
# ============================================================================

@router.post("/dispatch", dependencies=[Depends(verify_notifications_key)])
async def dispatch_notifications():
    """
    Process up to NOTIFICATION_BATCH_SIZE pending notifications

    Returns {"processed": n, "results": [...]} or
    {"message": "No pending notifications"}; any top-level failure is a 500
    with {"error": message}.
    """
    try:
        dispatcher = NotificationDispatcher()
        return await dispatcher.process_pending()
    except Exception as e:
        logger.error(f"Notification dispatch failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})


@router.post("/queue")
async def queue_notification(payload: NotificationPayload, admin: TokenUser = Depends(require_admin)):
    """Queue a notification for the next dispatch run"""
    try:
        service = NotificationService()
        notification = service.queue_notification(payload)

        return {
            "status": "success",
            "data": notification.model_dump(mode='json')
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error queueing notification: {str(e)}")


# ============================================================================
# Inbox
# ============================================================================

@router.get("")
async def get_notifications(limit: int = Query(50, ge=1, le=200),
                            user: TokenUser = Depends(get_current_user)):
    try:
        service = NotificationService()
        notifications = service.get_user_notifications(user.id, limit)

        return {
            "status": "success",
            "count": len(notifications),
            "data": [notification.model_dump(mode='json') for notification in notifications]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching notifications: {str(e)}")


@router.get("/unread-count")
async def get_unread_count(user: TokenUser = Depends(get_current_user)):
    try:
        service = NotificationService()
        return {
            "status": "success",
            "data": {"unread": service.get_unread_count(user.id)}
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error counting notifications: {str(e)}")


@router.post("/{notification_id}/read")
async def mark_as_read(notification_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        service = NotificationService()
        service.mark_notification_as_read(notification_id, user.id)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating notification: {str(e)}")


# ============================================================================
# Push tokens
# ============================================================================

@router.post("/push-tokens")
async def register_push_token(request: PushTokenRequest, user: TokenUser = Depends(get_current_user)):
    try:
        service = NotificationService()
        service.save_push_token(user.id, request.token, request.platform, request.device_name)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving push token: {str(e)}")


@router.delete("/push-tokens")
async def remove_push_token(token: Optional[str] = Query(None, description="Token to remove; all devices when omitted"),
                            user: TokenUser = Depends(get_current_user)):
    """Remove one device token, or deactivate every token of the user (logout)"""
    try:
        service = NotificationService()
        if token:
            service.remove_push_token(user.id, token)
        else:
            service.deactivate_user_tokens(user.id)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error removing push token: {str(e)}")
