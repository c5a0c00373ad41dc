"""
Notification Domain Models

Rows of notification_history (the fan-out queue) and push_tokens.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, Any, Literal
from datetime import datetime


NotificationStatus = Literal['pending', 'sent', 'failed']

# data.type values that also trigger an email
EMAIL_NOTIFICATION_TYPES = ('new_order', 'order_status', 'low_stock')


class Notification(BaseModel):
    id: str
    user_id: str
    title: str
    body: str
    data: Optional[Dict[str, Any]] = None
    status: NotificationStatus = 'pending'
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(extra='ignore')

    @property
    def notification_type(self) -> Optional[str]:
        return (self.data or {}).get('type')

    @property
    def wants_email(self) -> bool:
        return self.notification_type in EMAIL_NOTIFICATION_TYPES


class PushToken(BaseModel):
    user_id: str
    token: str
    platform: Optional[str] = None
    device_name: Optional[str] = None
    is_active: bool = True

    model_config = ConfigDict(extra='ignore')


class DispatchResult(BaseModel):
    """Per-notification outcome reported by the fan-out"""

    id: str
    status: Literal['sent', 'failed', 'no_tokens', 'error']
    tokens_count: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class NotificationPayload(BaseModel):
    """Input for queue_notification"""

    user_id: str
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
