from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional, Union

SMS_SENT = "sms:sent"
SMS_RECEIVED = "sms:received"
LOG_EVENT_TYPES = (SMS_SENT, SMS_RECEIVED)


class WebhookRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    webhook_id: str
    user_id: str
    webhook_url: str
    events: List[str]
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WebhookRegister(BaseModel):
    userId: Optional[str] = None
    webhookUrl: Optional[str] = None
    events: Optional[List[str]] = None


class WebhookUnregister(BaseModel):
    webhookId: Optional[str] = None


class WebhookLog(BaseModel):
    """An SMS delivery log forwarded to the user's webhooks."""
    userId: Optional[str] = None
    id: Optional[Union[str, int]] = None
    recipient: Optional[str] = None
    message: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    timestamp: Optional[Union[str, int, float]] = None
