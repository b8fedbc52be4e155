from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from ..schemas.webhook import WebhookRegister, WebhookUnregister, WebhookLog, LOG_EVENT_TYPES
from ..dependencies import get_webhook_registry, get_fanout
from ..errors import ValidationError
from ..services.webhook_registry import WebhookRegistry
from ..services.webhook_fanout import WebhookFanout
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

LOG_REQUIRED_FIELDS = ("userId", "id", "recipient", "message", "status", "type")


@router.post("/register-webhook")
def register_webhook(payload: WebhookRegister, webhooks: WebhookRegistry = Depends(get_webhook_registry)):
    record = webhooks.register(payload.userId, payload.webhookUrl, payload.events)
    return {
        "success": True,
        "message": "Webhook registered successfully",
        "webhookId": record.webhook_id
    }


@router.post("/unregister-webhook")
def unregister_webhook(payload: WebhookUnregister, webhooks: WebhookRegistry = Depends(get_webhook_registry)):
    webhooks.unregister(payload.webhookId)
    return {
        "success": True,
        "message": "Webhook unregistered successfully"
    }


@router.get("/webhooks/{user_id}")
def list_webhooks(user_id: str, webhooks: WebhookRegistry = Depends(get_webhook_registry)):
    records = webhooks.list_for_user(user_id)
    return {
        "success": True,
        "count": len(records),
        "webhooks": [record.model_dump(by_alias=True, mode="json") for record in records]
    }


@router.post("/send-webhook-logs", status_code=status.HTTP_202_ACCEPTED)
async def send_webhook_logs(payload: WebhookLog, fanout: WebhookFanout = Depends(get_fanout)):
    """
    Forward an SMS log to the user's webhooks.
    Answers 202 once deliveries are spawned; their outcome is only logged.
    """
    missing = [name for name in LOG_REQUIRED_FIELDS if getattr(payload, name) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if payload.type not in LOG_EVENT_TYPES:
        raise ValidationError(f"Invalid type: must be one of {', '.join(LOG_EVENT_TYPES)}")

    log_data = {
        "id": str(payload.id),
        "recipient": payload.recipient,
        "message": payload.message,
        "status": payload.status,
        "type": payload.type,
        "timestamp": payload.timestamp if payload.timestamp is not None else datetime.now(timezone.utc).isoformat(),
    }
    webhook_ids = await fanout.notify(payload.userId, payload.type, log_data)

    return {
        "success": True,
        "message": "Webhook logs queued for delivery",
        "webhooksNotified": len(webhook_ids),
        "data": log_data
    }
