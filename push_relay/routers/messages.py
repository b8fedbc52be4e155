from fastapi import APIRouter, Depends
from ..schemas.message import SmsRequest, MulticastSmsRequest, TopicSmsRequest, TopicSubscribeRequest
from ..dependencies import get_device_registry, get_dispatcher
from ..errors import ValidationError
from ..services.device_registry import DeviceRegistry
from ..services.push_dispatcher import PushDispatcher, sms_payload
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


def _require_sms_fields(phone_number, message):
    if not phone_number or not message:
        raise ValidationError("Missing required fields")


@router.post("/send-sms")
def send_sms(
    payload: SmsRequest,
    devices: DeviceRegistry = Depends(get_device_registry),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
):
    """Look up the user's device and push an SMS send request to it."""
    if not payload.userId:
        raise ValidationError("Missing required fields")
    _require_sms_fields(payload.phoneNumber, payload.message)

    device = devices.lookup(payload.userId)
    message_id = dispatcher.send_to_token(device.token, sms_payload(payload.phoneNumber, payload.message))

    return {
        "success": True,
        "messageId": message_id,
        "userId": payload.userId
    }


@router.post("/send-notification")
def send_notification(
    payload: SmsRequest,
    devices: DeviceRegistry = Depends(get_device_registry),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
):
    """
    Same as /send-sms, but the android message also carries a visible
    notification so the user sees the request arrive.
    """
    if not payload.userId:
        raise ValidationError("Missing required fields")
    _require_sms_fields(payload.phoneNumber, payload.message)

    device = devices.lookup(payload.userId)
    message_id = dispatcher.send_to_token(
        device.token,
        sms_payload(payload.phoneNumber, payload.message),
        notification={
            "title": "SMS Send Request",
            "body": f"Sending SMS to {payload.phoneNumber}",
            "click_action": "FLUTTER_NOTIFICATION_CLICK",
        },
    )
    logger.info(f"Successfully sent message: {message_id}")

    return {
        "success": True,
        "messageId": message_id,
        "data": {
            "phoneNumber": payload.phoneNumber,
            "message": payload.message
        }
    }


@router.post("/send-notification-multiple")
def send_notification_multiple(
    payload: MulticastSmsRequest,
    devices: DeviceRegistry = Depends(get_device_registry),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
):
    if payload.userIds is None:
        raise ValidationError("Missing required fields or userIds is not an array")
    _require_sms_fields(payload.phoneNumber, payload.message)

    # Unregistered ids are skipped; 404 only when none resolve
    resolved = devices.lookup_many(payload.userIds)
    tokens = [token for _, token in resolved]

    result = dispatcher.send_to_tokens(tokens, sms_payload(payload.phoneNumber, payload.message))
    return {"success": True, **result}


@router.post("/send-to-topic")
def send_to_topic(payload: TopicSmsRequest, dispatcher: PushDispatcher = Depends(get_dispatcher)):
    if not payload.topic or not payload.phoneNumber or not payload.message:
        raise ValidationError("Missing required fields: topic, phoneNumber, message")

    message_id = dispatcher.send_to_topic(payload.topic, sms_payload(payload.phoneNumber, payload.message))
    return {
        "success": True,
        "messageId": message_id
    }


@router.post("/subscribe-to-topic")
def subscribe_to_topic(
    payload: TopicSubscribeRequest,
    devices: DeviceRegistry = Depends(get_device_registry),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
):
    if payload.userIds is None or not payload.topic:
        raise ValidationError("Missing required fields or userIds is not an array")

    tokens = [token for _, token in devices.lookup_many(payload.userIds)]
    result = dispatcher.subscribe(tokens, payload.topic)
    return {"success": True, **result}
