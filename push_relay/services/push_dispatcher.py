import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from firebase_admin import messaging
from firebase_admin.exceptions import FirebaseError

from ..errors import GatewayError, ValidationError
from .device_registry import mask_token

logger = logging.getLogger(__name__)


class FirebaseGateway:
    """Thin binding of ``firebase_admin.messaging`` to one Firebase app."""

    def __init__(self, app=None):
        self.app = app

    def _require_app(self):
        if self.app is None:
            raise GatewayError("Firebase Admin SDK not initialized")
        return self.app

    def send(self, message):
        return messaging.send(message, app=self._require_app())

    def send_each_for_multicast(self, multicast):
        return messaging.send_each_for_multicast(multicast, app=self._require_app())

    def subscribe_to_topic(self, tokens, topic):
        return messaging.subscribe_to_topic(tokens, topic, app=self._require_app())


def sms_payload(phone_number: str, message: str) -> Dict[str, str]:
    """Data payload the handset app turns into an outgoing SMS."""
    return {
        "phone_number": phone_number,
        "message": message,
        "timestamp": str(int(time.time() * 1000)),
    }


def flatten_data(data: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """FCM data payloads are flat maps of strings."""
    flat = {}
    for key, value in (data or {}).items():
        if isinstance(value, (dict, list, tuple, set)):
            raise ValidationError(f"Data payload field '{key}' must be a scalar value")
        flat[str(key)] = str(value) if value is not None else ""
    return flat


class PushDispatcher:
    """Translates one send request into exactly one push gateway call.

    The gateway owns retries and delivery guarantees, so nothing here retries.
    """

    def __init__(self, gateway):
        self.gateway = gateway

    def _android(self, notification: Optional[Dict[str, str]] = None):
        android_notification = None
        if notification:
            android_notification = messaging.AndroidNotification(
                title=notification.get("title"),
                body=notification.get("body"),
                click_action=notification.get("click_action"),
            )
        return messaging.AndroidConfig(priority="high", notification=android_notification)

    def _call(self, what: str, fn, *args):
        try:
            return fn(*args)
        except GatewayError:
            raise
        except (FirebaseError, ValueError) as exc:
            logger.error(f"❌ FCM {what} failed: {exc}")
            raise GatewayError(str(exc)) from exc

    def send_to_token(self, token: str, data: Dict[str, Any], notification: Optional[Dict[str, str]] = None) -> str:
        message = messaging.Message(
            token=token,
            data=flatten_data(data),
            android=self._android(notification),
        )
        message_id = self._call("send", self.gateway.send, message)
        logger.info(f"✅ FCM sent to {mask_token(token)}: {message_id}")
        return message_id

    def send_to_tokens(self, tokens: Sequence[str], data: Dict[str, Any]) -> Dict[str, Any]:
        """Multicast to ``tokens``; per-token outcomes keep the input order."""
        tokens = list(tokens)
        multicast = messaging.MulticastMessage(
            tokens=tokens,
            data=flatten_data(data),
            android=self._android(),
        )
        batch = self._call("multicast", self.gateway.send_each_for_multicast, multicast)

        responses = []
        for token, resp in zip(tokens, batch.responses):
            responses.append({
                "token": token,
                "success": resp.success,
                "messageId": resp.message_id,
                "error": str(resp.exception) if resp.exception is not None else None,
            })

        logger.info(f"📊 Multicast: {batch.success_count}/{len(tokens)} successful, {batch.failure_count} failed")
        return {
            "successCount": batch.success_count,
            "failureCount": batch.failure_count,
            "responses": responses,
        }

    def send_to_topic(self, topic: str, data: Dict[str, Any]) -> str:
        message = messaging.Message(
            topic=topic,
            data=flatten_data(data),
            android=self._android(),
        )
        message_id = self._call("topic send", self.gateway.send, message)
        logger.info(f"✅ FCM sent to topic {topic}: {message_id}")
        return message_id

    def subscribe(self, tokens: Sequence[str], topic: str) -> Dict[str, Any]:
        tokens = list(tokens)
        result = self._call("topic subscribe", self.gateway.subscribe_to_topic, tokens, topic)

        errors: List[Dict[str, Any]] = []
        for error in result.errors:
            errors.append({
                "index": error.index,
                "token": tokens[error.index] if 0 <= error.index < len(tokens) else None,
                "reason": error.reason,
            })
        if errors:
            logger.warning(f"⚠️ {len(errors)} token(s) failed to subscribe to {topic}")

        return {
            "successCount": result.success_count,
            "failureCount": result.failure_count,
            "errors": errors,
        }
