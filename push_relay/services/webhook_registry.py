import logging
import secrets
import time
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import NotFoundError, ValidationError
from ..schemas.webhook import WebhookRecord
from ..storage import DocumentStore

logger = logging.getLogger(__name__)


_http_url = TypeAdapter(HttpUrl)


def is_valid_webhook_url(url) -> bool:
    """Well-formed absolute http(s) URL with a host."""
    if not isinstance(url, str) or not url.strip():
        return False
    url = url.strip()
    try:
        _http_url.validate_python(url)
    except PydanticValidationError:
        return False
    # HttpUrl also accepts "https:///host" by collapsing the slashes
    return bool(urlparse(url).netloc)


def new_webhook_id(user_id: str) -> str:
    # userId + time alone collides for registrations in the same clock tick
    return f"{user_id}_{time.time_ns()}_{secrets.token_hex(4)}"


class WebhookRegistry:
    def __init__(self, store: DocumentStore):
        self.store = store

    def register(self, user_id: Optional[str], url: Optional[str], events: Optional[List[str]]) -> WebhookRecord:
        if not user_id or not url or events is None:
            raise ValidationError("Missing required fields: userId, webhookUrl, events")
        if not is_valid_webhook_url(url):
            raise ValidationError("Invalid webhookUrl")
        if not isinstance(events, list) or not events:
            raise ValidationError("events must be a non-empty array")
        if any(not isinstance(event, str) or not event.strip() for event in events):
            raise ValidationError("events must contain only non-empty strings")

        now = datetime.now(timezone.utc)
        record = WebhookRecord(
            webhook_id=new_webhook_id(user_id),
            user_id=user_id,
            webhook_url=url.strip(),
            events=list(dict.fromkeys(event.strip() for event in events)),
            active=True,
            created_at=now,
            updated_at=now,
        )
        self.store.set(record.webhook_id, record.model_dump())
        logger.info(f"🪝 Webhook registered for {user_id}: {record.webhook_url} {record.events}")
        return record

    def unregister(self, webhook_id: Optional[str]) -> None:
        if not webhook_id:
            raise ValidationError("Missing webhookId")
        if not self.store.delete(webhook_id):
            raise NotFoundError("Webhook not found")
        logger.info(f"🗑️ Webhook unregistered: {webhook_id}")

    def list_for_user(self, user_id: str) -> List[WebhookRecord]:
        if not user_id or not user_id.strip():
            raise ValidationError("Missing userId")
        return [WebhookRecord.model_validate(doc) for doc in self.store.query("user_id", user_id)]

    def list_active_for_user(self, user_id: str) -> List[WebhookRecord]:
        return [record for record in self.list_for_user(user_id) if record.active]
