import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from ..errors import NotFoundError, ValidationError
from ..schemas.device import DeviceRecord, Platform
from ..storage import DocumentStore

logger = logging.getLogger(__name__)

PLATFORMS = {platform.value for platform in Platform}


def _registered_at(doc):
    # Older device documents use camelCase field names
    if not doc:
        return None
    return doc.get("registered_at") or doc.get("registeredAt")


def _record_from_doc(user_id: str, doc: dict) -> DeviceRecord:
    platform = doc.get("platform")
    if platform not in PLATFORMS:
        platform = Platform.unknown.value
    return DeviceRecord(
        user_id=doc.get("user_id") or user_id,
        token=doc["token"],
        platform=platform,
        registered_at=_registered_at(doc),
        updated_at=doc.get("updated_at") or doc.get("updatedAt"),
    )


def mask_token(token: str) -> str:
    """Shorten a push token for log lines."""
    if not token:
        return ""
    return token[:20] + "..." if len(token) > 20 else token


class DeviceRegistry:
    """Maps a user id to that user's single push token."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def register(self, user_id: Optional[str], token: Optional[str], platform: Optional[str] = None) -> DeviceRecord:
        if not user_id or not token:
            raise ValidationError("Missing deviceToken or userId")
        platform = platform or Platform.unknown.value
        if platform not in PLATFORMS:
            raise ValidationError("Invalid platform")

        now = datetime.now(timezone.utc)
        existing = self.store.get(user_id)
        record = DeviceRecord(
            user_id=user_id,
            token=token,
            platform=platform,
            registered_at=_registered_at(existing) or now,
            updated_at=now,
        )
        self.store.set(user_id, record.model_dump())

        if existing and existing.get("token") != token:
            logger.info(f"🔁 Device token replaced for {user_id} ({platform})")
        else:
            logger.info(f"📱 Device registered: {user_id} - {platform}")
        return record

    def lookup(self, user_id: str) -> DeviceRecord:
        doc = self.store.get(user_id) if user_id else None
        if doc is None:
            raise NotFoundError("Device token not found for user")
        return _record_from_doc(user_id, doc)

    def lookup_many(self, user_ids: Iterable[str]) -> List[Tuple[str, str]]:
        """Resolve ``user_ids`` to ``(user_id, token)`` pairs, keeping input order.

        Ids without a registered device are skipped with a warning. Raises
        NotFoundError when none of them resolve.
        """
        resolved = []
        for user_id in user_ids:
            doc = self.store.get(user_id) if user_id else None
            if doc is None:
                logger.warning(f"Device token not found for userId: {user_id}")
                continue
            resolved.append((user_id, doc["token"]))

        if not resolved:
            raise NotFoundError("No valid device tokens found for provided userIds")
        return resolved

    def remove(self, user_id: Optional[str]) -> bool:
        if not user_id:
            raise ValidationError("Missing userId")
        removed = self.store.delete(user_id)
        if removed:
            logger.info(f"🗑️ Device unregistered: {user_id}")
        else:
            logger.info(f"Device already absent for {user_id}")
        return removed
