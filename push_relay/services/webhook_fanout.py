import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

import httpx
from starlette.concurrency import run_in_threadpool

from ..schemas.webhook import WebhookRecord
from .webhook_registry import WebhookRegistry

logger = logging.getLogger(__name__)


class WebhookFanout:
    """Best-effort, at-most-once delivery of log events to user webhooks.

    ``notify`` spawns one background task per matching webhook and returns
    without joining them. Delivery outcomes are only logged.
    """

    def __init__(self, registry: WebhookRegistry, client: Optional[httpx.AsyncClient] = None, timeout: float = 10):
        self.registry = registry
        self.timeout = timeout
        self._client = client
        self._tasks: Set[asyncio.Task] = set()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def notify(self, user_id: str, event_type: str, log_data: Dict[str, Any]) -> List[str]:
        """Dispatch ``log_data`` to the user's active webhooks subscribed to ``event_type``.

        Returns the ids of the webhooks a delivery was spawned for.
        """
        webhooks = await run_in_threadpool(self.registry.list_active_for_user, user_id)
        targets = [hook for hook in webhooks if event_type in hook.events]
        if not targets:
            logger.info(f"No active webhooks for {user_id} on {event_type}")
            return []

        body = {
            "event": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "data": log_data,
        }
        for hook in targets:
            self.spawn_delivery(hook, body)

        logger.info(f"📤 Webhook fan-out for {user_id}: {len(targets)} delivery(ies) spawned for {event_type}")
        return [hook.webhook_id for hook in targets]

    def spawn_delivery(self, hook: WebhookRecord, body: Dict[str, Any]) -> asyncio.Task:
        """Start one independent delivery task; the caller never awaits it."""
        task = asyncio.create_task(self._deliver(hook, body))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver(self, hook: WebhookRecord, body: Dict[str, Any]) -> bool:
        headers = {
            "Content-Type": "application/json",
            "X-Webhook-Id": hook.webhook_id,
            "X-Webhook-Event": body["event"],
        }
        try:
            resp = await self.client.post(hook.webhook_url, json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.error(f"❌ Webhook {hook.webhook_id} delivery to {hook.webhook_url} failed: {exc}")
            return False
        except Exception:
            logger.exception(f"❌ Webhook {hook.webhook_id} delivery to {hook.webhook_url} crashed")
            return False

        if resp.status_code >= 400:
            logger.warning(f"⚠️ Webhook {hook.webhook_id} answered {resp.status_code} from {hook.webhook_url}")
            return False

        logger.info(f"✅ Webhook {hook.webhook_id} delivered ({resp.status_code})")
        return True

    async def drain(self):
        """Wait for every in-flight delivery to finish."""
        pending = [task for task in self._tasks if not task.done()]
        while pending:
            await asyncio.gather(*pending, return_exceptions=True)
            pending = [task for task in self._tasks if not task.done()]

    async def aclose(self):
        await self.drain()
        if self._client is not None:
            await self._client.aclose()
            self._client = None
