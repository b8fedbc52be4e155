import logging
from dataclasses import dataclass

from fastapi import Request

from .config import Settings
from .errors import InternalError
from .services.device_registry import DeviceRegistry
from .services.push_dispatcher import FirebaseGateway, PushDispatcher
from .services.webhook_fanout import WebhookFanout
from .services.webhook_registry import WebhookRegistry
from .storage import DocumentStore, FirestoreStore, MemoryStore, SqlStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    devices: DeviceRegistry
    webhooks: WebhookRegistry
    dispatcher: PushDispatcher
    fanout: WebhookFanout
    session_factory: object = None


def build_services(settings: Settings) -> Services:
    """Wire registries, dispatcher and fan-out for the configured backend."""
    from .services.firebase import init_firebase

    firebase_app = init_firebase(settings.FIREBASE_CREDENTIALS)
    session_factory = None
    backend = settings.STORAGE_BACKEND

    if backend == "sql":
        from .database import make_session_factory
        from .models.device_token import DeviceToken
        from .models.webhook import Webhook

        session_factory = make_session_factory(settings.DB_URL)
        device_store: DocumentStore = SqlStore(session_factory, DeviceToken)
        webhook_store: DocumentStore = SqlStore(session_factory, Webhook)
    elif backend == "firestore":
        if firebase_app is None:
            raise RuntimeError("STORAGE_BACKEND=firestore requires Firebase credentials")
        device_store = FirestoreStore.for_app(firebase_app, "devices")
        webhook_store = FirestoreStore.for_app(firebase_app, "webhooks")
    elif backend == "memory":
        logger.warning("⚠️ Using in-memory storage; registrations are lost on restart")
        device_store = MemoryStore()
        webhook_store = MemoryStore()
    else:
        raise RuntimeError(f"Unknown STORAGE_BACKEND: {backend}")

    logger.info(f"Storage backend: {backend}")
    webhooks = WebhookRegistry(webhook_store)
    return Services(
        devices=DeviceRegistry(device_store),
        webhooks=webhooks,
        dispatcher=PushDispatcher(FirebaseGateway(firebase_app)),
        fanout=WebhookFanout(webhooks, timeout=settings.WEBHOOK_TIMEOUT),
        session_factory=session_factory,
    )


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise InternalError("Services not initialized")
    return services


def get_device_registry(request: Request) -> DeviceRegistry:
    return get_services(request).devices


def get_webhook_registry(request: Request) -> WebhookRegistry:
    return get_services(request).webhooks


def get_dispatcher(request: Request) -> PushDispatcher:
    return get_services(request).dispatcher


def get_fanout(request: Request) -> WebhookFanout:
    return get_services(request).fanout
