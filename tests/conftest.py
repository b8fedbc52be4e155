from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from push_relay.config import Settings
from push_relay.dependencies import Services
from push_relay.main import create_app
from push_relay.services.device_registry import DeviceRegistry
from push_relay.services.push_dispatcher import PushDispatcher
from push_relay.services.webhook_fanout import WebhookFanout
from push_relay.services.webhook_registry import WebhookRegistry
from push_relay.storage import MemoryStore


class FakeGateway:
    """Records every message instead of talking to FCM."""

    def __init__(self):
        self.sent = []
        self.multicasts = []
        self.subscriptions = []
        self.fail_tokens = set()
        self.error = None

    def send(self, message):
        if self.error is not None:
            raise self.error
        self.sent.append(message)
        return f"projects/test/messages/{len(self.sent)}"

    def send_each_for_multicast(self, multicast):
        if self.error is not None:
            raise self.error
        self.multicasts.append(multicast)
        responses = []
        for i, token in enumerate(multicast.tokens):
            if token in self.fail_tokens:
                responses.append(SimpleNamespace(success=False, message_id=None, exception=Exception("Requested entity was not found.")))
            else:
                responses.append(SimpleNamespace(success=True, message_id=f"projects/test/messages/m{i}", exception=None))
        success = sum(1 for r in responses if r.success)
        return SimpleNamespace(responses=responses, success_count=success, failure_count=len(responses) - success)

    def subscribe_to_topic(self, tokens, topic):
        if self.error is not None:
            raise self.error
        self.subscriptions.append((list(tokens), topic))
        errors = [
            SimpleNamespace(index=i, reason="INVALID_ARGUMENT")
            for i, token in enumerate(tokens) if token in self.fail_tokens
        ]
        return SimpleNamespace(success_count=len(tokens) - len(errors), failure_count=len(errors), errors=errors)


class WebhookSink:
    """httpx MockTransport handler capturing outbound webhook calls."""

    def __init__(self):
        self.requests = []
        self.fail_urls = set()
        self.error_status_urls = set()
        self.gate = None

    async def handler(self, request: httpx.Request):
        if self.gate is not None:
            await self.gate.wait()
        url = str(request.url)
        if url in self.fail_urls:
            raise httpx.ConnectError("connection refused", request=request)
        self.requests.append(request)
        if url in self.error_status_urls:
            return httpx.Response(500)
        return httpx.Response(200, json={"ok": True})

    @property
    def urls(self):
        return [str(request.url) for request in self.requests]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def sink():
    return WebhookSink()


@pytest.fixture
def device_store():
    return MemoryStore()


@pytest.fixture
def webhook_store():
    return MemoryStore()


@pytest.fixture
def services(gateway, sink, device_store, webhook_store):
    webhooks = WebhookRegistry(webhook_store)
    client = httpx.AsyncClient(transport=httpx.MockTransport(sink.handler))
    return Services(
        devices=DeviceRegistry(device_store),
        webhooks=webhooks,
        dispatcher=PushDispatcher(gateway),
        fanout=WebhookFanout(webhooks, client=client),
    )


@pytest.fixture
def app(services):
    settings = Settings()
    settings.STORAGE_BACKEND = "memory"
    return create_app(settings=settings, services=services)


@pytest.fixture
def client(app):
    # Leaving the context runs shutdown, which drains webhook deliveries
    with TestClient(app) as c:
        yield c
