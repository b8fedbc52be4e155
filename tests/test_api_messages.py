import pytest
from firebase_admin import exceptions

SMS = {"phoneNumber": "+15550001", "message": "hello"}


@pytest.fixture
def registered(client):
    client.post("/register-device", json={"deviceToken": "tok-a", "userId": "A", "platform": "android"})
    client.post("/register-device", json={"deviceToken": "tok-c", "userId": "C", "platform": "ios"})
    return client


def test_send_sms(registered, gateway):
    resp = registered.post("/send-sms", json={"userId": "A", **SMS})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "messageId": "projects/test/messages/1", "userId": "A"}
    message = gateway.sent[0]
    assert message.token == "tok-a"
    assert message.data["phone_number"] == "+15550001"
    assert message.data["message"] == "hello"
    assert message.android.priority == "high"


@pytest.mark.parametrize("path", ["/send-sms", "/send-notification"])
def test_send_to_unregistered_user_never_hits_gateway(client, gateway, path):
    resp = client.post(path, json={"userId": "ghost", **SMS})
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Device token not found for user"}
    assert gateway.sent == []


@pytest.mark.parametrize("path", ["/send-sms", "/send-notification"])
def test_send_missing_fields(registered, gateway, path):
    for body in ({"userId": "A", "phoneNumber": "+1"}, {"userId": "A", "message": "m"}, SMS):
        assert registered.post(path, json=body).status_code == 400
    assert gateway.sent == []


def test_send_notification(registered, gateway):
    resp = registered.post("/send-notification", json={"userId": "A", **SMS})

    assert resp.status_code == 200
    body = resp.json()
    assert body["messageId"]
    assert body["data"] == {"phoneNumber": "+15550001", "message": "hello"}
    notification = gateway.sent[0].android.notification
    assert notification.title == "SMS Send Request"
    assert notification.body == "Sending SMS to +15550001"


def test_gateway_failure_is_500_with_message(registered, gateway):
    gateway.error = exceptions.InvalidArgumentError("The registration token is not a valid FCM registration token")

    resp = registered.post("/send-sms", json={"userId": "A", **SMS})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "The registration token is not a valid FCM registration token"}


def test_multiple_skips_unregistered_ids(registered, gateway):
    resp = registered.post("/send-notification-multiple", json={"userIds": ["A", "B"], **SMS})

    assert resp.status_code == 200
    assert gateway.multicasts[0].tokens == ["tok-a"]
    body = resp.json()
    assert body["successCount"] == 1
    assert body["failureCount"] == 0
    assert [r["token"] for r in body["responses"]] == ["tok-a"]


def test_multiple_aligns_outcomes_with_token_order(registered, gateway):
    gateway.fail_tokens = {"tok-c"}

    resp = registered.post("/send-notification-multiple", json={"userIds": ["C", "B", "A"], **SMS})

    body = resp.json()
    assert resp.status_code == 200
    assert body["successCount"] == 1
    assert body["failureCount"] == 1
    assert [(r["token"], r["success"]) for r in body["responses"]] == [("tok-c", False), ("tok-a", True)]


def test_multiple_with_no_registered_ids(client, gateway):
    resp = client.post("/send-notification-multiple", json={"userIds": ["X", "Y"], **SMS})
    assert resp.status_code == 404
    assert gateway.multicasts == []


def test_multiple_rejects_non_array(client, gateway):
    resp = client.post("/send-notification-multiple", json={"userIds": "A", **SMS})
    assert resp.status_code == 400
    resp = client.post("/send-notification-multiple", json=SMS)
    assert resp.status_code == 400
    assert gateway.multicasts == []


def test_send_to_topic(client, gateway):
    resp = client.post("/send-to-topic", json={"topic": "all", **SMS})
    assert resp.status_code == 200
    assert resp.json()["messageId"]
    assert gateway.sent[0].topic == "all"


def test_send_to_topic_missing_topic(client, gateway):
    assert client.post("/send-to-topic", json=SMS).status_code == 400
    assert gateway.sent == []


def test_subscribe_to_topic(registered, gateway):
    gateway.fail_tokens = {"tok-c"}

    resp = registered.post("/subscribe-to-topic", json={"userIds": ["A", "C", "ghost"], "topic": "all"})

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "successCount": 1,
        "failureCount": 1,
        "errors": [{"index": 1, "token": "tok-c", "reason": "INVALID_ARGUMENT"}],
    }
    assert gateway.subscriptions == [(["tok-a", "tok-c"], "all")]


def test_subscribe_to_topic_errors(client, gateway):
    assert client.post("/subscribe-to-topic", json={"userIds": ["A"]}).status_code == 400
    assert client.post("/subscribe-to-topic", json={"userIds": ["ghost"], "topic": "all"}).status_code == 404
    assert gateway.subscriptions == []
