"""HTTP tests for the relay endpoints backed by a SQLite database."""

from __future__ import annotations

import json

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from sqlalchemy import insert, select

from app.infrastructure.database import Base, SessionLocal, engine, initialize_database
from app.infrastructure.models import (
    EventChatMessageModel,
    EventModel,
    FcmTokenModel,
    NotificationModel,
    NotificationRecordModel,
    UserModel,
    user_event_pivot_table,
    user_user_pivot_table,
)
from app.interfaces.api.dependencies import get_delivery_gateway
from main import create_app

AUTH = {"Authorization": "test-secret"}
STALE = "messaging/registration-token-not-registered"


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def client(gateway):
    app = create_app()
    app.dependency_overrides[get_delivery_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client


def _seed() -> None:
    """Ada (1) created event 10; Bob (2) and Cy (3) follow her and joined its chat."""

    with SessionLocal() as session:
        session.add_all(
            [
                UserModel(id=1, name="Ada"),
                UserModel(id=2, name="Bob"),
                UserModel(id=3, name="Cy"),
            ]
        )
        session.flush()
        session.add(EventModel(id=10, creator_id=1, what="Picnic"))
        session.flush()
        session.execute(
            insert(user_user_pivot_table),
            [{"user_id": 1, "follower_id": 2}, {"user_id": 1, "follower_id": 3}],
        )
        session.execute(
            insert(user_event_pivot_table),
            [
                {"user_id": 1, "event_id": 10},
                {"user_id": 2, "event_id": 10},
                {"user_id": 3, "event_id": 10},
            ],
        )
        session.add_all(
            [
                FcmTokenModel(id="ada-phone", user_id=1),
                FcmTokenModel(id="t1", user_id=2),
                FcmTokenModel(id="t2", user_id=2),
                FcmTokenModel(id="t3", user_id=3),
            ]
        )
        session.commit()


def _token_ids() -> set[str]:
    with SessionLocal() as session:
        return set(session.scalars(select(FcmTokenModel.id)))


def _recorded_user_ids() -> list[int]:
    with SessionLocal() as session:
        return list(
            session.scalars(
                select(NotificationRecordModel.user_id).order_by(NotificationRecordModel.id)
            )
        )


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("post", "/chat"),
        ("post", "/notifyeventcreated"),
        ("get", "/?q=%7B%7D"),
        ("post", "/signedurl"),
        ("get", "/bucketmetadata"),
    ],
)
@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer test-secret"}])
def test_requests_without_the_shared_secret_are_rejected(client, gateway, method, path, headers):
    response = client.request(method, path, json={"eventId": 10}, headers=headers)

    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized"}
    assert gateway.batches == []


@pytest.mark.parametrize("path", ["/chat", "/notifyeventcreated", "/signedurl", "/"])
@pytest.mark.parametrize("headers", [{}, {"Authorization": "wrong"}])
def test_secret_is_checked_before_the_body_is_parsed(client, gateway, path, headers):
    response = client.post(
        path,
        content=b"{not json",
        headers={"Content-Type": "application/json", **headers},
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized"}
    assert gateway.batches == []


def test_unknown_paths_require_the_shared_secret(client):
    assert client.get("/missing").status_code == 401
    assert client.get("/missing", headers=AUTH).status_code == 404


def test_malformed_body_with_the_secret_is_a_client_error(client, gateway):
    response = client.post(
        "/chat",
        content=b"{not json",
        headers={"Content-Type": "application/json", **AUTH},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Bad Request"}
    assert gateway.batches == []


def test_notify_event_created_reconciles_tokens_and_history(client, gateway):
    _seed()
    gateway.failures["t2"] = STALE

    response = client.post("/notifyeventcreated", json={"eventId": 10}, headers=AUTH)

    assert response.status_code == 200
    assert response.text == "ok"
    assert [message.token for message in gateway.batches[0]] == ["t1", "t2", "t3"]
    assert _token_ids() == {"ada-phone", "t1", "t3"}
    assert _recorded_user_ids() == [2, 3]

    with SessionLocal() as session:
        notification = session.scalars(select(NotificationModel)).one()
        records = session.scalars(select(NotificationRecordModel)).all()
    assert notification.title == "howl by Ada"
    assert notification.body == "what: Picnic"
    assert notification.link_url.startswith("https://howler.test/event/")
    assert json.loads(records[0].data)["id"] == notification.id


def test_notify_event_created_without_followers_writes_nothing(client, gateway):
    with SessionLocal() as session:
        session.add(UserModel(id=5, name="Loner"))
        session.flush()
        session.add(EventModel(id=50, creator_id=5, what="Nobody comes"))
        session.commit()

    response = client.post("/notifyeventcreated", json={"eventId": 50}, headers=AUTH)

    assert response.status_code == 200
    assert gateway.batches == []
    with SessionLocal() as session:
        assert session.scalars(select(NotificationModel)).all() == []
    assert _recorded_user_ids() == []


def test_chat_message_is_stored_and_pushed_to_other_participants(client, gateway):
    _seed()

    response = client.post(
        "/chat",
        json={"eventId": 10, "userId": 1, "text": "bring blankets"},
        headers=AUTH,
    )

    assert response.status_code == 200
    assert response.text == "ok"
    sent = gateway.batches[0]
    assert [message.token for message in sent] == ["t1", "t2", "t3"]
    assert all(message.title == "Picnic" for message in sent)
    assert all(message.body == "bring blankets" for message in sent)
    with SessionLocal() as session:
        stored = session.scalars(select(EventChatMessageModel)).one()
    assert (stored.event_id, stored.user_id, stored.text) == (10, 1, "bring blankets")
    assert _recorded_user_ids() == [2, 3]


def test_chat_for_unknown_event_is_a_generic_client_error(client, gateway):
    response = client.post(
        "/chat", json={"eventId": 404, "userId": 1, "text": "hi"}, headers=AUTH
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Bad Request"}
    assert gateway.batches == []


def test_transport_failure_is_a_generic_client_error(client, gateway):
    _seed()
    gateway.error = ConnectionError("fcm unreachable")

    response = client.post("/notifyeventcreated", json={"eventId": 10}, headers=AUTH)

    assert response.status_code == 400
    assert response.json() == {"detail": "Bad Request"}
    assert "fcm unreachable" not in response.text
    assert _token_ids() == {"ada-phone", "t1", "t2", "t3"}
    assert _recorded_user_ids() == []


def test_invalid_body_is_rejected_with_400(client):
    response = client.post("/chat", json={"eventId": 10}, headers=AUTH)

    assert response.status_code == 400
    assert response.json() == {"detail": "Bad Request"}


def test_query_relay_executes_compiled_queries(client):
    _seed()
    compiled = {"sql": "SELECT id, what FROM event WHERE creator_id = ?", "parameters": [1]}

    post_response = client.post("/", content=json.dumps(compiled), headers=AUTH)
    get_response = client.get("/", params={"q": json.dumps(compiled)}, headers=AUTH)

    assert post_response.status_code == 200
    assert post_response.json()["rows"] == [{"id": 10, "what": "Picnic"}]
    assert get_response.json()["rows"] == [{"id": 10, "what": "Picnic"}]


def test_query_relay_reports_writes(client):
    _seed()
    compiled = {"sql": "DELETE FROM fcm_token WHERE user_id = ?", "parameters": [2]}

    response = client.post("/", content=json.dumps(compiled), headers=AUTH)

    assert response.status_code == 200
    assert response.json()["numAffectedRows"] == 2
    assert _token_ids() == {"ada-phone", "t3"}


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        json.dumps(["SELECT 1"]),
        json.dumps({"parameters": []}),
        json.dumps({"sql": "SELECT * FROM missing_table", "parameters": []}),
    ],
)
def test_query_relay_rejects_bad_queries(client, body):
    response = client.post("/", content=body, headers=AUTH)

    assert response.status_code == 400


def test_signed_url_without_storage_configuration_is_a_client_error(client):
    response = client.post(
        "/signedurl",
        json={"fileName": "picnic.png", "contentType": "image/png"},
        headers=AUTH,
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Bad Request"}
