"""
Guestbook API — Endpoint Tests
===============================

What:  Exercises the HTTP surface end to end: envelopes, status codes,
       trimming, ordering, 404 handling and storage failures.
How:   HTTPX AsyncClient over ASGITransport against an app built on a
       temporary SQLite database.
"""

import logging

import pytest
from httpx import AsyncClient, ASGITransport

from app.main import create_app
from app.services.message_store import SqlMessageStore


async def _count(client) -> int:
    response = await client.get("/messages")
    return response.json()["count"]


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_ok(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert "T" in body["timestamp"]

    @pytest.mark.asyncio
    async def test_banner(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json() == {"message": "Guestbook API is running!"}

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestCreateMessage:

    @pytest.mark.asyncio
    async def test_create_returns_201_envelope(self, test_client):
        response = await test_client.post("/messages", json={"name": "Ada", "message": "Hello!"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"]["id"] == 1
        assert body["message"]["name"] == "Ada"
        assert body["message"]["message"] == "Hello!"
        assert set(body["message"]) == {"id", "name", "message", "createdAt"}

    @pytest.mark.asyncio
    async def test_fields_are_trimmed(self, test_client):
        response = await test_client.post(
            "/messages", json={"name": "  Grace  ", "message": "\n Hi there \n"}
        )

        assert response.status_code == 201
        assert response.json()["message"]["name"] == "Grace"
        assert response.json()["message"]["message"] == "Hi there"

    @pytest.mark.asyncio
    async def test_limits_are_inclusive(self, test_client):
        response = await test_client.post(
            "/messages", json={"name": "n" * 100, "message": "m" * 1000}
        )
        assert response.status_code == 201

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload,error",
        [
            ({}, "Name and message are required"),
            ({"name": "Ada"}, "Name and message are required"),
            ({"message": "Hello"}, "Name and message are required"),
            ({"name": "", "message": "Hello"}, "Name and message are required"),
            ({"name": "Ada", "message": "   "}, "Name and message are required"),
            ({"name": "n" * 101, "message": "Hello"}, "Name must be at most 100 characters"),
            ({"name": "Ada", "message": "m" * 1001}, "Message must be at most 1000 characters"),
        ],
    )
    async def test_invalid_payload_rejected_without_row(self, test_client, payload, error):
        response = await test_client.post("/messages", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": error}
        assert await _count(test_client) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [["Ada", "Hello"], {"name": 42, "message": "Hello"}])
    async def test_malformed_body_is_400(self, test_client, payload):
        response = await test_client.post("/messages", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid request body"}


class TestListMessages:

    @pytest.mark.asyncio
    async def test_empty_store(self, test_client):
        response = await test_client.get("/messages")

        assert response.status_code == 200
        assert response.json() == {"success": True, "count": 0, "messages": []}

    @pytest.mark.asyncio
    async def test_newest_first(self, test_client):
        for name in ("A", "B", "C"):
            await test_client.post("/messages", json={"name": name, "message": "hi"})

        body = (await test_client.get("/messages")).json()

        assert body["success"] is True
        assert body["count"] == 3
        assert [m["name"] for m in body["messages"]] == ["C", "B", "A"]

    @pytest.mark.asyncio
    async def test_duplicate_submissions_create_rows(self, test_client):
        for _ in range(2):
            await test_client.post("/messages", json={"name": "Ada", "message": "Hello!"})

        assert await _count(test_client) == 2


class TestNotFound:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,path",
        [("GET", "/nope"), ("POST", "/pesan"), ("DELETE", "/messages"), ("PUT", "/health")],
    )
    async def test_unmatched_route_envelope(self, test_client, method, path):
        response = await test_client.request(method, path)

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Route not found"}


class TestStorageFailures:
    """An app whose database has no Message table fails every store call."""

    @pytest.mark.asyncio
    async def test_errors_are_generic(self, test_settings):
        app = create_app(test_settings)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            listed = await client.get("/messages")
            created = await client.post("/messages", json={"name": "Ada", "message": "Hi"})
        await app.state.database.dispose()

        assert listed.status_code == 500
        assert listed.json() == {"success": False, "error": "Failed to fetch messages"}
        assert created.status_code == 500
        assert created.json() == {"success": False, "error": "Failed to create message"}

    @pytest.mark.asyncio
    async def test_failures_logged_server_side(self, test_settings, caplog):
        caplog.set_level(logging.ERROR, logger="app.services.message_service")
        app = create_app(test_settings)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/messages")
            await client.post(
                "/messages",
                json={"name": "Ada", "message": "Hi"},
                headers={"X-Request-ID": "trace-7"},
            )
        await app.state.database.dispose()

        records = [r for r in caplog.records if r.name == "app.services.message_service"]
        assert len(records) == 2
        assert "Error fetching messages" in records[0].getMessage()
        assert "Error creating message" in records[1].getMessage()
        assert records[1].getMessage().startswith("[trace-7]")
        assert all(r.levelno == logging.ERROR and r.exc_info for r in records)


class TestSqlStoreApp:
    """The literal-SQL store behaves the same behind the HTTP surface."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, test_settings):
        app = create_app(test_settings, store_factory=SqlMessageStore)
        await app.state.database.create_all()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            created = await client.post("/messages", json={"name": " Ada ", "message": "Hello!"})
            await client.post("/messages", json={"name": "Grace", "message": "Hi"})
            listed = await client.get("/messages")
        await app.state.database.dispose()

        assert created.status_code == 201
        assert created.json()["message"]["name"] == "Ada"
        assert [m["name"] for m in listed.json()["messages"]] == ["Grace", "Ada"]
