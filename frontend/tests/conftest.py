"""
Guestbook Web — Test Configuration
===================================

Fixtures:
    ├── fake_api:   In-memory stand-in for the Guestbook API
    ├── http:       httpx.AsyncClient routed to fake_api via MockTransport
    └── api_client: GuestbookClient on that httpx client
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio

from guestbook_web.api_client import GuestbookClient

API_BASE = "http://api.test"


class FakeGuestbookAPI:
    """
    Mimics the API's /messages envelopes.

    Set `fail_with` to an exception to simulate a network failure, or
    `status_override` to (status, body) to force a canned response.
    """

    def __init__(self):
        self.messages = []
        self.requests = []
        self.fail_with = None
        self.status_override = None
        self._clock = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)

    def add(self, name, message):
        record = {
            "id": len(self.messages) + 1,
            "name": name,
            "message": message,
            "createdAt": self._clock.isoformat(),
        }
        self._clock += timedelta(minutes=1)
        self.messages.insert(0, record)
        return record

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        if self.status_override is not None:
            status, body = self.status_override
            return httpx.Response(status, json=body)

        if request.url.path != "/messages":
            return httpx.Response(404, json={"success": False, "error": "Route not found"})
        if request.method == "GET":
            return httpx.Response(
                200,
                json={"success": True, "count": len(self.messages), "messages": self.messages},
            )

        payload = json.loads(request.content)
        name = (payload.get("name") or "").strip()
        message = (payload.get("message") or "").strip()
        if not name or not message:
            return httpx.Response(
                400, json={"success": False, "error": "Name and message are required"}
            )
        return httpx.Response(201, json={"success": True, "message": self.add(name, message)})


@pytest.fixture
def fake_api():
    return FakeGuestbookAPI()


@pytest_asyncio.fixture
async def http(fake_api):
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(fake_api), base_url=API_BASE
    ) as client:
        yield client


@pytest.fixture
def api_client(http):
    return GuestbookClient(http)
