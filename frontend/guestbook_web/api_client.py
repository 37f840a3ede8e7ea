"""
Guestbook Web — API Client
===========================

What:  Thin async wrapper over the Guestbook API's /messages endpoints.
How:   Uses one shared httpx.AsyncClient (base URL = API_URL). Every failure,
       whether network, undecodable body or a `success: false` envelope, is
       raised as ClientError carrying the text to show the user.
Who:   GuestbookPage.

Error texts:
    list_messages   network/undecodable → "Failed to connect to server"
                    success is false    → "Failed to load messages"
                    malformed records   → "Failed to load messages"
    create_message  network/undecodable → "Failed to submit message"
                    success is false    → server's `error`, else the same fallback
                    malformed record    → "Failed to submit message"
"""

import logging
from datetime import datetime
from typing import Any, List

import httpx
from pydantic import BaseModel, Field, ValidationError as SchemaError

logger = logging.getLogger(__name__)

CONNECT_ERROR = "Failed to connect to server"
LOAD_ERROR = "Failed to load messages"
SUBMIT_ERROR = "Failed to submit message"


class ClientError(Exception):
    """A user-visible failure talking to the API."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MessageView(BaseModel):
    """A message as received from the API."""
    id: int
    name: str
    message: str
    created_at: datetime = Field(alias="createdAt")


def _envelope(response: httpx.Response) -> dict:
    data: Any = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class GuestbookClient:
    """
    Calls the Guestbook API.

    Example:
        async with httpx.AsyncClient(base_url="http://localhost:5001") as http:
            client = GuestbookClient(http)
            messages = await client.list_messages()
    """

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    @classmethod
    def for_base_url(cls, base_url: str) -> "GuestbookClient":
        return cls(httpx.AsyncClient(base_url=base_url))

    async def list_messages(self) -> List[MessageView]:
        try:
            response = await self.http.get("/messages")
            data = _envelope(response)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error fetching messages: %s", str(e))
            raise ClientError(CONNECT_ERROR) from e

        if not data.get("success"):
            logger.warning("API refused message list: HTTP %d", response.status_code)
            raise ClientError(LOAD_ERROR)

        try:
            return [MessageView.model_validate(item) for item in data.get("messages") or []]
        except (SchemaError, TypeError) as e:
            logger.error("Malformed message list: %s", str(e))
            raise ClientError(LOAD_ERROR) from e

    async def create_message(self, name: str, message: str) -> MessageView:
        try:
            response = await self.http.post(
                "/messages", json={"name": name, "message": message}
            )
            data = _envelope(response)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error submitting message: %s", str(e))
            raise ClientError(SUBMIT_ERROR) from e

        if not data.get("success"):
            raise ClientError(data.get("error") or SUBMIT_ERROR)

        try:
            return MessageView.model_validate(data.get("message"))
        except SchemaError as e:
            logger.error("Malformed created message: %s", str(e))
            raise ClientError(SUBMIT_ERROR) from e

    async def aclose(self) -> None:
        await self.http.aclose()
