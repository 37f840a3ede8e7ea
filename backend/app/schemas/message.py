"""
Guestbook API — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract between client and backend.
How:   FastAPI validates request bodies against these models, serializes
       responses through them (by alias, so `created_at` goes out as
       `createdAt`), and generates the OpenAPI docs from them.

Every response body is an envelope with a `success` flag. Error bodies are
exactly `{"success": false, "error": "<text>"}`.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class MessageCreate(BaseModel):
    """
    Body of POST /messages.

    Both fields are optional at the schema level: presence, emptiness and
    length are business rules checked by MessageService so that they
    produce the 400 envelope with a specific error text.
    """
    name: Optional[str] = Field(default=None, description="Author label (1-100 chars)")
    message: Optional[str] = Field(default=None, description="Message body (1-1000 chars)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MessageOut(BaseModel):
    """A persisted Message as returned by the API."""
    id: int = Field(description="Identifier assigned by the store")
    name: str = Field(description="Trimmed author label")
    message: str = Field(description="Trimmed message body")
    created_at: datetime = Field(
        serialization_alias="createdAt",
        description="When the message was stored (ISO 8601)",
    )

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """SQLite hands back naive datetimes; every stored timestamp is UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class MessageListResponse(BaseModel):
    """
    Returned by GET /messages.

    `count` always equals len(messages); there is no pagination.
    """
    success: bool = True
    count: int = Field(description="Number of messages returned")
    messages: List[MessageOut] = Field(description="All messages, newest first")


class MessageCreatedResponse(BaseModel):
    """Returned by POST /messages with HTTP 201."""
    success: bool = True
    message: MessageOut


class ErrorResponse(BaseModel):
    """
    Standardized error envelope for all API errors.

    Example:
        {"success": false, "error": "Route not found"}
    """
    success: bool = False
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(default="OK", description="Always 'OK' while the process serves requests")
    timestamp: datetime = Field(description="Current server time (UTC)")


class BannerResponse(BaseModel):
    """Returned by GET /."""
    message: str
