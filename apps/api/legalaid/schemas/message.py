"""Messaging schemas (polling contract)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    recipient_id: UUID
    body: str = Field(..., min_length=1, max_length=5000)


class MessageRead(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    sender_id: UUID
    recipient_id: UUID
    body: str
    read_at: datetime | None
    created_at: datetime


class MessagePollResponse(BaseModel):
    """
    Result of one poll.

    Pass server_time back as `since` and since_id as `since_id` on the
    next poll, after poll_interval_seconds. since_id is only set when the
    page was full.
    """
    items: list[MessageRead]
    server_time: datetime
    since_id: UUID | None = None
    poll_interval_seconds: int


class MarkReadRequest(BaseModel):
    ids: list[UUID] = Field(..., min_length=1, max_length=500)


class MarkReadResult(BaseModel):
    updated: int
