"""Pydantic schemas for journals, comments, reactions and locations."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ─── Locations ──────────────────────────────────────────

class LocationData(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    country: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)


class LocationRead(LocationData):
    id: uuid.UUID

    model_config = {"from_attributes": True}


# ─── Comments ───────────────────────────────────────────

class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentRead(BaseModel):
    id: uuid.UUID
    content: str
    user_id: uuid.UUID
    user_name: str
    user_avatar: Optional[str] = None
    created_at: datetime


# ─── Reactions ──────────────────────────────────────────

class ReactionCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=20)


class ReactionSummary(BaseModel):
    type: str
    count: int


# ─── Journals ───────────────────────────────────────────

class JournalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    is_public: bool = False
    location: Optional[LocationData] = None
    images: list[str] = Field(default_factory=list)


class JournalUpdate(BaseModel):
    """Full replacement of the editable fields.

    images=None keeps the current images; an empty list removes them.
    """
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    is_public: bool = False
    location: Optional[LocationData] = None
    images: Optional[list[str]] = None


class JournalRead(BaseModel):
    id: uuid.UUID
    title: str
    content: str
    is_public: bool
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    location: Optional[LocationRead] = None
    images: list[str] = []
    comments: list[CommentRead] = []
    reactions: list[ReactionSummary] = []


class JournalPage(BaseModel):
    items: list[JournalRead]
    page: int
    size: int
    total: int
