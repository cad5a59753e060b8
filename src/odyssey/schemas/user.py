"""Pydantic schemas for accounts and auth.

Learn: Pydantic v2 models validate request/response data. Separate
request schemas (input) from "Read" schemas (output). UserRead never
includes the password hash.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    """Partial profile update — omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar: Optional[str] = Field(None, max_length=1024)
    bio: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)


class AuthResponse(BaseModel):
    user: UserRead
    token: str
