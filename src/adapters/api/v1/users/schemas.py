from __future__ import annotations

"""Request-payload Pydantic models for account profile endpoints."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class UpdateProfileRequest(BaseModel):
    """Payload expected by ``PATCH /users/me``. Omitted fields are left unchanged."""

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    date_of_birth: Optional[date] = None


class AvatarRequest(BaseModel):
    """Payload expected by ``PUT /users/me/avatar``.

    Only the reference is stored; uploading the image is the storage
    service's job.
    """

    avatar_url: str = Field(..., min_length=1, max_length=500, examples=["https://cdn.example.com/a.png"])
