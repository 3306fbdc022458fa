from __future__ import annotations

"""Response envelope shared by every endpoint."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """``{success, message, data}`` envelope."""

    success: bool = True
    message: str
    data: Optional[DataT] = None


class MessageResponse(BaseModel):
    """Envelope for endpoints that only acknowledge."""

    success: bool = True
    message: str
