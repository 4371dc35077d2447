"""
Shared response envelopes.

Every successful response is ``{"success": true, "data": ...}``, optionally
with ``pagination``; errors are shaped by devfolio.core.exceptions.
"""
import math
from datetime import datetime
from typing import Annotated, Generic, List, TypeVar

from pydantic import BaseModel, PlainSerializer

from devfolio.utils.datetime_utils import to_iso_utc

T = TypeVar("T")

# Datetimes leave the API as ISO 8601 UTC with a 'Z' suffix
UTCDateTime = Annotated[datetime, PlainSerializer(to_iso_utc, return_type=str)]


class PaginationMeta(BaseModel):
    """Offset pagination metadata."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class DataResponse(BaseModel, Generic[T]):
    """Success envelope carrying a payload."""

    success: bool = True
    data: T


class PaginatedResponse(BaseModel, Generic[T]):
    """Success envelope carrying one page of results."""

    success: bool = True
    data: List[T]
    pagination: PaginationMeta


class StatusResponse(BaseModel):
    """Success envelope carrying only a human-readable message."""

    success: bool = True
    message: str
