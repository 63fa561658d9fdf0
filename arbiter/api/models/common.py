"""Shared API model types."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

# Custom datetime serializer for ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class ProblemResponse(BaseModel):
    """RFC 7807 error body.

    Attributes:
        type: URN identifying the problem kind.
        title: Short summary.
        status: HTTP status code.
        detail: Human-readable explanation.
        instance: Request URL.
    """

    type: str = Field(..., description="URN identifying the problem kind")
    title: str
    status: int
    detail: str
    instance: str


class DeleteResponse(BaseModel):
    """Acknowledgement of a delete."""

    success: bool = True
