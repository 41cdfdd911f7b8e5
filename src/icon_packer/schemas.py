from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned by every API endpoint.

    ``error`` is a stable machine-readable code (``IconPackerError.code`` or
    a mapped HTTP status), ``message`` is for humans.
    """

    error: str
    message: str
    request_id: str | None = None
    details: object | None = None


class PlatformTemplateOut(BaseModel):
    platform: str
    sizes: list[int]


class DecodedEntryOut(BaseModel):
    size: int = Field(ge=1)
    text: str = ""


class InspectResult(BaseModel):
    filename: str | None = None
    container: str
    entries: list[DecodedEntryOut]
