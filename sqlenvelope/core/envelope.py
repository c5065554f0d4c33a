"""Response envelopes returned for every executed statement."""

from __future__ import annotations

import json
import logging
from typing import Any, Union

from pydantic import BaseModel, Field

from sqlenvelope.core.decoder import Row

LOGGER = logging.getLogger(__name__)

MESSAGE_EXECUTED = "Query executed successfully."
MESSAGE_NO_DATA = "No data found."
MESSAGE_UNSUPPORTED = "Unsupported SQL command."


class MessageResponse(BaseModel):
    status_code: int
    message: str = ""


class DataResponse(BaseModel):
    status_code: int = 200
    data: list[Row] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    status_code: int = 500
    message: str = ""
    error_message: str


ResponseEnvelope = Union[MessageResponse, DataResponse, ErrorResponse]


def build_response(
    status_code: int, message: str = "", data: list[Row] | None = None
) -> ResponseEnvelope:
    """Return a success envelope carrying either *data* or *message*."""

    if data is not None:
        return DataResponse(status_code=status_code, data=data)
    return MessageResponse(status_code=status_code, message=message)


def build_error(error: BaseException | str, status_code: int = 500) -> ErrorResponse:
    """Wrap a failure into an error envelope."""

    return ErrorResponse(status_code=status_code, error_message=str(error))


def envelope_payload(envelope: ResponseEnvelope) -> dict[str, Any]:
    """Return the wire mapping for *envelope* with empty fields omitted."""

    payload = envelope.model_dump()
    if not payload.get("message"):
        payload.pop("message", None)
    if not payload.get("error_message"):
        payload.pop("error_message", None)
    return payload


def serialize_response(envelope: ResponseEnvelope) -> str:
    """Serialize *envelope* to JSON, returning an empty string on failure."""

    try:
        return json.dumps(
            envelope_payload(envelope),
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError):
        LOGGER.exception("Error marshaling query response")
        return ""


__all__ = [
    "DataResponse",
    "ErrorResponse",
    "MESSAGE_EXECUTED",
    "MESSAGE_NO_DATA",
    "MESSAGE_UNSUPPORTED",
    "MessageResponse",
    "ResponseEnvelope",
    "build_error",
    "build_response",
    "envelope_payload",
    "serialize_response",
]
