"""Tests for response envelope construction and serialization."""

from __future__ import annotations

import json
import logging

import pytest

from sqlenvelope.core.envelope import (
    DataResponse,
    ErrorResponse,
    MessageResponse,
    build_error,
    build_response,
    serialize_response,
)
from sqlenvelope.core.errors import ExecutionError


def test_message_only_envelope_omits_data() -> None:
    envelope = build_response(204, "No data found.")

    assert isinstance(envelope, MessageResponse)
    assert serialize_response(envelope) == '{"status_code":204,"message":"No data found."}'


def test_data_envelope_omits_empty_message() -> None:
    envelope = build_response(200, data=[{"id": 1, "name": "Acme", "score": 1.5, "note": None}])

    assert isinstance(envelope, DataResponse)
    assert json.loads(serialize_response(envelope)) == {
        "status_code": 200,
        "data": [{"id": 1, "name": "Acme", "score": 1.5, "note": None}],
    }


def test_data_envelope_keeps_column_order() -> None:
    envelope = build_response(200, data=[{"b": 1, "a": 2}])

    assert serialize_response(envelope) == '{"status_code":200,"data":[{"b":1,"a":2}]}'


def test_status_code_is_always_emitted() -> None:
    assert serialize_response(build_response(200)) == '{"status_code":200}'


def test_error_envelope_carries_error_message_only() -> None:
    envelope = build_error(ExecutionError('relation "missing" does not exist'))

    assert isinstance(envelope, ErrorResponse)
    assert json.loads(serialize_response(envelope)) == {
        "status_code": 500,
        "error_message": 'relation "missing" does not exist',
    }


def test_unserializable_envelope_yields_empty_output(caplog: pytest.LogCaptureFixture) -> None:
    envelope = build_response(200, data=[{"value": float("nan")}])

    with caplog.at_level(logging.ERROR):
        assert serialize_response(envelope) == ""

    assert "Error marshaling query response" in caplog.text
