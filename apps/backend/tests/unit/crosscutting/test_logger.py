"""
Name: JSON Logger Tests

Responsibilities:
  - Extras with sensitive keys are redacted
  - CPFs inside free text are masked
  - Request context is merged into the payload
"""

import json
import logging

import pytest
from oficina.context import clear_context, set_request_context
from oficina.crosscutting.logger import JSONFormatter

pytestmark = pytest.mark.unit


def _format(msg: str, **extra) -> dict:
    record = logging.LogRecord(
        name="oficina",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(JSONFormatter().format(record))


def test_sensitive_extras_are_redacted():
    payload = _format(
        "Login exitoso",
        password="admin123",
        national_id="123.456.789-00",
        payload={"auth_token": "eyJ...", "role": "admin"},
    )

    assert payload["password"] == "***REDACTADO***"
    assert payload["national_id"] == "***REDACTADO***"
    assert payload["payload"] == {"auth_token": "***REDACTADO***", "role": "admin"}


def test_cpf_in_free_text_is_masked():
    payload = _format(
        "Cliente 123.456.789-00 no encontrado",
        details="cpf informado: 987.654.321-00",
    )

    assert "123.456.789-00" not in payload["message"]
    assert payload["details"] == "cpf informado: ***.***.***-**"


def test_request_context_is_included():
    set_request_context(request_id="req-1", method="GET", path="/cliente")
    try:
        payload = _format("request completado", status_code=200)
    finally:
        clear_context()

    assert payload["request_id"] == "req-1"
    assert payload["path"] == "/cliente"
    assert payload["status_code"] == 200
