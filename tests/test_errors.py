from __future__ import annotations

from ollama_testgen.common.errors import GenerationError, ServiceError


def test_malformed_input() -> None:
    err = ServiceError.malformed_input()
    assert err.status_code == 400
    assert str(err) == "prompt cannot be empty"


def test_upstream_failure_keeps_short_body() -> None:
    err = ServiceError.upstream_failure(503, "model is loading")
    assert err.status_code == 503
    assert err.message == "model is loading"


def test_upstream_failure_truncates_by_characters() -> None:
    body = "é" * 2049
    err = ServiceError.upstream_failure(500, body)
    assert err.message == "é" * 2048 + "... [truncated]"


def test_generation_error_prefix() -> None:
    cause = OSError("pipe closed")
    err = GenerationError("failed to read response body", cause)
    assert str(err) == "failed to read response body: pipe closed"
    assert err.stage == "failed to read response body"
    assert err.cause is cause
