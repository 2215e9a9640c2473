"""Response parsers turning raw generation output into a GenerationResult."""
from __future__ import annotations
import json
import re
from typing import Any, Protocol

from pydantic import ValidationError

from ollama_testgen.common.errors import ParseError
from ollama_testgen.common.schema import GenerationResult

_FENCE_RE = re.compile(r"^```[\w-]*\s*\n(.*?)\n?```\s*$", re.DOTALL)


class ResponseParser(Protocol):
    def parse(self, raw: str) -> GenerationResult:
        ...


def _strip_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    text = text.strip()
    match = _FENCE_RE.match(text)
    return match.group(1).strip() if match else text


def _load_object(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"expected a JSON object, got {type(data).__name__}")
    return data


class JSONResponseParser:
    """
    Parse a test payload from a raw /api/generate body.

    Accepts either the payload itself ({"test_name": ..., "code": ...}) or
    Ollama's non-streaming envelope whose "response" field carries the
    payload as text, optionally inside a ```json fence.
    """

    def parse(self, raw: str) -> GenerationResult:
        data = _load_object(_strip_fence(raw))
        if "test_name" not in data and isinstance(data.get("response"), str):
            data = _load_object(_strip_fence(data["response"]))
        try:
            return GenerationResult.model_validate(data)
        except ValidationError as e:
            raise ParseError(f"response does not match test payload: {e}") from e
