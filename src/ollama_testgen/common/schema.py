"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
import json
from dataclasses import asdict, dataclass

from pydantic import BaseModel

@dataclass(frozen=True)
class GenerationRequest:
    """Body of a POST /api/generate call."""
    model: str
    prompt: str
    stream: bool = False

    def to_json(self) -> bytes:
        """Serialize to UTF-8 JSON with keys model, prompt, stream."""
        return json.dumps(asdict(self), ensure_ascii=False).encode("utf-8")

class GenerationResult(BaseModel):
    """Structured test produced by a response parser."""
    test_name: str
    code: str
