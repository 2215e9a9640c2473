"""FastAPI service wrapping the Ollama generation client.

Endpoints:
- GET /health
- POST /generate-test  { "input": "..." }
"""
from __future__ import annotations
import logging
import time
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from ollama_testgen.common.config import load_settings
from ollama_testgen.common.errors import GenerationError, ParseError, ServiceError
from ollama_testgen.common.logging_setup import setup_logging
from ollama_testgen.common.templates import load_template, render_prompt
from ollama_testgen.generation.client import OllamaClient, display_text
from ollama_testgen.generation.factory import build_client

LOGGER = logging.getLogger("testgen.serve.app")

SETTINGS = load_settings()
setup_logging(SETTINGS.log_level)

class GenerateIn(BaseModel):
    input: str

class GenerateOut(BaseModel):
    test_name: str
    code: str
    latency_ms: int

app = FastAPI()

@lru_cache(maxsize=1)
def get_client() -> OllamaClient:
    return build_client(SETTINGS)

def _render(user_input: str) -> str:
    """Render input through the prompt template; fall back to the bare input if unreadable."""
    try:
        template = load_template(SETTINGS.template_path)
    except OSError as e:
        LOGGER.warning("Failed to read prompt template: %s", e)
        return user_input
    except ValueError as e:
        LOGGER.error("Unusable prompt template: %s", e)
        raise HTTPException(status_code=500, detail="Prompt template has no {{input}} placeholder")
    return render_prompt(template, user_input)

def _upstream_status(status_code: int) -> int:
    """Pass client and server errors through; anything else is a bad gateway."""
    return status_code if 400 <= status_code < 600 else 502

@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "model": SETTINGS.model}

@app.post("/generate-test", response_model=GenerateOut)
def generate_test(body: GenerateIn, client: OllamaClient = Depends(get_client)) -> GenerateOut:
    # Blank input is rejected by the client before the template adds text.
    prompt = _render(body.input) if body.input.strip() else body.input

    start = time.time()
    try:
        result = client.generate_test(prompt)
    except ServiceError as e:
        LOGGER.error("Generation service error (status %s): %s", e.status_code, display_text(e.message))
        status = _upstream_status(e.status_code)
        detail = display_text(e.message) if status == e.status_code else f"Unexpected upstream status {e.status_code}"
        raise HTTPException(status_code=status, detail=detail)
    except GenerationError as e:
        LOGGER.error("Ollama request failed: %s", e)
        raise HTTPException(status_code=502, detail="Upstream generation error")
    except ParseError as e:
        LOGGER.error("Malformed response: %s", e)
        raise HTTPException(status_code=502, detail="Malformed model response")

    latency = int((time.time() - start) * 1000)
    return GenerateOut(test_name=result.test_name, code=result.code, latency_ms=latency)
