"""Wire an OllamaClient from settings."""
from __future__ import annotations

from ollama_testgen.common.config import ClientSettings
from ollama_testgen.generation.client import OllamaClient
from ollama_testgen.generation.parsers import JSONResponseParser, ResponseParser
from ollama_testgen.generation.transport import HttpxTransport, Transport

def build_client(
    settings: ClientSettings,
    parser: ResponseParser | None = None,
    transport: Transport | None = None,
) -> OllamaClient:
    """Build a client with the default httpx transport and JSON parser unless given."""
    if transport is None:
        transport = HttpxTransport(timeout=settings.timeout)
    if parser is None:
        parser = JSONResponseParser()
    return OllamaClient(
        model=settings.model,
        base_url=settings.base_url,
        transport=transport,
        parser=parser,
        stream=settings.stream,
        timeout=settings.timeout,
    )
