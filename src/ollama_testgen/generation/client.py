"""Client for Ollama's text-generation endpoint.

Flow for one call: validate prompt -> build payload -> build request ->
send through the transport -> drain the body (capped) -> check status ->
hand raw text to the parser.
"""
from __future__ import annotations
import logging

import httpx

from ollama_testgen.common import errors
from ollama_testgen.common.errors import GenerationError, ServiceError
from ollama_testgen.common.schema import GenerationRequest, GenerationResult
from ollama_testgen.generation.parsers import ResponseParser
from ollama_testgen.generation.transport import DEFAULT_TIMEOUT, Transport

LOGGER = logging.getLogger("testgen.client")

MAX_BODY_BYTES = 5 * 1024 * 1024  # 5 MiB
GENERATE_PATH = "/api/generate"
# Undecodable bytes survive as lone surrogates; see raw_bytes().
BODY_ERRORS = "surrogateescape"


class OllamaClient:
    """
    Generation client bound to one model and server.

    Args:
        model: Ollama model name, e.g. "llama3.1".
        base_url: Server root, e.g. "http://localhost:11434".
        transport: Performs the HTTP exchange.
        parser: Turns raw response text into a GenerationResult.
        stream: Value sent as the "stream" field.
        timeout: Default per-call deadline in seconds.
    """

    def __init__(
        self,
        model: str,
        base_url: str,
        transport: Transport,
        parser: ResponseParser,
        stream: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._parser = parser
        self._stream = stream
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def stream(self) -> bool:
        return self._stream

    @property
    def parser(self) -> ResponseParser:
        return self._parser

    def generate_raw(self, prompt: str, *, timeout: float | None = None) -> str:
        """
        Send a prompt and return the raw response body.

        Args:
            prompt: Prompt text; must not be blank.
            timeout: Deadline for this call in seconds; defaults to the
                client's timeout.

        Raises:
            ServiceError: Blank prompt (400) or non-200 upstream response.
            GenerationError: Payload/request construction, transport or
                body read failure.
        """
        if not prompt.strip():
            raise ServiceError.malformed_input()

        try:
            body = self._build_payload(prompt)
        except (TypeError, ValueError) as e:
            raise GenerationError(errors.BUILD_PAYLOAD, e) from e

        try:
            request = self._build_request(body, self._timeout if timeout is None else timeout)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise GenerationError(errors.BUILD_REQUEST, e) from e

        LOGGER.debug("POST %s model=%s stream=%s", request.url, self._model, self._stream)
        try:
            response = self._transport.send(request)
        except (httpx.HTTPError, OSError) as e:
            LOGGER.debug("Generation request failed: %s", e)
            raise GenerationError(errors.REQUEST_FAILED, e) from e

        try:
            return self._handle_response(response)
        finally:
            response.close()

    def generate_test(self, prompt: str, *, timeout: float | None = None) -> GenerationResult:
        """Generate and parse a test; parser errors propagate as raised."""
        raw = self.generate_raw(prompt, timeout=timeout)
        return self._parser.parse(raw)

    def _build_payload(self, prompt: str) -> bytes:
        return GenerationRequest(model=self._model, prompt=prompt, stream=self._stream).to_json()

    def _build_request(self, body: bytes, timeout: float) -> httpx.Request:
        return httpx.Request(
            "POST",
            f"{self._base_url}{GENERATE_PATH}",
            headers={"Content-Type": "application/json"},
            content=body,
            extensions={"timeout": httpx.Timeout(timeout).as_dict()},
        )

    def _handle_response(self, response: httpx.Response) -> str:
        try:
            data = _read_capped(response, MAX_BODY_BYTES)
        except (httpx.HTTPError, httpx.StreamError, OSError) as e:
            LOGGER.debug("Reading generation response failed: %s", e)
            raise GenerationError(errors.READ_BODY, e) from e

        text = data.decode("utf-8", errors=BODY_ERRORS)
        if response.status_code != httpx.codes.OK:
            LOGGER.debug("Generation endpoint returned status %s", response.status_code)
            raise ServiceError.upstream_failure(response.status_code, text)
        return text


def _read_capped(response: httpx.Response, limit: int) -> bytes:
    """Read at most `limit` bytes of the body; the remainder is dropped."""
    chunks: list[bytes] = []
    remaining = limit
    for chunk in response.iter_bytes():
        if len(chunk) >= remaining:
            chunks.append(chunk[:remaining])
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def raw_bytes(raw: str) -> bytes:
    """Recover the exact response bytes behind a generate_raw() result."""
    return raw.encode("utf-8", errors=BODY_ERRORS)


def display_text(raw: str) -> str:
    """Make raw body text safe to print or serialize as strict UTF-8."""
    return raw_bytes(raw).decode("utf-8", errors="replace")
