"""Error types raised by the generation client."""
from __future__ import annotations

MAX_ERROR_MESSAGE = 2048
TRUNCATION_SUFFIX = "... [truncated]"

BUILD_PAYLOAD = "failed to build payload"
BUILD_REQUEST = "failed to build request"
REQUEST_FAILED = "request failed"
READ_BODY = "failed to read response body"


class ServiceError(Exception):
    """Error reported by the generation service, or a rejected input.

    Attributes:
        message: Human-readable message.
        status_code: HTTP-style status code.
    """

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message

    @classmethod
    def malformed_input(cls) -> "ServiceError":
        return cls("prompt cannot be empty", 400)

    @classmethod
    def upstream_failure(cls, status_code: int, body: str) -> "ServiceError":
        """Build an error from a non-200 upstream response, truncating large bodies."""
        message = body
        if len(message) > MAX_ERROR_MESSAGE:
            message = message[:MAX_ERROR_MESSAGE] + TRUNCATION_SUFFIX
        return cls(message, status_code)


class GenerationError(Exception):
    """Local, transport or body-read failure, prefixed with the failing stage."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"{stage}: {cause}")
        self.stage = stage
        self.cause = cause


class ParseError(ValueError):
    """Raised when a model response cannot be turned into a GenerationResult."""
