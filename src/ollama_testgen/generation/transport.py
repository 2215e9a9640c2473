"""Transport capability used by the generation client.

A transport performs exactly one HTTP exchange and hands back the response
with its body still unread, so the caller decides how much of it to drain.
"""
from __future__ import annotations
from typing import Protocol

import httpx

DEFAULT_TIMEOUT = 120.0


class Transport(Protocol):
    def send(self, request: httpx.Request) -> httpx.Response:
        """Perform the exchange; raise httpx.HTTPError on transport failure."""
        ...


class HttpxTransport:
    """Transport backed by an httpx.Client.

    Args:
        client: Optional preconfigured client (tests pass one built on
            httpx.MockTransport). One is created when omitted.
        timeout: Timeout for the created client, in seconds.
    """

    def __init__(self, client: httpx.Client | None = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def send(self, request: httpx.Request) -> httpx.Response:
        return self._client.send(request, stream=True)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()
