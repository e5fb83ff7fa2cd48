"""
HTTP Transport

The one network capability the backends need: send a JSON request, get a
status code and a decoded JSON body back. Backends take any object with a
matching ``request`` method, so tests swap in a scripted fake instead of
opening sockets.
"""

import json
import socket
import threading
import time
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import requests

from fivefan.errors import TransportError


@dataclass(frozen=True)
class TransportResponse:
    """Status code plus decoded JSON body (None if the body was not JSON)."""

    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HTTPTransport(Protocol):
    def request(self, url: str, method: str = "GET", headers: Optional[dict] = None,
                body: Optional[dict] = None, timeout: float = 30.0) -> TransportResponse:
        ...


class RequestsTransport:
    """Blocking transport on top of requests; one connection per call"""

    def request(self, url: str, method: str = "GET", headers: Optional[dict] = None,
                body: Optional[dict] = None, timeout: float = 30.0) -> TransportResponse:
        """
        Perform one HTTP exchange within a total deadline

        Connect and the wait for response headers are bounded by ``timeout``
        per socket operation. The body is read under a watchdog that shuts
        the socket down once ``timeout`` seconds have passed since the call
        started, so a server trickling bytes cannot hold the caller.

        Args:
            url: Absolute URL
            method: HTTP verb
            headers: Extra headers (Content-Type is always JSON)
            body: JSON-serializable payload, sent only when given
            timeout: Seconds for the whole exchange

        Returns:
            TransportResponse; non-2xx statuses are returned, not raised

        Raises:
            TransportError: connection refused, DNS failure, timeout
        """
        all_headers = {"Content-Type": "application/json"}
        if headers:
            all_headers.update(headers)

        deadline = time.monotonic() + timeout
        expired = threading.Event()

        try:
            with requests.request(
                method,
                url,
                headers=all_headers,
                json=body,
                timeout=(timeout, timeout),
                stream=True,
            ) as response:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TransportError(f"{method} {url} timed out after {timeout}s", timed_out=True)

                watchdog = threading.Timer(remaining, _abort, args=(response, expired))
                watchdog.daemon = True
                watchdog.start()
                try:
                    content = response.content
                finally:
                    watchdog.cancel()

                if expired.is_set():
                    raise TransportError(f"{method} {url} timed out after {timeout}s", timed_out=True)

                try:
                    data = json.loads(content) if content else None
                except ValueError:
                    data = None
                return TransportResponse(status=response.status_code, body=data)
        except requests.Timeout as e:
            raise TransportError(f"{method} {url} timed out after {timeout}s", timed_out=True) from e
        except requests.RequestException as e:
            if expired.is_set():
                raise TransportError(f"{method} {url} timed out after {timeout}s", timed_out=True) from e
            raise TransportError(f"{method} {url} failed: {e}") from e


def _abort(response: requests.Response, expired: threading.Event) -> None:
    """Deadline hit: unblock the pending read by shutting the socket down."""
    expired.set()
    connection = getattr(response.raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        # socket-level shutdown, so a TLS socket keeps its SSL object for the reader
        socket.socket.shutdown(sock, socket.SHUT_RDWR)
    except OSError:
        # Already closed by the reader
        pass
