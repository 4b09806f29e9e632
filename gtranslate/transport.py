"""HTTP transport used by the translation client.

Requests are issued with :mod:`urllib.request` in a worker thread so the
client can await them without blocking the event loop. Failures are mapped
onto two categories: :class:`ProtocolError` when the server answered with an
HTTP error status, :class:`TransportError` for everything else (timeouts,
DNS failures, refused connections).
"""

from __future__ import annotations

import asyncio
import http.client
import socket
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Sequence, Tuple

from .errors import ProtocolError, TransportError


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str
    headers: Tuple[Tuple[str, str], ...] = field(default=())

    def header_values(self, name: str) -> Tuple[str, ...]:
        wanted = name.lower()
        return tuple(value for key, value in self.headers if key.lower() == wanted)


class Transport(Protocol):  # pragma: no cover - protocol is for type checking only
    timeout: float
    proxy: Optional[str]

    async def get(self, url: str, headers: Mapping[str, str]) -> HttpResponse:
        """Issue a GET request and return the decoded response."""


def _decode_body(payload: bytes, charset: Optional[str]) -> str:
    try:
        return payload.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return payload.decode("utf-8", errors="replace")


class UrllibTransport:
    """Blocking :mod:`urllib` requests wrapped for use from coroutines."""

    def __init__(self, timeout: float = 5.0, proxy: Optional[str] = None) -> None:
        self.timeout = timeout
        self.proxy = proxy

    def _build_opener(self) -> urllib.request.OpenerDirector:
        handlers = []
        if self.proxy:
            handlers.append(urllib.request.ProxyHandler({"http": self.proxy, "https": self.proxy}))
        return urllib.request.build_opener(*handlers)

    def _get_blocking(self, url: str, headers: Mapping[str, str]) -> HttpResponse:
        request = urllib.request.Request(url, headers=dict(headers), method="GET")
        opener = self._build_opener()
        try:
            with opener.open(request, timeout=self.timeout) as response:
                payload = response.read()
                charset = response.headers.get_content_charset()
                status = response.status
                response_headers: Sequence[Tuple[str, str]] = tuple(response.headers.items())
        except urllib.error.HTTPError as exc:
            raise ProtocolError(
                f"Google Translate answered with HTTP {exc.code} {exc.reason}", status=exc.code
            ) from exc
        except (socket.timeout, TimeoutError) as exc:
            raise TransportError("Request to Google Translate timed out") from exc
        except urllib.error.URLError as exc:
            if isinstance(exc.reason, (socket.timeout, TimeoutError)):
                raise TransportError("Request to Google Translate timed out") from exc
            raise TransportError(f"Network error while contacting Google Translate: {exc.reason}") from exc
        except (http.client.HTTPException, OSError) as exc:
            raise TransportError(f"Network error while contacting Google Translate: {exc}") from exc

        return HttpResponse(status=status, body=_decode_body(payload, charset), headers=tuple(response_headers))

    async def get(self, url: str, headers: Mapping[str, str]) -> HttpResponse:
        return await asyncio.to_thread(self._get_blocking, url, headers)


__all__ = ["HttpResponse", "Transport", "UrllibTransport"]
