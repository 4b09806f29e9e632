"""Session cookie handling for the translate web endpoint."""

from __future__ import annotations

import logging
from typing import Optional

from .errors import TransportError
from .request_builder import build_handshake_headers, domain_from_endpoint
from .transport import HttpResponse, Transport


LOGGER = logging.getLogger("gtranslate.session")

FALLBACK_COOKIE = (
    "NID=132=YSV6D_1_0-kurlU0FU1_McKljflccBTuJEM4tGzFWw8nZm90f-P7bzqrFnETlu4LLDf5GMwAD2oiRicTUeP_"
    "fftLO7Xy2OH0Vz2MerRlalbfmfHOf1Lrn3EN-_C3Pk2Y; CONSENT=WP.26e489; 1P_JAR=2018-6-18-12; "
    "_ga=GA1.3.737450149.1529324066; _gid=GA1.3.606173287.1529324066"
)


def cookie_from_set_cookie(values) -> Optional[str]:
    """Join the ``name=value`` part of each ``Set-Cookie`` header."""

    pairs = [value.split(";", 1)[0].strip() for value in values]
    pairs = [pair for pair in pairs if "=" in pair]
    return "; ".join(pairs) if pairs else None


class TranslateSession:
    """Holds the session cookie for one client instance.

    The cookie is fetched once through a handshake with the landing page and
    replaced whenever a later response carries ``Set-Cookie``.
    """

    def __init__(self, cookie: Optional[str] = None) -> None:
        self._cookie = cookie

    @property
    def cookie(self) -> Optional[str]:
        return self._cookie

    def cookie_header(self) -> str:
        return self._cookie or FALLBACK_COOKIE

    async def ensure_cookie(self, transport: Transport, url: str) -> None:
        if self._cookie is not None:
            return

        try:
            response = await transport.get(url, build_handshake_headers(domain_from_endpoint(url)))
        except TransportError as exc:
            LOGGER.warning("Cookie handshake with %s failed, using the fallback cookie: %s", url, exc)
            return
        self.absorb(response)

    def absorb(self, response: HttpResponse) -> None:
        cookie = cookie_from_set_cookie(response.header_values("Set-Cookie"))
        if cookie is not None:
            LOGGER.debug("Session cookie replaced")
            self._cookie = cookie


__all__ = ["FALLBACK_COOKIE", "TranslateSession", "cookie_from_set_cookie"]
