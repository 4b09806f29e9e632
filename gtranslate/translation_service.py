"""Client for the unofficial Google Translate web endpoint."""

from __future__ import annotations

import asyncio
import logging
import random
import threading
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from .errors import IPBannedError, Operation, ProtocolError, TransportError
from .languages import Language, LanguageLike
from .request_builder import (
    DEFAULT_DOMAIN,
    build_headers,
    build_translate_url,
    domain_from_endpoint,
    endpoint_for,
    landing_page_for,
    validate_languages,
)
from .response_decoder import decode_response
from .session import TranslateSession
from .token_generator import TokenGenerator
from .transport import Transport, UrllibTransport
from .translation_data import TranslationResult


LOGGER = logging.getLogger("gtranslate.client")

DEFAULT_DELAY_RANGE = (0.2, 0.5)
MAX_ATTEMPTS = 2  # The first try plus one retry after a stale signing seed.


@dataclass
class TranslationRequest:
    text: str
    src: LanguageLike
    dest: LanguageLike


class Translatable(Protocol):  # pragma: no cover - protocol is for type checking only
    text: str
    src: LanguageLike
    dest: LanguageLike


class _CourtesyDelay:
    """Random pause before each translate call, shared by concurrent requests."""

    def __init__(self, delay_range: Tuple[float, float], random_source: Optional[random.Random] = None) -> None:
        self.delay_range = delay_range
        self._random = random_source or random.Random()
        self._lock = threading.Lock()

    def next_delay(self) -> float:
        low, high = self.delay_range
        with self._lock:
            return self._random.uniform(low, high)

    async def wait(self) -> float:
        delay = self.next_delay()
        if delay > 0:
            await asyncio.sleep(delay)
        return delay


class GoogleTranslateClient:
    """Minimal client for the unofficial Google Translate web API.

    Every instance owns its own session cookie and signing seed; both are
    initialised lazily on the first translation and refreshed as the service
    hands out new ones.
    """

    def __init__(
        self,
        domain: str = DEFAULT_DOMAIN,
        *,
        timeout: float = 5.0,
        proxy: Optional[str] = None,
        delay_range: Tuple[float, float] = DEFAULT_DELAY_RANGE,
        transport: Optional[Transport] = None,
        token_generator: Optional[TokenGenerator] = None,
        session: Optional[TranslateSession] = None,
        random_source: Optional[random.Random] = None,
    ) -> None:
        self._transport: Transport = transport or UrllibTransport(timeout=timeout, proxy=proxy)
        self._endpoint = endpoint_for(domain)
        self._token_generator = token_generator or TokenGenerator(self._transport, domain=domain)
        self._session = session or TranslateSession()
        self._delay = _CourtesyDelay(delay_range, random_source)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def domain(self) -> str:
        return domain_from_endpoint(self._endpoint)

    @domain.setter
    def domain(self, value: str) -> None:
        self._endpoint = endpoint_for(value)
        self._token_generator.domain = value

    @property
    def timeout(self) -> float:
        return self._transport.timeout

    @timeout.setter
    def timeout(self, value: float) -> None:
        self._transport.timeout = value

    @property
    def proxy(self) -> Optional[str]:
        return self._transport.proxy

    @proxy.setter
    def proxy(self, value: Optional[str]) -> None:
        self._transport.proxy = value

    @property
    def session(self) -> TranslateSession:
        return self._session

    @property
    def token_generator(self) -> TokenGenerator:
        return self._token_generator

    async def translate(self, text: str, src: LanguageLike = "auto", dest: LanguageLike = "en") -> TranslationResult:
        """Translate ``text`` including extra translations, synonyms and definitions.

        Raises:
            UnsupportedLanguageError: ``src`` or ``dest`` is not supported.
            InvalidTargetLanguageError: ``dest`` is auto-detect.
            IPBannedError: the service rejected the request at the HTTP level.
            TransportError: any other network failure.
        """

        return await self._translate(text, src, dest, include_extras=True)

    async def translate_lite(self, text: str, src: LanguageLike = "auto", dest: LanguageLike = "en") -> TranslationResult:
        """Translate ``text`` without the dictionary data, for smaller responses."""

        return await self._translate(text, src, dest, include_extras=False)

    async def translate_item(self, item: Translatable) -> TranslationResult:
        return await self.translate(item.text, item.src, item.dest)

    async def translate_lite_item(self, item: Translatable) -> TranslationResult:
        return await self.translate_lite(item.text, item.src, item.dest)

    async def _translate(
        self, text: str, src: LanguageLike, dest: LanguageLike, *, include_extras: bool
    ) -> TranslationResult:
        source, target = validate_languages(src, dest)

        if not text or not text.strip():
            return TranslationResult.empty(text or "", source, target)

        attempt = 0
        while True:
            attempt += 1
            try:
                body = await self._request(text, source, target)
            except TransportError as exc:
                if self._token_generator.is_seed_obsolete and attempt < MAX_ATTEMPTS:
                    LOGGER.info("Request failed with an obsolete signing seed, retrying: %s", exc)
                    self._token_generator.invalidate()
                    continue
                if isinstance(exc, ProtocolError):
                    raise IPBannedError(Operation.TRANSLATION) from exc
                raise
            return decode_response(body, text, source, target, include_extras)

    async def _request(self, text: str, source: Language, target: Language) -> str:
        await self._session.ensure_cookie(self._transport, landing_page_for(self.domain))
        token = await self._token_generator.generate(text)
        url = build_translate_url(self._endpoint, text, source, target, token)

        await self._delay.wait()

        LOGGER.debug("Translating %d characters %s -> %s", len(text), source.iso639, target.iso639)
        response = await self._transport.get(url, build_headers(self.domain, self._session.cookie_header()))
        self._session.absorb(response)
        return response.body


__all__ = [
    "GoogleTranslateClient",
    "Translatable",
    "TranslationRequest",
]
