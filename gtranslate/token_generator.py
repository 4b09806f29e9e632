"""Signing token (``tk`` parameter) generation.

The token is a checksum of the request text keyed by a seed that Google
publishes on the translate landing page as ``tkk:'<hours>.<key>'`` and rotates
periodically. The checksum itself is treated as an opaque, pluggable function.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import IPBannedError, Operation, ProtocolError, TransportError
from .request_builder import DEFAULT_DOMAIN, build_handshake_headers, landing_page_for
from .transport import Transport


LOGGER = logging.getLogger("gtranslate.token")

SECONDS_PER_HOUR = 3600

_SEED_PATTERN = re.compile(r"tkk\s*[:=]\s*['\"](\d+)\.(\d+)['\"]", re.IGNORECASE)

_MASK = 0xFFFFFFFF
_STEP_PROGRAM = "+-a^+6"
_FINAL_PROGRAM = "+-3^+b+-f"


@dataclass(frozen=True)
class SigningSeed:
    hours: int
    key: int

    def __str__(self) -> str:
        return f"{self.hours}.{self.key}"


DEFAULT_SEED = SigningSeed(406644, 3293161072)

TokenFunction = Callable[[SigningSeed, str], str]


def extract_seed(page: str) -> Optional[SigningSeed]:
    """Find the ``tkk`` seed in the landing page HTML, if present."""

    match = _SEED_PATTERN.search(page)
    if match is None:
        return None
    return SigningSeed(int(match.group(1)), int(match.group(2)))


def _run_program(value: int, program: str) -> int:
    for index in range(0, len(program) - 2, 3):
        operation, direction, amount = program[index], program[index + 1], program[index + 2]
        shift = ord(amount) - 87 if amount >= "a" else int(amount)
        shifted = value >> shift if direction == "+" else (value << shift) & _MASK
        value = (value + shifted) & _MASK if operation == "+" else value ^ shifted
    return value


def _utf8_from_utf16(text: str) -> bytes:
    # Re-pair surrogates as a UTF-16 string would before encoding; lone
    # surrogates keep their 3-byte form.
    joined = text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")
    return joined.encode("utf-8", "surrogatepass")


def google_token(seed: SigningSeed, text: str) -> str:
    """Compute the ``tk`` value the web client sends for ``text``."""

    value = seed.hours
    for byte in _utf8_from_utf16(text):
        value = _run_program(value + byte, _STEP_PROGRAM)
    value = _run_program(value, _FINAL_PROGRAM)
    value = (value ^ seed.key) & _MASK
    value %= 1_000_000
    return f"{value}.{value ^ seed.hours}"


class TokenGenerator:
    """Keeps a signing seed fresh and turns request texts into tokens.

    A failed seed refresh never raises (except for an apparent IP ban): the
    generator falls back to the last known or built-in seed and reports it
    through :attr:`is_seed_obsolete` so the caller can retry once.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        domain: str = DEFAULT_DOMAIN,
        token_function: TokenFunction = google_token,
        seed: Optional[SigningSeed] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.transport = transport
        self.domain = domain
        self._token_function = token_function
        self._clock = clock
        self._seed = seed
        self._invalidated = False
        self._seed_obsolete = False

    @property
    def seed(self) -> SigningSeed:
        return self._seed or DEFAULT_SEED

    @property
    def is_seed_obsolete(self) -> bool:
        return self._seed_obsolete

    def invalidate(self) -> None:
        """Force a seed refresh on the next call to :meth:`generate`."""

        self._invalidated = True

    def current_hour(self) -> int:
        return int(self._clock() // SECONDS_PER_HOUR)

    def _needs_refresh(self) -> bool:
        if self._seed is None or self._invalidated:
            return True
        # The seed is valid for the hour stamped into it.
        return self.current_hour() > self._seed.hours

    async def generate(self, text: str) -> str:
        if self._needs_refresh():
            await self.refresh_seed()
        return self._token_function(self.seed, text)

    async def refresh_seed(self) -> bool:
        url = landing_page_for(self.domain)
        try:
            response = await self.transport.get(url, build_handshake_headers(self.domain))
        except ProtocolError as exc:
            raise IPBannedError(Operation.TOKEN_GENERATION) from exc
        except TransportError as exc:
            LOGGER.warning("Could not refresh the signing seed from %s: %s", url, exc)
            self._seed_obsolete = True
            return False

        seed = extract_seed(response.body)
        if seed is None:
            LOGGER.warning("No signing seed found on %s; keeping %s", url, self.seed)
            self._seed_obsolete = True
            return False

        LOGGER.debug("Signing seed refreshed: %s", seed)
        self._seed = seed
        self._invalidated = False
        self._seed_obsolete = False
        return True


__all__ = [
    "DEFAULT_SEED",
    "SigningSeed",
    "TokenFunction",
    "TokenGenerator",
    "extract_seed",
    "google_token",
]
