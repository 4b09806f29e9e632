"""Exceptions raised by the translation client."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers
    from .languages import Language


class TranslationError(RuntimeError):
    """Raised when the translation service cannot complete a request."""


class UnsupportedLanguageError(TranslationError):
    """Raised when a language is not part of the supported catalog."""

    def __init__(self, language: Union["Language", str]) -> None:
        self.language = language
        super().__init__(f"Language {language!s} is not supported")


class InvalidTargetLanguageError(TranslationError, ValueError):
    """Raised when the destination language is the auto-detect sentinel."""

    def __init__(self) -> None:
        super().__init__("A destination language cannot be auto")


class TransportError(TranslationError):
    """Network or HTTP failure reported by the transport."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message)


class ProtocolError(TransportError):
    """The server answered, but with an HTTP error status."""


class Operation(str, Enum):
    TRANSLATION = "translation"
    TOKEN_GENERATION = "token_generation"


class IPBannedError(TranslationError):
    """Raised when the service refuses requests coming from this address."""

    def __init__(self, operation: Operation) -> None:
        self.operation = operation
        super().__init__(
            f"The IP address used for requests looks banned (during {operation.value}); "
            "try again later or switch to a proxy"
        )


class ResponseFormatError(TranslationError):
    """The response body is not a translate payload this client understands."""


class DecodeAnomaly(TranslationError):
    """A single optional block of a response could not be decoded."""


__all__ = [
    "DecodeAnomaly",
    "IPBannedError",
    "InvalidTargetLanguageError",
    "Operation",
    "ProtocolError",
    "ResponseFormatError",
    "TranslationError",
    "TransportError",
    "UnsupportedLanguageError",
]
