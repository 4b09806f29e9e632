"""Client for the unofficial Google Translate web endpoint."""

from .errors import (
    IPBannedError,
    InvalidTargetLanguageError,
    TranslationError,
    TransportError,
    UnsupportedLanguageError,
)
from .languages import AUTO, Language, get_language_by_iso, get_language_by_name
from .translation_data import Corrections, PartOfSpeech, TranslationResult
from .translation_service import GoogleTranslateClient, TranslationRequest

__all__ = [
    "AUTO",
    "Corrections",
    "GoogleTranslateClient",
    "IPBannedError",
    "InvalidTargetLanguageError",
    "Language",
    "PartOfSpeech",
    "TranslationError",
    "TranslationRequest",
    "TranslationResult",
    "TransportError",
    "UnsupportedLanguageError",
    "get_language_by_iso",
    "get_language_by_name",
]
