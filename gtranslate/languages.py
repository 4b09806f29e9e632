"""Supported-language catalog bundled with the client."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple, Union

from .errors import UnsupportedLanguageError


LANGUAGES_RESOURCE = "languages.json"


@dataclass(frozen=True)
class Language:
    """A language known to Google Translate.

    Two languages are equal when their ISO codes are equal; the display name
    does not take part in comparisons.
    """

    full_name: str = field(compare=False)
    iso639: str

    def __str__(self) -> str:
        return f"{self.full_name} ({self.iso639})"


AUTO = Language("Automatic", "auto")

LanguageLike = Union[Language, str]


def _resource_path(relative_path: str) -> Path:
    """Return an absolute path to a resource shipped inside the package."""

    return Path(__file__).resolve().parent / relative_path


def load_languages(path: Optional[Path] = None) -> Tuple[Language, ...]:
    """Read ``{fullName, iso639}`` records from the bundled JSON resource."""

    source = path or _resource_path(LANGUAGES_RESOURCE)
    records = json.loads(source.read_text(encoding="utf-8"))
    return tuple(Language(record["fullName"], record["iso639"]) for record in records)


class LanguageCatalog:
    """Immutable lookup table over the supported languages."""

    def __init__(self, languages: Sequence[Language]) -> None:
        self._languages: Tuple[Language, ...] = tuple(languages)
        self._by_iso = {language.iso639.lower(): language for language in self._languages}
        self._by_name = {language.full_name.lower(): language for language in self._languages}

    def __iter__(self) -> Iterator[Language]:
        return iter(self._languages)

    def __len__(self) -> int:
        return len(self._languages)

    def __contains__(self, language: object) -> bool:
        return isinstance(language, Language) and self.is_supported(language)

    def by_name(self, name: str) -> Optional[Language]:
        return self._by_name.get(name.lower())

    def by_iso(self, iso: str) -> Optional[Language]:
        return self._by_iso.get(iso.lower())

    def is_supported(self, language: Language) -> bool:
        if language == AUTO:
            return True
        return language.iso639.lower() in self._by_iso

    def resolve(self, value: LanguageLike) -> Language:
        """Map a ``Language`` or ISO code onto a catalog entry.

        Raises :class:`UnsupportedLanguageError` for anything the catalog does
        not know about.
        """

        if isinstance(value, Language):
            if not self.is_supported(value):
                raise UnsupportedLanguageError(value)
            return AUTO if value == AUTO else self._by_iso[value.iso639.lower()]

        code = (value or "").strip()
        if code.lower() == AUTO.iso639:
            return AUTO
        language = self.by_iso(code)
        if language is None:
            raise UnsupportedLanguageError(code)
        return language


SUPPORTED_LANGUAGES = LanguageCatalog(load_languages())


def get_language_by_name(name: str) -> Optional[Language]:
    return SUPPORTED_LANGUAGES.by_name(name)


def get_language_by_iso(iso: str) -> Optional[Language]:
    return SUPPORTED_LANGUAGES.by_iso(iso)


def is_language_supported(language: Language) -> bool:
    return SUPPORTED_LANGUAGES.is_supported(language)


def resolve_language(value: LanguageLike) -> Language:
    return SUPPORTED_LANGUAGES.resolve(value)


__all__ = [
    "AUTO",
    "Language",
    "LanguageCatalog",
    "LanguageLike",
    "SUPPORTED_LANGUAGES",
    "get_language_by_iso",
    "get_language_by_name",
    "is_language_supported",
    "load_languages",
    "resolve_language",
]
