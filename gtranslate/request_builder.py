"""Validation, URL and header construction for translate requests."""

from __future__ import annotations

from typing import Dict, List, Tuple
from urllib.parse import quote, urlencode, urlsplit

from .errors import InvalidTargetLanguageError
from .languages import AUTO, SUPPORTED_LANGUAGES, Language, LanguageCatalog, LanguageLike


DEFAULT_DOMAIN = "translate.google.com"
TRANSLATE_PATH = "/translate_a/single"

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:61.0) Gecko/20100101 Firefox/61.0"
ACCEPT_LANGUAGE = "en-US,en;q=0.5"
ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

# at: alternate translations, bd: dictionary, ex: examples, ld: detected
# language, md: definitions, qca: spelling correction, rw: see also,
# rm: transliteration, ss: synonyms, t: translation.
DATA_TYPES = ("at", "bd", "ex", "ld", "md", "qca", "rw", "rm", "ss", "t")


def endpoint_for(domain: str) -> str:
    return f"https://{domain}{TRANSLATE_PATH}"


def landing_page_for(domain: str) -> str:
    return f"https://{domain}/"


def domain_from_endpoint(endpoint: str) -> str:
    return urlsplit(endpoint).netloc


def validate_languages(
    source: LanguageLike,
    target: LanguageLike,
    catalog: LanguageCatalog = SUPPORTED_LANGUAGES,
) -> Tuple[Language, Language]:
    """Resolve both languages against the catalog before any I/O happens."""

    source_language = catalog.resolve(source)
    target_language = catalog.resolve(target)
    if target_language == AUTO:
        raise InvalidTargetLanguageError()
    return source_language, target_language


def build_query(text: str, source: Language, target: Language, token: str) -> List[Tuple[str, str]]:
    if target == AUTO:
        raise InvalidTargetLanguageError()
    params = [
        ("sl", source.iso639),
        ("tl", target.iso639),
        ("hl", "en"),
        ("q", text),
        ("tk", token),
        ("client", "t"),
    ]
    params.extend(("dt", data_type) for data_type in DATA_TYPES)
    params.extend(
        [
            ("ie", "UTF-8"),
            ("oe", "UTF-8"),
            ("otf", "1"),
            ("ssel", "0"),
            ("tsel", "0"),
            ("kc", "7"),
        ]
    )
    return params


def build_translate_url(endpoint: str, text: str, source: Language, target: Language, token: str) -> str:
    query = urlencode(build_query(text, source, target, token), quote_via=quote)
    return f"{endpoint}?{query}"


def build_headers(host: str, cookie: str) -> Dict[str, str]:
    return {
        "User-Agent": USER_AGENT,
        "Accept-Language": ACCEPT_LANGUAGE,
        "Host": host,
        "Cookie": cookie,
    }


def build_handshake_headers(host: str) -> Dict[str, str]:
    return {
        "User-Agent": USER_AGENT,
        "Accept": ACCEPT_HTML,
        "Accept-Charset": "ISO-8859-1,utf-8;q=0.7,*;q=0.7",
        "Accept-Language": ACCEPT_LANGUAGE,
        "Host": host,
    }


__all__ = [
    "DATA_TYPES",
    "DEFAULT_DOMAIN",
    "USER_AGENT",
    "build_handshake_headers",
    "build_headers",
    "build_query",
    "build_translate_url",
    "domain_from_endpoint",
    "endpoint_for",
    "landing_page_for",
    "validate_languages",
]
