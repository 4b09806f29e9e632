"""Decoding of the positional JSON array returned by ``translate_a/single``.

The payload carries no field names: every piece of information lives at a
fixed index of the top-level array, and trailing sections are missing when
the request did not ask for them. Each index is named in :class:`ResponseSlot`
and decoded on its own; a broken optional block is logged and replaced by an
empty default instead of failing the whole response.
"""

from __future__ import annotations

import json
import logging
import re
from enum import IntEnum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .errors import DecodeAnomaly, ResponseFormatError
from .languages import AUTO, SUPPORTED_LANGUAGES, Language, LanguageCatalog
from .translation_data import (
    DEFINITIONS,
    EXTRA_TRANSLATIONS,
    SYNONYMS,
    Corrections,
    InfoKind,
    PartOfSpeech,
    PartOfSpeechInfo,
    TranslationResult,
)


LOGGER = logging.getLogger("gtranslate.decoder")

_CORRECTED_WORD = re.compile(r"<b><i>(.*?)</i></b>")


class ResponseSlot(IntEnum):
    MAIN = 0
    EXTRA_TRANSLATIONS = 1
    SELECTED_LANGUAGE = 2
    CONFIDENCE = 6
    SPELLING = 7
    DETECTED_LANGUAGE = 8
    SYNONYMS = 11
    DEFINITIONS = 12
    SEE_ALSO = 14


def _slot(payload: Sequence[Any], slot: ResponseSlot) -> Any:
    return payload[slot] if len(payload) > slot else None


def _present(payload: Sequence[Any], slot: ResponseSlot) -> bool:
    return len(payload) > slot


def _has_values(block: Any) -> bool:
    return isinstance(block, list) and len(block) > 0


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def parse_payload(raw: Union[str, bytes, List[Any]]) -> List[Any]:
    if isinstance(raw, list):
        payload = raw
    else:
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ResponseFormatError("Invalid response from Google Translate") from exc

    if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
        raise ResponseFormatError("Unexpected translation response structure")
    return payload


def _is_transcription_row(row: Any) -> bool:
    return isinstance(row, list) and len(row) > 1 and row[0] is None


def extract_transcriptions(row: Sequence[Any]) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(translated, original)`` transcriptions from the trailing row."""

    count = len(row)
    if count == 3:
        return _optional_text(row[-1]), None
    if row[-2] is not None:
        return _optional_text(row[-2]), _optional_text(row[-1])
    return _optional_text(row[-1]), None


def decode_main_block(block: Sequence[Any]) -> Tuple[Tuple[str, ...], Optional[str], Optional[str]]:
    """Split the main block into fragments and transcriptions.

    Returns ``(fragments, original_transcription, translated_transcription)``.
    """

    rows = list(block)
    translated_transcription = original_transcription = None
    if len(rows) > 1 and _is_transcription_row(rows[-1]):
        translated_transcription, original_transcription = extract_transcriptions(rows.pop())

    fragments = []
    for row in rows:
        if not isinstance(row, list) or not row:
            LOGGER.warning("%s", DecodeAnomaly(f"Skipping malformed translation fragment {row!r}"))
            continue
        fragments.append("" if row[0] is None else str(row[0]))
    return tuple(fragments), original_transcription, translated_transcription


def decode_part_of_speech_block(block: Any, kind: InfoKind) -> Optional[PartOfSpeechInfo]:
    if not _has_values(block):
        return None

    collected: Dict[PartOfSpeech, List[Any]] = {}
    for item in block:
        if not isinstance(item, list) or len(item) <= kind.data_index or not isinstance(item[0], str):
            LOGGER.warning("%s", DecodeAnomaly(f"Skipping malformed {kind.name} entry {item!r}"))
            continue

        tag = item[0]
        part_of_speech = PartOfSpeech.from_tag(tag)
        if part_of_speech is None or part_of_speech not in kind.tags:
            # Google also sends entries without a name; those are silently skipped.
            if tag.strip():
                LOGGER.debug("%s has no member for part of speech %r", kind.name, tag)
            continue

        raw_entries = item[kind.data_index]
        if not isinstance(raw_entries, list):
            LOGGER.warning("%s", DecodeAnomaly(f"{kind.name} entries for {tag!r} are not a list"))
            continue
        try:
            parsed = [kind.parse_entry(raw) for raw in raw_entries]
        except (IndexError, KeyError, TypeError, ValueError) as exc:
            LOGGER.warning("%s", DecodeAnomaly(f"Skipping malformed {kind.name} entry for {tag!r}: {exc}"))
            continue
        collected.setdefault(part_of_speech, []).extend(parsed)

    return PartOfSpeechInfo(kind, {key: tuple(values) for key, values in collected.items()})


def decode_see_also(block: Any) -> Tuple[str, ...]:
    if not _has_values(block) or not isinstance(block[0], list):
        return ()
    return tuple(str(term) for term in block[0] if term is not None)


def detected_language_code(payload: Sequence[Any]) -> Optional[str]:
    block = _slot(payload, ResponseSlot.DETECTED_LANGUAGE)
    try:
        code = block[0][0]
    except (IndexError, KeyError, TypeError):
        return None
    return code if isinstance(code, str) else None


def _decode_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return min(max(float(value), 0.0), 1.0)


def decode_corrections(payload: Sequence[Any], catalog: LanguageCatalog = SUPPORTED_LANGUAGES) -> Corrections:
    text_was_corrected = False
    corrected_text = None
    corrected_words: Tuple[str, ...] = ()

    spelling = _slot(payload, ResponseSlot.SPELLING)
    if _has_values(spelling):
        try:
            html = spelling[0] or ""
            corrected_words = tuple(_CORRECTED_WORD.findall(html))
            corrected_text = _optional_text(spelling[1]) if len(spelling) > 1 else None
            text_was_corrected = True
        except TypeError as exc:
            LOGGER.warning("%s", DecodeAnomaly(f"Ignoring malformed spelling block: {exc}"))
            corrected_words, corrected_text = (), None

    language_was_corrected = False
    corrected_language: Optional[Language] = None
    selected = _slot(payload, ResponseSlot.SELECTED_LANGUAGE)
    detected = detected_language_code(payload)
    if detected is not None and (not isinstance(selected, str) or selected.lower() != detected.lower()):
        language_was_corrected = True
        corrected_language = catalog.by_iso(detected)

    return Corrections(
        text_was_corrected=text_was_corrected,
        corrected_text=corrected_text,
        corrected_words=corrected_words,
        language_was_corrected=language_was_corrected,
        corrected_language=corrected_language,
        confidence=_decode_confidence(_slot(payload, ResponseSlot.CONFIDENCE)),
    )


def decode_response(
    raw: Union[str, bytes, List[Any]],
    original_text: str,
    source: Language,
    target: Language,
    include_extras: bool,
    *,
    catalog: LanguageCatalog = SUPPORTED_LANGUAGES,
) -> TranslationResult:
    """Turn a raw ``translate_a/single`` body into a :class:`TranslationResult`."""

    payload = parse_payload(raw)
    fragments, original_transcription, translated_transcription = decode_main_block(payload[ResponseSlot.MAIN])

    source_language = source
    if source == AUTO:
        detected = detected_language_code(payload)
        source_language = (catalog.by_iso(detected) if detected else None) or AUTO

    result = {
        "original_text": original_text,
        "source_language": source_language,
        "target_language": target,
        "fragmented_translation": fragments,
        "original_text_transcription": original_transcription,
        "translated_text_transcription": translated_transcription,
        "corrections": decode_corrections(payload, catalog),
    }

    if include_extras:
        result["extra_translations"] = decode_part_of_speech_block(
            _slot(payload, ResponseSlot.EXTRA_TRANSLATIONS), EXTRA_TRANSLATIONS
        )
        if _present(payload, ResponseSlot.SYNONYMS):
            result["synonyms"] = decode_part_of_speech_block(_slot(payload, ResponseSlot.SYNONYMS), SYNONYMS)
        if _present(payload, ResponseSlot.DEFINITIONS):
            result["definitions"] = decode_part_of_speech_block(_slot(payload, ResponseSlot.DEFINITIONS), DEFINITIONS)
        if _present(payload, ResponseSlot.SEE_ALSO):
            result["see_also"] = decode_see_also(_slot(payload, ResponseSlot.SEE_ALSO))

    return TranslationResult(**result)


__all__ = [
    "ResponseSlot",
    "decode_corrections",
    "decode_main_block",
    "decode_part_of_speech_block",
    "decode_response",
    "decode_see_also",
    "detected_language_code",
    "extract_transcriptions",
    "parse_payload",
]
