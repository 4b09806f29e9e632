"""Value objects produced by the response decoder."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, FrozenSet, Generic, Iterator, Mapping, Optional, Tuple, TypeVar

from .languages import AUTO, Language


class PartOfSpeech(str, Enum):
    """Part-of-speech tags, normalised to lower case with whitespace removed."""

    NOUN = "noun"
    VERB = "verb"
    PRONOUN = "pronoun"
    ADVERB = "adverb"
    ADJECTIVE = "adjective"
    AUXILIARY_VERB = "auxiliaryverb"
    CONJUNCTION = "conjunction"
    PREPOSITION = "preposition"
    INTERJECTION = "interjection"
    ARTICLE = "article"
    PARTICLE = "particle"
    ABBREVIATION = "abbreviation"
    PHRASE = "phrase"
    PREFIX = "prefix"
    SUFFIX = "suffix"

    @classmethod
    def from_tag(cls, tag: str) -> Optional["PartOfSpeech"]:
        normalised = "".join(tag.split()).lower()
        try:
            return cls(normalised)
        except ValueError:
            return None


@dataclass(frozen=True)
class ExtraTranslation:
    """An alternative translation of a single word plus its back-translations."""

    phrase: str
    phrase_translations: Tuple[str, ...] = ()
    score: Optional[float] = None


@dataclass(frozen=True)
class SynonymSet:
    synonyms: Tuple[str, ...]


@dataclass(frozen=True)
class Definition:
    explanation: str
    example: Optional[str] = None


T = TypeVar("T")


@dataclass(frozen=True)
class InfoKind(Generic[T]):
    """Describes one part-of-speech keyed block of a response.

    ``data_index`` is the element of a block entry (``[tag, ..., entries]``)
    holding the entry list; ``parse_entry`` turns one raw entry into ``T``.
    """

    name: str
    tags: FrozenSet[PartOfSpeech]
    data_index: int
    parse_entry: Callable[[Any], T] = field(compare=False, repr=False)


@dataclass(frozen=True, eq=False)
class PartOfSpeechInfo(Generic[T]):
    """Read-only mapping of part of speech to the entries found for it."""

    kind: InfoKind[T]
    entries: Mapping[PartOfSpeech, Tuple[T, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __getitem__(self, part_of_speech: PartOfSpeech) -> Tuple[T, ...]:
        return self.entries[part_of_speech]

    def __iter__(self) -> Iterator[PartOfSpeech]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, part_of_speech: object) -> bool:
        return part_of_speech in self.entries

    def get(self, part_of_speech: PartOfSpeech) -> Tuple[T, ...]:
        return self.entries.get(part_of_speech, ())

    def items(self):
        return self.entries.items()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PartOfSpeechInfo):
            return NotImplemented
        return self.kind == other.kind and dict(self.entries) == dict(other.entries)


def _text_tuple(values: Any) -> Tuple[str, ...]:
    if values is None:
        return ()
    if not isinstance(values, list):
        raise TypeError(f"expected a list of strings, got {type(values).__name__}")
    return tuple(str(value) for value in values if value is not None)


def _parse_extra_translation(raw: Any) -> ExtraTranslation:
    # [word, [back translations], null, score]
    score = raw[3] if len(raw) > 3 and isinstance(raw[3], (int, float)) else None
    return ExtraTranslation(
        phrase=str(raw[0]),
        phrase_translations=_text_tuple(raw[1] if len(raw) > 1 else None),
        score=score,
    )


def _parse_synonym_set(raw: Any) -> SynonymSet:
    # [[synonym, ...], sense id]
    return SynonymSet(synonyms=_text_tuple(raw[0]))


def _parse_definition(raw: Any) -> Definition:
    # [explanation, sense id, example]
    example = raw[2] if len(raw) > 2 and isinstance(raw[2], str) else None
    return Definition(explanation=str(raw[0]), example=example)


_COMMON_TAGS = frozenset(
    {
        PartOfSpeech.NOUN,
        PartOfSpeech.VERB,
        PartOfSpeech.PRONOUN,
        PartOfSpeech.ADVERB,
        PartOfSpeech.ADJECTIVE,
        PartOfSpeech.AUXILIARY_VERB,
        PartOfSpeech.CONJUNCTION,
        PartOfSpeech.PREPOSITION,
        PartOfSpeech.INTERJECTION,
        PartOfSpeech.ABBREVIATION,
        PartOfSpeech.PHRASE,
    }
)

EXTRA_TRANSLATIONS: InfoKind[ExtraTranslation] = InfoKind(
    name="extra_translations",
    tags=_COMMON_TAGS | {PartOfSpeech.ARTICLE, PartOfSpeech.PARTICLE, PartOfSpeech.PREFIX, PartOfSpeech.SUFFIX},
    data_index=2,
    parse_entry=_parse_extra_translation,
)

SYNONYMS: InfoKind[SynonymSet] = InfoKind(
    name="synonyms",
    tags=_COMMON_TAGS,
    data_index=1,
    parse_entry=_parse_synonym_set,
)

DEFINITIONS: InfoKind[Definition] = InfoKind(
    name="definitions",
    tags=_COMMON_TAGS | {PartOfSpeech.PREFIX, PartOfSpeech.SUFFIX},
    data_index=1,
    parse_entry=_parse_definition,
)

ExtraTranslations = PartOfSpeechInfo[ExtraTranslation]
Synonyms = PartOfSpeechInfo[SynonymSet]
Definitions = PartOfSpeechInfo[Definition]


@dataclass(frozen=True)
class Corrections:
    text_was_corrected: bool = False
    corrected_text: Optional[str] = None
    corrected_words: Tuple[str, ...] = ()
    language_was_corrected: bool = False
    corrected_language: Optional[Language] = None
    confidence: float = 0.0


@dataclass(frozen=True)
class TranslationResult:
    original_text: str
    source_language: Language
    target_language: Optional[Language]
    fragmented_translation: Tuple[str, ...] = ()
    original_text_transcription: Optional[str] = None
    translated_text_transcription: Optional[str] = None
    corrections: Corrections = field(default_factory=Corrections)
    extra_translations: Optional[ExtraTranslations] = None
    synonyms: Optional[Synonyms] = None
    definitions: Optional[Definitions] = None
    see_also: Optional[Tuple[str, ...]] = None

    @property
    def merged_translation(self) -> str:
        return "".join(self.fragmented_translation)

    @property
    def text(self) -> str:
        return self.merged_translation

    @classmethod
    def empty(cls, original_text: str = "", source: Language = AUTO, target: Optional[Language] = None) -> "TranslationResult":
        return cls(original_text=original_text, source_language=source, target_language=target)

    def __str__(self) -> str:
        return self.merged_translation


__all__ = [
    "Corrections",
    "DEFINITIONS",
    "Definition",
    "Definitions",
    "EXTRA_TRANSLATIONS",
    "ExtraTranslation",
    "ExtraTranslations",
    "InfoKind",
    "PartOfSpeech",
    "PartOfSpeechInfo",
    "SYNONYMS",
    "SynonymSet",
    "Synonyms",
    "TranslationResult",
]
