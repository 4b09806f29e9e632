"""Command line front-end for the Google Translate web client."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, Optional, Sequence

import pyperclip

from .errors import InvalidTargetLanguageError, TranslationError, UnsupportedLanguageError
from .languages import SUPPORTED_LANGUAGES
from .request_builder import DEFAULT_DOMAIN
from .translation_data import PartOfSpeechInfo, TranslationResult
from .translation_service import GoogleTranslateClient, TranslationRequest


LOG_FILE_NAME = "gtranslate.log"
LOG_MAX_BYTES = 2_097_152
LOG_BACKUP_COUNT = 3

PREFERENCES_FILE = Path.home() / ".gtranslate_preferences.json"

DEFAULT_PREFERENCES = {
    "dest_language": "en",
    "source_language": "auto",
    "domain": DEFAULT_DOMAIN,
    "timeout": 5.0,
    "proxy": None,
}

EXIT_FAILURE = 1
EXIT_USAGE = 2


def configure_logging(verbose: bool = False, log_dir: Optional[Path] = None) -> logging.Logger:
    logger = logging.getLogger("gtranslate")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if logger.handlers:
        return logger

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    log_dir = log_dir or PREFERENCES_FILE.parent
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        handler = None
    if handler is not None:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(formatter)
    logger.addHandler(console)
    return logger


def load_preferences(path: Optional[Path] = None) -> dict:
    path = path or PREFERENCES_FILE
    result = dict(DEFAULT_PREFERENCES)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return result
    if not isinstance(data, dict):
        return result

    for key in ("dest_language", "source_language", "domain", "proxy"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            result[key] = value.strip()
    timeout = data.get("timeout")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
        result["timeout"] = float(timeout)
    return result


def save_dest_language(dest: str, path: Optional[Path] = None) -> None:
    path = path or PREFERENCES_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        data = {}
    if not isinstance(data, dict):
        data = {}
    data["dest_language"] = dest
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError:
        pass


def parse_args(argv: Optional[Sequence[str]] = None, preferences: Optional[dict] = None) -> argparse.Namespace:
    preferences = preferences if preferences is not None else load_preferences()
    parser = argparse.ArgumentParser(description="Translate text with the Google Translate web endpoint.")
    parser.add_argument("text", nargs="?", help="Text to translate. Reads stdin when omitted.")
    parser.add_argument(
        "--src",
        default=preferences["source_language"],
        help="Source language code (default: auto-detect).",
    )
    parser.add_argument(
        "--dest",
        default=preferences["dest_language"],
        help="Destination language code (default: last saved or en).",
    )
    parser.add_argument("--lite", action="store_true", help="Skip dictionary data for a faster request.")
    parser.add_argument("--details", action="store_true", help="Print transcription, corrections and dictionary data.")
    parser.add_argument(
        "--clipboard",
        action="store_true",
        help="Translate the clipboard contents and copy the translation back.",
    )
    parser.add_argument("--domain", default=preferences["domain"], help="Google Translate domain to query.")
    parser.add_argument("--timeout", type=float, default=preferences["timeout"], help="Request timeout in seconds.")
    parser.add_argument("--proxy", default=preferences["proxy"], help="HTTP(S) proxy URL.")
    parser.add_argument("--list-languages", action="store_true", help="List supported languages and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def _format_info(title: str, info: Optional[PartOfSpeechInfo], render) -> list[str]:
    if not info:
        return []
    lines = [f"{title}:"]
    for part_of_speech, entries in info.items():
        lines.append(f"  {part_of_speech.value}:")
        lines.extend(f"    {render(entry)}" for entry in entries)
    return lines


def format_result(result: TranslationResult, *, details: bool = False) -> str:
    lines = [result.merged_translation]
    if not details:
        return "\n".join(lines)

    lines.append(f"Source: {result.source_language}")
    if result.original_text_transcription:
        lines.append(f"Original transcription: {result.original_text_transcription}")
    if result.translated_text_transcription:
        lines.append(f"Translated transcription: {result.translated_text_transcription}")

    corrections = result.corrections
    if corrections.text_was_corrected:
        lines.append(f"Did you mean: {corrections.corrected_text}")
    if corrections.language_was_corrected and corrections.corrected_language is not None:
        lines.append(f"Detected language: {corrections.corrected_language}")
    lines.append(f"Confidence: {corrections.confidence:.2f}")

    lines.extend(
        _format_info(
            "Extra translations",
            result.extra_translations,
            lambda entry: f"{entry.phrase} ({', '.join(entry.phrase_translations)})",
        )
    )
    lines.extend(_format_info("Synonyms", result.synonyms, lambda entry: ", ".join(entry.synonyms)))
    lines.extend(
        _format_info(
            "Definitions",
            result.definitions,
            lambda entry: entry.explanation + (f' ("{entry.example}")' if entry.example else ""),
        )
    )
    if result.see_also:
        lines.append(f"See also: {', '.join(result.see_also)}")
    return "\n".join(lines)


async def run_translation(client: GoogleTranslateClient, request: TranslationRequest, *, lite: bool) -> TranslationResult:
    if lite:
        return await client.translate_lite_item(request)
    return await client.translate_item(request)


def main(argv: Optional[Sequence[str]] = None, stdin: IO[str] = sys.stdin, stdout: IO[str] = sys.stdout) -> int:
    args = parse_args(argv)
    logger = configure_logging(args.verbose)

    if args.list_languages:
        for language in SUPPORTED_LANGUAGES:
            stdout.write(f"{language.iso639}\t{language.full_name}\n")
        return 0

    if args.clipboard:
        text = pyperclip.paste()
    elif args.text is not None:
        text = args.text
    else:
        text = stdin.read()

    client = GoogleTranslateClient(args.domain, timeout=args.timeout, proxy=args.proxy)
    request = TranslationRequest(text=text, src=args.src, dest=args.dest)
    try:
        result = asyncio.run(run_translation(client, request, lite=args.lite))
    except (UnsupportedLanguageError, InvalidTargetLanguageError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return EXIT_USAGE
    except TranslationError as exc:
        logger.error("Translation failed: %s", exc)
        sys.stderr.write(f"Error during translation: {exc}\n")
        return EXIT_FAILURE

    save_dest_language(args.dest)
    if args.clipboard:
        pyperclip.copy(result.merged_translation)
    stdout.write(format_result(result, details=args.details) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
