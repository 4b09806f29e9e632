import io
import json
import logging
import tempfile
import unittest
import unittest.mock as mock
from contextlib import redirect_stderr
from pathlib import Path

from gtranslate import translator_app
from gtranslate.errors import IPBannedError, Operation, UnsupportedLanguageError
from gtranslate.languages import get_language_by_iso
from gtranslate.translation_data import (
    EXTRA_TRANSLATIONS,
    Corrections,
    ExtraTranslation,
    PartOfSpeech,
    PartOfSpeechInfo,
    TranslationResult,
)


ENGLISH = get_language_by_iso("en")
JAPANESE = get_language_by_iso("ja")


def make_result(text: str = "こんにちは") -> TranslationResult:
    return TranslationResult(
        original_text="hello",
        source_language=ENGLISH,
        target_language=JAPANESE,
        fragmented_translation=(text,),
        translated_text_transcription="Kon'nichiwa",
        corrections=Corrections(confidence=0.5),
        extra_translations=PartOfSpeechInfo(
            EXTRA_TRANSLATIONS,
            {PartOfSpeech.INTERJECTION: (ExtraTranslation("こんにちは", ("Hello!", "Hi!"), 0.5),)},
        ),
        see_also=("hello there",),
    )


class PreferencesTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "prefs.json"

    def test_missing_file_gives_defaults(self) -> None:
        self.assertEqual(translator_app.load_preferences(self.path), translator_app.DEFAULT_PREFERENCES)

    def test_invalid_values_are_ignored(self) -> None:
        self.path.write_text(
            json.dumps({"dest_language": " ja ", "timeout": -1, "proxy": "", "domain": 3}),
            encoding="utf-8",
        )

        preferences = translator_app.load_preferences(self.path)

        self.assertEqual(preferences["dest_language"], "ja")
        self.assertEqual(preferences["timeout"], 5.0)
        self.assertIsNone(preferences["proxy"])
        self.assertEqual(preferences["domain"], "translate.google.com")

    def test_corrupt_file_gives_defaults(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(translator_app.load_preferences(self.path)["dest_language"], "en")

    def test_save_dest_language_keeps_other_keys(self) -> None:
        self.path.write_text(json.dumps({"timeout": 2}), encoding="utf-8")

        translator_app.save_dest_language("de", self.path)

        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(data, {"timeout": 2, "dest_language": "de"})


class ParseArgsTests(unittest.TestCase):
    def test_defaults_come_from_preferences(self) -> None:
        preferences = dict(translator_app.DEFAULT_PREFERENCES, dest_language="fr", timeout=3.0)

        args = translator_app.parse_args(["hello"], preferences)

        self.assertEqual(args.text, "hello")
        self.assertEqual(args.src, "auto")
        self.assertEqual(args.dest, "fr")
        self.assertEqual(args.timeout, 3.0)
        self.assertFalse(args.lite)
        self.assertFalse(args.clipboard)

    def test_flags(self) -> None:
        args = translator_app.parse_args(
            ["--src", "en", "--dest", "ja", "--lite", "--details", "--proxy", "http://p:1"],
            dict(translator_app.DEFAULT_PREFERENCES),
        )

        self.assertIsNone(args.text)
        self.assertEqual((args.src, args.dest), ("en", "ja"))
        self.assertTrue(args.lite)
        self.assertTrue(args.details)
        self.assertEqual(args.proxy, "http://p:1")


class FormatResultTests(unittest.TestCase):
    def test_plain_output(self) -> None:
        self.assertEqual(translator_app.format_result(make_result()), "こんにちは")

    def test_details(self) -> None:
        output = translator_app.format_result(make_result(), details=True)

        self.assertIn("Source: English (en)", output)
        self.assertIn("Translated transcription: Kon'nichiwa", output)
        self.assertIn("Confidence: 0.50", output)
        self.assertIn("  interjection:", output)
        self.assertIn("    こんにちは (Hello!, Hi!)", output)
        self.assertIn("See also: hello there", output)
        self.assertNotIn("Synonyms", output)


class MainTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.prefs_path = Path(self._tmp.name) / "prefs.json"

        patches = [
            mock.patch.object(translator_app, "PREFERENCES_FILE", self.prefs_path),
            mock.patch.object(
                translator_app, "configure_logging", return_value=logging.getLogger("gtranslate.test")
            ),
        ]
        for patcher in patches:
            patcher.start()
            self.addCleanup(patcher.stop)

        client_patcher = mock.patch.object(translator_app, "GoogleTranslateClient")
        self.client_class = client_patcher.start()
        self.addCleanup(client_patcher.stop)
        self.client = self.client_class.return_value
        self.client.translate_item = mock.AsyncMock(return_value=make_result())
        self.client.translate_lite_item = mock.AsyncMock(return_value=make_result("やあ"))

    def test_translates_argument_and_saves_destination(self) -> None:
        stdout = io.StringIO()

        code = translator_app.main(["hello", "--dest", "ja"], stdout=stdout)

        self.assertEqual(code, 0)
        self.assertEqual(stdout.getvalue(), "こんにちは\n")
        request = self.client.translate_item.await_args.args[0]
        self.assertEqual((request.text, request.src, request.dest), ("hello", "auto", "ja"))
        self.assertEqual(json.loads(self.prefs_path.read_text(encoding="utf-8"))["dest_language"], "ja")
        self.client_class.assert_called_once_with("translate.google.com", timeout=5.0, proxy=None)

    def test_reads_stdin_in_lite_mode(self) -> None:
        stdout = io.StringIO()

        code = translator_app.main(["--lite"], stdin=io.StringIO("hi"), stdout=stdout)

        self.assertEqual(code, 0)
        self.assertEqual(stdout.getvalue(), "やあ\n")
        self.client.translate_item.assert_not_awaited()

    def test_clipboard_round_trip(self) -> None:
        with mock.patch.object(translator_app.pyperclip, "paste", return_value="hello") as paste, mock.patch.object(
            translator_app.pyperclip, "copy"
        ) as copy:
            code = translator_app.main(["--clipboard"], stdout=io.StringIO())

        self.assertEqual(code, 0)
        paste.assert_called_once_with()
        copy.assert_called_once_with("こんにちは")

    def test_language_error_exit_code(self) -> None:
        self.client.translate_item.side_effect = UnsupportedLanguageError("xx")
        stderr = io.StringIO()

        with redirect_stderr(stderr):
            code = translator_app.main(["hello", "--dest", "xx"], stdout=io.StringIO())

        self.assertEqual(code, translator_app.EXIT_USAGE)
        self.assertIn("xx", stderr.getvalue())
        self.assertFalse(self.prefs_path.exists())

    def test_translation_error_exit_code(self) -> None:
        self.client.translate_item.side_effect = IPBannedError(Operation.TRANSLATION)
        stderr = io.StringIO()

        with redirect_stderr(stderr), self.assertLogs("gtranslate.test", level="ERROR"):
            code = translator_app.main(["hello"], stdout=io.StringIO())

        self.assertEqual(code, translator_app.EXIT_FAILURE)
        self.assertIn("Error during translation:", stderr.getvalue())

    def test_list_languages(self) -> None:
        stdout = io.StringIO()

        code = translator_app.main(["--list-languages"], stdout=stdout)

        self.assertEqual(code, 0)
        self.assertIn("ja\tJapanese\n", stdout.getvalue())
        self.client_class.assert_not_called()


class ConfigureLoggingTests(unittest.TestCase):
    def test_file_and_console_handlers(self) -> None:
        logger = logging.getLogger("gtranslate")
        saved = list(logger.handlers)
        saved_level = logger.level
        for handler in saved:
            logger.removeHandler(handler)

        def restore() -> None:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            for handler in saved:
                logger.addHandler(handler)
            logger.setLevel(saved_level)

        self.addCleanup(restore)

        with tempfile.TemporaryDirectory() as tmp:
            configured = translator_app.configure_logging(verbose=True, log_dir=Path(tmp))
            kinds = {type(handler).__name__ for handler in configured.handlers}
            for handler in list(configured.handlers):
                handler.close()
                configured.removeHandler(handler)

        self.assertIs(configured, logger)
        self.assertEqual(kinds, {"RotatingFileHandler", "StreamHandler"})
        self.assertEqual(configured.level, logging.DEBUG)


if __name__ == "__main__":  # pragma: no cover - allows direct execution
    unittest.main()
