import unittest

from gtranslate.errors import IPBannedError, Operation, ProtocolError, TransportError
from gtranslate.token_generator import (
    DEFAULT_SEED,
    SigningSeed,
    TokenGenerator,
    extract_seed,
    google_token,
)
from gtranslate.transport import HttpResponse


LANDING_PAGE = "<html><script>window.TKK=null;c._ctkk='x';tkk:'447677.3917416463',experiment_ids:[]</script></html>"


class FakeClock:
    def __init__(self, value: float = 447677 * 3600 + 10.0) -> None:
        self.value = value

    def advance(self, amount: float) -> None:
        self.value += amount

    def now(self) -> float:
        return self.value


class LandingPageTransport:
    def __init__(self, *outcomes) -> None:
        self.timeout = 5.0
        self.proxy = None
        self.calls = []
        self._outcomes = list(outcomes)

    async def get(self, url, headers):
        self.calls.append((url, dict(headers)))
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class GoogleTokenTests(unittest.TestCase):
    def test_known_fixtures(self) -> None:
        seed = SigningSeed(406644, 3293161072)
        self.assertEqual(google_token(seed, ""), "557215.963819")
        self.assertEqual(google_token(seed, "a"), "372634.236526")

    def test_token_depends_on_text_and_seed(self) -> None:
        self.assertNotEqual(google_token(DEFAULT_SEED, "hello"), google_token(DEFAULT_SEED, "hellp"))
        self.assertNotEqual(
            google_token(DEFAULT_SEED, "hello"),
            google_token(SigningSeed(447677, 3917416463), "hello"),
        )

    def test_token_shape(self) -> None:
        first, _, second = google_token(DEFAULT_SEED, "Привет, мир").partition(".")
        self.assertTrue(first.isdigit())
        self.assertLess(int(first), 1_000_000)
        self.assertEqual(int(second), int(first) ^ DEFAULT_SEED.hours)

    def test_split_surrogates_hash_like_a_single_code_point(self) -> None:
        self.assertEqual(
            google_token(DEFAULT_SEED, "\ud83d\ude00"),
            google_token(DEFAULT_SEED, "\U0001F600"),
        )


class ExtractSeedTests(unittest.TestCase):
    def test_extracts_seed_from_landing_page(self) -> None:
        self.assertEqual(extract_seed(LANDING_PAGE), SigningSeed(447677, 3917416463))

    def test_double_quoted_and_assignment_forms(self) -> None:
        self.assertEqual(extract_seed('TKK="12.34";'), SigningSeed(12, 34))

    def test_missing_seed(self) -> None:
        self.assertIsNone(extract_seed("<html></html>"))


class TokenGeneratorTests(unittest.IsolatedAsyncioTestCase):
    async def test_fetches_seed_once_until_its_hour_passes(self) -> None:
        clock = FakeClock()
        transport = LandingPageTransport(HttpResponse(200, LANDING_PAGE))
        generator = TokenGenerator(transport, clock=clock.now)

        token = await generator.generate("hello")
        await generator.generate("world")

        self.assertEqual(token, google_token(SigningSeed(447677, 3917416463), "hello"))
        self.assertEqual(len(transport.calls), 1)
        self.assertEqual(transport.calls[0][0], "https://translate.google.com/")
        self.assertFalse(generator.is_seed_obsolete)

        clock.advance(3000.0)
        await generator.generate("same hour")
        self.assertEqual(len(transport.calls), 1)

        clock.advance(600.0)
        await generator.generate("next hour")
        self.assertEqual(len(transport.calls), 2)

    async def test_supplied_seed_from_a_past_hour_is_refreshed(self) -> None:
        transport = LandingPageTransport(HttpResponse(200, LANDING_PAGE))
        generator = TokenGenerator(
            transport,
            seed=SigningSeed(406644, 3293161072),
            clock=FakeClock(447677 * 3600.0).now,
        )

        token = await generator.generate("hello")

        self.assertEqual(len(transport.calls), 1)
        self.assertEqual(token, google_token(SigningSeed(447677, 3917416463), "hello"))

    async def test_supplied_seed_for_the_current_hour_is_used_as_is(self) -> None:
        transport = LandingPageTransport(HttpResponse(200, LANDING_PAGE))
        seed = SigningSeed(447677, 12345)
        generator = TokenGenerator(transport, seed=seed, clock=FakeClock().now)

        token = await generator.generate("hello")

        self.assertEqual(transport.calls, [])
        self.assertEqual(token, google_token(seed, "hello"))

    async def test_failed_refresh_flags_seed_obsolete_without_raising(self) -> None:
        transport = LandingPageTransport(TransportError("timed out"))
        generator = TokenGenerator(transport)

        token = await generator.generate("hello")

        self.assertEqual(token, google_token(DEFAULT_SEED, "hello"))
        self.assertTrue(generator.is_seed_obsolete)

    async def test_page_without_seed_flags_seed_obsolete(self) -> None:
        generator = TokenGenerator(LandingPageTransport(HttpResponse(200, "<html></html>")))

        await generator.generate("hello")

        self.assertTrue(generator.is_seed_obsolete)

    async def test_invalidate_forces_refresh(self) -> None:
        transport = LandingPageTransport(
            TransportError("timed out"),
            HttpResponse(200, LANDING_PAGE),
        )
        generator = TokenGenerator(transport)
        await generator.generate("hello")
        self.assertTrue(generator.is_seed_obsolete)

        generator.invalidate()
        await generator.generate("hello")

        self.assertFalse(generator.is_seed_obsolete)
        self.assertEqual(generator.seed, SigningSeed(447677, 3917416463))

    async def test_http_error_during_seed_fetch_is_reported_as_ban(self) -> None:
        generator = TokenGenerator(LandingPageTransport(ProtocolError("HTTP 429", status=429)))

        with self.assertRaises(IPBannedError) as ctx:
            await generator.generate("hello")

        self.assertEqual(ctx.exception.operation, Operation.TOKEN_GENERATION)

    async def test_custom_token_function(self) -> None:
        generator = TokenGenerator(
            LandingPageTransport(HttpResponse(200, LANDING_PAGE)),
            token_function=lambda seed, text: f"{seed}:{len(text)}",
        )

        self.assertEqual(await generator.generate("abc"), "447677.3917416463:3")


if __name__ == "__main__":  # pragma: no cover - allows direct execution
    unittest.main()
