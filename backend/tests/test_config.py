import unittest

from pydantic import ValidationError

from app.core.config import PLACEHOLDER_SECRET, Settings, split_origins


class TestSplitOrigins(unittest.TestCase):
    def test_accepted_forms(self) -> None:
        cases = {
            "https://a.com, https://b.com": ["https://a.com", "https://b.com"],
            '["https://a.com"]': ["https://a.com"],
            "https://a.com": ["https://a.com"],
            "": [],
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(split_origins(raw), expected)

    def test_list_passthrough(self) -> None:
        self.assertEqual(split_origins(["https://a.com", ""]), ["https://a.com"])


class TestSettings(unittest.TestCase):
    def test_placeholder_secret_refused_in_production(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, APP_ENV="production", SECRET_KEY=PLACEHOLDER_SECRET)

    def test_log_format_follows_environment(self) -> None:
        prod = Settings(_env_file=None, APP_ENV="production", SECRET_KEY="s3cret", LOG_JSON=None)
        dev = Settings(_env_file=None, APP_ENV="development", LOG_JSON=None)
        forced = Settings(_env_file=None, APP_ENV="development", LOG_JSON=True)

        self.assertTrue(prod.log_json)
        self.assertFalse(dev.log_json)
        self.assertTrue(forced.log_json)
