# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from src.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_api_base_url_is_http(self) -> None:
        """API_BASE_URL must be an absolute http(s) origin."""
        self.assertRegex(Settings.API_BASE_URL, r"^https?://")

    def test_revalidate_seconds_is_positive_int(self) -> None:
        """REVALIDATE_SECONDS must be a positive integer."""
        self.assertIsInstance(Settings.REVALIDATE_SECONDS, int)
        self.assertGreater(Settings.REVALIDATE_SECONDS, 0)

    def test_search_debounce_is_300ms(self) -> None:
        """Search input settles after 300 milliseconds."""
        self.assertEqual(Settings.SEARCH_DEBOUNCE_SECONDS, 0.3)

    def test_meta_description_length(self) -> None:
        """Meta descriptions are capped at 155 characters."""
        self.assertEqual(Settings.META_DESCRIPTION_LENGTH, 155)

    def test_discard_stale_is_bool(self) -> None:
        """The stale-fetch policy is a plain flag."""
        self.assertIsInstance(
            Settings.DISCARD_STALE_CATEGORY_RESULTS, bool
        )

    def test_impersonate_browser_is_string(self) -> None:
        """IMPERSONATE_BROWSER must be a non-empty string."""
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(len(Settings.IMPERSONATE_BROWSER) > 0)

    def test_default_headers_accept_json(self) -> None:
        """The client asks for JSON."""
        self.assertEqual(
            Settings.DEFAULT_HEADERS["Accept"], "application/json"
        )

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)


if __name__ == "__main__":
    unittest.main()
