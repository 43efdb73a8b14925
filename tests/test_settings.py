"""Settings file parsing tests."""

import json
import os
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

from settings import DEFAULT_POLL_INTERVAL, RepositorySettings, SettingsError, load_settings


class SettingsTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "gh-univiewer.json"
        env = {k: v for k, v in os.environ.items() if k != "GITHUB_TOKEN"}
        self.env = mock.patch.dict(os.environ, env, clear=True)
        self.env.start()

    def tearDown(self):
        self.env.stop()
        self.tmpdir.cleanup()

    def _write(self, payload):
        self.path.write_text(json.dumps(payload), encoding="utf-8")
        return str(self.path)

    def test_load_full_settings(self):
        settings = load_settings(self._write({
            "github_token": "abc",
            "poll_interval": 60,
            "repositories": [
                {"user": "octo", "name": "grid", "labels": ["bug"], "since": "2024-05-01"},
                {"user": "octo", "name": "other"},
            ],
        }))
        self.assertEqual(settings.github_token, "abc")
        self.assertEqual(settings.poll_interval, 60.0)
        self.assertEqual([r.full_name for r in settings.repositories], ["octo/grid", "octo/other"])
        self.assertEqual(settings.repositories[0].labels, ["bug"])
        self.assertEqual(settings.repositories[0].closed_since_date(),
                         datetime(2024, 5, 1, tzinfo=timezone.utc))
        self.assertIsNone(settings.repositories[1].closed_since_date())

    def test_default_poll_interval(self):
        settings = load_settings(self._write({
            "github_token": "abc",
            "repositories": [{"user": "octo", "name": "grid"}],
        }))
        self.assertEqual(settings.poll_interval, DEFAULT_POLL_INTERVAL)

    def test_environment_token_overrides_file(self):
        os.environ["GITHUB_TOKEN"] = "from-env"
        settings = load_settings(self._write({
            "github_token": "abc",
            "repositories": [{"user": "octo", "name": "grid"}],
        }))
        self.assertEqual(settings.github_token, "from-env")

    def test_missing_file(self):
        with self.assertRaises(SettingsError):
            load_settings(str(Path(self.tmpdir.name) / "missing.json"))

    def test_invalid_json(self):
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(SettingsError):
            load_settings(str(self.path))

    def test_missing_token(self):
        with self.assertRaises(SettingsError):
            load_settings(self._write({"repositories": [{"user": "octo", "name": "grid"}]}))

    def test_repository_needs_user_and_name(self):
        with self.assertRaises(SettingsError):
            load_settings(self._write({"github_token": "abc", "repositories": [{"user": "octo"}]}))

    def test_no_repositories(self):
        with self.assertRaises(SettingsError):
            load_settings(self._write({"github_token": "abc", "repositories": []}))

    def test_bad_since(self):
        with self.assertRaises(SettingsError):
            load_settings(self._write({
                "github_token": "abc",
                "repositories": [{"user": "octo", "name": "grid", "since": "last week"}],
            }))

    def test_non_numeric_poll_interval(self):
        with self.assertRaises(SettingsError):
            load_settings(self._write({
                "github_token": "abc",
                "poll_interval": "often",
                "repositories": [{"user": "octo", "name": "grid"}],
            }))

    def test_full_name(self):
        self.assertEqual(RepositorySettings("octo", "grid").full_name, "octo/grid")


if __name__ == "__main__":
    unittest.main()
