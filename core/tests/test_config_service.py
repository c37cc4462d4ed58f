"""
core/tests/test_config_service.py

Layer precedence of ConfigService: embedded < defaults.ini < env < user ini.
Uses unittest to avoid external test dependencies.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from core.config.config_service import ConfigService


class TestConfigService(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.no_user_ini = self.tmp / "missing.ini"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults(self) -> None:
        cfg = ConfigService(environ={}, user_ini=self.no_user_ini)
        self.assertEqual(cfg.io.retry_attempts, 3)
        self.assertEqual(cfg.io.retry_delay_seconds, 5.0)
        self.assertTrue(cfg.io.compress)
        self.assertEqual(cfg.logging.level, "INFO")
        self.assertEqual(cfg.logging.run_log_db, "")
        self.assertEqual(cfg.files.settings_json, Path("appsettings.json"))

    def test_env_overrides_defaults(self) -> None:
        environ = {
            "PDFENVELOPE_APP_IO__RETRY_ATTEMPTS": "7",
            "PDFENVELOPE_APP_IO__COMPRESS": "no",
            "PDFENVELOPE_APP_LOGGING__LEVEL": "DEBUG",
            "PDFENVELOPE_COVERPAGE__TITLE": "not for us",
        }
        cfg = ConfigService(environ=environ, user_ini=self.no_user_ini)
        self.assertEqual(cfg.io.retry_attempts, 7)
        self.assertFalse(cfg.io.compress)
        self.assertEqual(cfg.logging.level, "DEBUG")
        self.assertEqual(cfg.files.settings_json, Path("appsettings.json"))

    def test_user_ini_wins(self) -> None:
        user_ini = self.tmp / "config.ini"
        user_ini.write_text("[Io]\nretry_attempts = 1\n\n[Files]\nsettings_json = custom.json\n",
                            encoding="utf-8")
        environ = {"PDFENVELOPE_APP_IO__RETRY_ATTEMPTS": "7"}
        cfg = ConfigService(environ=environ, user_ini=user_ini)
        self.assertEqual(cfg.io.retry_attempts, 1)
        self.assertEqual(cfg.files.settings_json, Path("custom.json"))

    def test_defaults_ini_overrides_embedded(self) -> None:
        ini = self.tmp / "defaults.ini"
        ini.write_text("[Io]\nretry_delay_seconds = 0.5\ncompress = false\n", encoding="utf-8")
        cfg = ConfigService(environ={}, defaults_ini=ini, user_ini=self.no_user_ini)
        self.assertEqual(cfg.io.retry_delay_seconds, 0.5)
        self.assertFalse(cfg.io.compress)
        self.assertEqual(cfg.io.retry_attempts, 3)

    def test_reload_picks_up_changes(self) -> None:
        environ: dict[str, str] = {}
        cfg = ConfigService(environ=environ, user_ini=self.no_user_ini)
        environ["PDFENVELOPE_APP_LOGGING__RUN_LOG_DB"] = "runs.db"
        cfg.reload()
        self.assertEqual(cfg.logging.run_log_db, "runs.db")


if __name__ == "__main__":
    unittest.main()
