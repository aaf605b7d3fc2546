import unittest
from pathlib import Path

from navkit.environment import NavSettings, RuntimeEnvironment, load_settings


class TestLoadSettings(unittest.TestCase):
    def test_defaults(self):
        """Empty environment should give development defaults"""
        settings = load_settings({})
        self.assertEqual(settings.environment, RuntimeEnvironment.DEVELOPMENT)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.cache_default_ttl, 3600)
        self.assertEqual(settings.cache_sweep_interval, 300.0)
        self.assertEqual(settings.storage.upload_root, Path("public") / "uploads")
        self.assertEqual(settings.storage.url_prefix, "/uploads")
        self.assertEqual(settings.site_info.page_attempts, 3)

    def test_production_log_level(self):
        """Production should log warnings and above unless overridden"""
        settings = load_settings({"NAV_ENV": "Production"})
        self.assertEqual(settings.environment, RuntimeEnvironment.PRODUCTION)
        self.assertEqual(settings.log_level, "WARNING")

        settings = load_settings({"NAV_ENV": "production", "NAV_LOG_LEVEL": "info"})
        self.assertEqual(settings.log_level, "INFO")

    def test_unknown_environment_falls_back(self):
        with self.assertLogs("navkit.environment.settings", level="WARNING"):
            settings = load_settings({"NAV_ENV": "staging"})
        self.assertEqual(settings.environment, RuntimeEnvironment.DEVELOPMENT)

    def test_storage_overrides(self):
        env = {"NAV_UPLOAD_ROOT": "/srv/nav/uploads", "NAV_UPLOAD_URL_PREFIX": "static/uploads/"}
        settings = load_settings(env)
        self.assertEqual(settings.storage.upload_root, Path("/srv/nav/uploads"))
        self.assertEqual(settings.storage.url_prefix, "/static/uploads")

    def test_user_agent_override(self):
        settings = load_settings({"NAV_USER_AGENT": "navbot/1.0"})
        self.assertEqual(settings.site_info.user_agent, "navbot/1.0")

    def test_cache_numbers(self):
        env = {"NAV_CACHE_DEFAULT_TTL": "120", "NAV_CACHE_SWEEP_INTERVAL": "2.5"}
        settings = load_settings(env)
        self.assertEqual(settings.cache_default_ttl, 120)
        self.assertEqual(settings.cache_sweep_interval, 2.5)

    def test_bad_numbers_use_defaults(self):
        """Malformed or non-positive numbers should be ignored with a warning"""
        env = {"NAV_CACHE_DEFAULT_TTL": "soon", "NAV_CACHE_SWEEP_INTERVAL": "-1"}
        with self.assertLogs("navkit.environment.settings", level="WARNING") as logs:
            settings = load_settings(env)
        self.assertEqual(len(logs.records), 2)
        self.assertEqual(settings.cache_default_ttl, 3600)
        self.assertEqual(settings.cache_sweep_interval, 300.0)

    def test_settings_are_independent(self):
        first = load_settings({"NAV_UPLOAD_ROOT": "/a"})
        second = load_settings({})
        self.assertNotEqual(first.storage.upload_root, second.storage.upload_root)
        self.assertIsInstance(NavSettings(), NavSettings)


if __name__ == "__main__":
    unittest.main()
