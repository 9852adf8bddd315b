"""Tests for the configuration module."""

import os
import tempfile
import unittest
from unittest.mock import patch

import yaml

from reddit_cache.config import Config

ENV_KEYS = (
    "REDDIT_API_BASE",
    "REDDIT_USER_AGENT",
    "REDIS_HOST",
    "REDIS_PORT",
    "REDIS_PASSWORD",
    "REDIS_DB",
)


class TestConfig(unittest.TestCase):
    """Test cases for the Config class."""

    def setUp(self):
        """Set up test environment."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_path = os.path.join(self.temp_dir.name, "config.yaml")
        self.env_path = os.path.join(self.temp_dir.name, ".env")

        self.sample_config = {
            "reddit": {"timeout_sec": 10},
            "rate_limit": {"max_requests_per_minute": 30, "sleep_buffer_sec": 1},
            "retry": {"max_retries": 5},
            "monitoring": {"enable_prometheus": True, "prometheus_port": 9100},
            "unknown_section": {"ignored": True},
        }
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(self.sample_config, f)

        with open(self.env_path, "w", encoding="utf-8") as f:
            f.write("REDIS_HOST=redis.internal\n")
            f.write("REDIS_PORT=6380\n")
            f.write("REDIS_PASSWORD=secret\n")
            f.write("REDDIT_USER_AGENT=test_user_agent\n")

        # load_dotenv never overrides variables that are already set
        self.env_patch = patch.dict(os.environ, {}, clear=False)
        self.env_patch.start()
        for key in ENV_KEYS:
            os.environ.pop(key, None)

    def tearDown(self):
        """Clean up test environment."""
        self.env_patch.stop()
        self.temp_dir.cleanup()

    def test_load_from_files(self):
        config = Config.from_files(self.config_path, self.env_path)

        self.assertEqual(config.redis.host, "redis.internal")
        self.assertEqual(config.redis.port, 6380)
        self.assertEqual(config.redis.password, "secret")
        self.assertEqual(config.reddit.user_agent, "test_user_agent")
        self.assertEqual(config.reddit.base_url, "https://api.reddit.com")

        self.assertEqual(config.reddit.timeout_sec, 10)
        self.assertEqual(config.rate_limit.max_requests_per_minute, 30)
        self.assertEqual(config.rate_limit.min_remaining_calls, 5)
        self.assertEqual(config.retry.max_retries, 5)
        self.assertTrue(config.monitoring.enable_prometheus)
        self.assertEqual(config.monitoring.prometheus_port, 9100)

    def test_yaml_overrides_environment(self):
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump({"redis": {"host": "from-yaml"}}, f)

        config = Config.from_files(self.config_path, self.env_path)

        self.assertEqual(config.redis.host, "from-yaml")
        self.assertEqual(config.redis.port, 6380)

    def test_missing_yaml_uses_defaults(self):
        config = Config.from_files(os.path.join(self.temp_dir.name, "missing.yaml"), self.env_path)

        self.assertEqual(config.reddit.timeout_sec, 30.0)
        self.assertFalse(config.monitoring.enable_prometheus)
        self.assertEqual(config.validate(), [])

    def test_empty_password_is_none(self):
        with open(self.env_path, "w", encoding="utf-8") as f:
            f.write("REDIS_PASSWORD=\n")

        config = Config.from_files(None, self.env_path)

        self.assertIsNone(config.redis.password)

    def test_validate(self):
        config = Config()
        self.assertEqual(config.validate(), [])

        config.reddit.user_agent = ""
        config.redis.host = ""
        config.rate_limit.max_requests_per_minute = 0
        config.retry.max_retries = -1

        errors = config.validate()
        self.assertEqual(len(errors), 4)
        self.assertIn("REDDIT_USER_AGENT must not be empty", errors)
        self.assertIn("REDIS_HOST must be specified", errors)


if __name__ == "__main__":
    unittest.main()
