"""Configuration handling for the Reddit cache service."""

import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv


@dataclass
class RedditApiConfig:
    """Reddit JSON API settings."""

    base_url: str = "https://api.reddit.com"
    user_agent: str = "reddit_cache/0.1"
    timeout_sec: float = 30.0


@dataclass
class RedisConfig:
    """Redis connection configuration."""

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    db: int = 0
    socket_timeout_sec: float = 5.0


@dataclass
class RateLimitConfig:
    """Rate limiting configuration."""

    max_requests_per_minute: int = 60
    min_remaining_calls: int = 5
    sleep_buffer_sec: int = 2


@dataclass
class RetryConfig:
    """Exponential backoff settings for upstream requests."""

    max_retries: int = 3
    initial_backoff: float = 1.0
    max_backoff: float = 16.0
    backoff_factor: float = 2.0


@dataclass
class MonitoringConfig:
    """Monitoring configuration."""

    enable_prometheus: bool = False
    prometheus_port: int = 8000


def _apply_section(target: Any, values: Dict[str, Any]) -> None:
    known = {f.name for f in fields(target)}
    for key, value in values.items():
        if key in known:
            setattr(target, key, value)


@dataclass
class Config:
    """Application configuration combining environment variables and YAML config."""

    reddit: RedditApiConfig = field(default_factory=RedditApiConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    @classmethod
    def from_files(cls, config_path: Optional[str] = None, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from environment variables and an optional YAML file.

        Environment values are read first; keys present in the YAML file
        override them section by section.

        Args:
            config_path: Path to YAML configuration file (skipped if missing)
            env_path: Optional path to .env file (defaults to .env in current directory)

        Returns:
            Config instance with merged configuration
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        config = cls()

        config.reddit.base_url = os.getenv("REDDIT_API_BASE", config.reddit.base_url)
        config.reddit.user_agent = os.getenv("REDDIT_USER_AGENT", config.reddit.user_agent)

        config.redis.host = os.getenv("REDIS_HOST", config.redis.host)
        config.redis.port = int(os.getenv("REDIS_PORT", str(config.redis.port)))
        config.redis.password = os.getenv("REDIS_PASSWORD") or None
        config.redis.db = int(os.getenv("REDIS_DB", str(config.redis.db)))

        if config_path and os.path.exists(config_path):
            with open(config_path, "r", encoding="utf-8") as file:
                yaml_config = yaml.safe_load(file)

            if yaml_config:
                for section in ("reddit", "redis", "rate_limit", "retry", "monitoring"):
                    if isinstance(yaml_config.get(section), dict):
                        _apply_section(getattr(config, section), yaml_config[section])

        return config

    def validate(self) -> List[str]:
        """
        Validate configuration and return a list of validation errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.reddit.base_url:
            errors.append("REDDIT_API_BASE must not be empty")
        if not self.reddit.user_agent:
            errors.append("REDDIT_USER_AGENT must not be empty")

        if not self.redis.host:
            errors.append("REDIS_HOST must be specified")
        if self.redis.port <= 0:
            errors.append("REDIS_PORT must be a positive integer")

        if self.rate_limit.max_requests_per_minute <= 0:
            errors.append("rate_limit.max_requests_per_minute must be greater than 0")
        if self.retry.max_retries < 0:
            errors.append("retry.max_retries must not be negative")

        return errors
