"""Command-line interface for the Reddit cache."""

import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import typer
from typing_extensions import Annotated

from reddit_cache.app import RedditCacheApp
from reddit_cache.cache.redis_cache import ttl_for_mode
from reddit_cache.client.reddit_client import random_default_user_icon
from reddit_cache.config import Config
from reddit_cache.exceptions import RedditCacheError

app = typer.Typer(help="Reddit cache - index-addressable access to subreddit feeds")

logger = logging.getLogger(__name__)

T = TypeVar("T")

ConfigOption = Annotated[str, typer.Option("--config", "-c", help="Path to YAML config file")]
EnvOption = Annotated[Optional[str], typer.Option("--env-file", help="Path to .env file")]
LogLevelOption = Annotated[str, typer.Option("--log-level", help="Logging level")]
LogFileOption = Annotated[Optional[str], typer.Option("--log-file", help="Also log to this file")]


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a rotating log file
    """
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "standard",
            "filename": log_file,
            "maxBytes": 10485760,  # 10 MB
            "backupCount": 5,
            "encoding": "utf8",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers),
                "level": log_level,
                "propagate": True,
            },
            "asyncio": {"level": "WARNING"},
            "aiohttp": {"level": "WARNING"},
        },
    })


def load_config(config_path: str, env_path: Optional[str]) -> Config:
    """Load and validate configuration, exiting with status 1 on errors."""
    config = Config.from_files(config_path, env_path)
    errors = config.validate()
    if errors:
        for error in errors:
            typer.echo(f"Config error: {error}", err=True)
        raise typer.Exit(code=1)
    return config


def run_with_app(config: Config, func: Callable[[RedditCacheApp], Awaitable[T]]) -> T:
    """Start the application, await ``func(app)`` and always stop it again."""
    async def runner() -> T:
        async with RedditCacheApp(config) as cache_app:
            return await func(cache_app)

    return asyncio.run(runner())


@app.command()
def item(
    subreddit: Annotated[str, typer.Argument(help="Subreddit name")],
    mode: Annotated[str, typer.Argument(help="Sort mode (hot, new, day, ...)")],
    index: Annotated[int, typer.Argument(min=0, help="Zero-based feed index")],
    config: ConfigOption = "config.yaml",
    env_file: EnvOption = None,
    log_level: LogLevelOption = "WARNING",
    log_file: LogFileOption = None,
) -> None:
    """Print the submission at INDEX of r/SUBREDDIT sorted by MODE as JSON."""
    setup_logging(log_level, log_file)
    cfg = load_config(config, env_file)

    try:
        submission = run_with_app(
            cfg, lambda cache_app: cache_app.cache.get_item_at_index(subreddit, mode, index)
        )
    except RedditCacheError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    if submission is None:
        typer.echo(f"No submission at index {index} of r/{subreddit}/{mode}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(submission, indent=2))


@app.command("user-icon")
def user_icon(
    name: Annotated[str, typer.Argument(help="Reddit user name")],
    cache_only: Annotated[bool, typer.Option("--cache-only", help="Do not call Reddit")] = False,
    fallback: Annotated[bool, typer.Option("--fallback", help="Print a default avatar if none found")] = False,
    config: ConfigOption = "config.yaml",
    env_file: EnvOption = None,
    log_level: LogLevelOption = "WARNING",
    log_file: LogFileOption = None,
) -> None:
    """Print the icon URL of a Reddit user."""
    setup_logging(log_level, log_file)
    cfg = load_config(config, env_file)

    icon = run_with_app(cfg, lambda cache_app: cache_app.cache.get_author_icon(name, cache_only))
    if icon is None and fallback:
        icon = random_default_user_icon()
    if icon is None:
        typer.echo(f"No icon found for u/{name}", err=True)
        raise typer.Exit(code=1)
    typer.echo(icon)


@app.command("subreddit-icon")
def subreddit_icon(
    name: Annotated[str, typer.Argument(help="Subreddit name")],
    cache_only: Annotated[bool, typer.Option("--cache-only", help="Do not call Reddit")] = False,
    config: ConfigOption = "config.yaml",
    env_file: EnvOption = None,
    log_level: LogLevelOption = "WARNING",
    log_file: LogFileOption = None,
) -> None:
    """Print the icon URL of a subreddit."""
    setup_logging(log_level, log_file)
    cfg = load_config(config, env_file)

    icon = run_with_app(cfg, lambda cache_app: cache_app.cache.get_subreddit_icon(name, cache_only))
    if icon is None:
        typer.echo(f"No icon found for r/{name}", err=True)
        raise typer.Exit(code=1)
    typer.echo(icon)


@app.command()
def ttl(mode: Annotated[str, typer.Argument(help="Sort mode")]) -> None:
    """Print how many seconds listing pages of MODE stay cached."""
    typer.echo(str(ttl_for_mode(mode)))


@app.command("default-icon")
def default_icon() -> None:
    """Print a random default avatar URL."""
    typer.echo(random_default_user_icon())


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
