"""
Runtime settings for the My-BASIC REPL and CLI.

Settings come from ``MYBASIC_*`` environment variables and can be overridden
by command-line flags:

    MYBASIC_BANNER         Greeting printed when the REPL starts.
    MYBASIC_PROMPT         Prompt shown while reading commands.
    MYBASIC_LOG_LEVEL      Logging level name (DEBUG, INFO, WARNING, ...).
    MYBASIC_INPUT_TIMEOUT  Seconds an INPUT waits before the run is stopped.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

DEFAULT_BANNER = "My-BASIC 1.0"
DEFAULT_PROMPT = "> "


@dataclass(frozen=True)
class Settings:
    banner: str = DEFAULT_BANNER
    prompt: str = DEFAULT_PROMPT
    log_level: str = "WARNING"
    input_timeout: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``environ`` (``os.environ`` by default).

        Raises:
            ValueError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        if "MYBASIC_BANNER" in env:
            values["banner"] = env["MYBASIC_BANNER"]
        if "MYBASIC_PROMPT" in env:
            values["prompt"] = env["MYBASIC_PROMPT"]
        if "MYBASIC_LOG_LEVEL" in env:
            values["log_level"] = parse_log_level(env["MYBASIC_LOG_LEVEL"])
        if env.get("MYBASIC_INPUT_TIMEOUT"):
            values["input_timeout"] = parse_timeout(env["MYBASIC_INPUT_TIMEOUT"])
        return cls(**values)

    def override(self, **changes: Any) -> "Settings":
        """Return a copy with every non-None value in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def parse_log_level(name: str) -> str:
    level = name.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level


def parse_timeout(raw: str) -> float:
    try:
        seconds = float(raw)
    except ValueError:
        raise ValueError(f"Invalid input timeout: {raw!r}") from None
    if seconds <= 0:
        raise ValueError(f"Input timeout must be positive, got {raw!r}")
    return seconds


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = [
    "DEFAULT_BANNER",
    "DEFAULT_PROMPT",
    "Settings",
    "configure_logging",
    "parse_log_level",
    "parse_timeout",
]
