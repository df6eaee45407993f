import logging

import pytest

from mybasic.mybasic_config import (
    DEFAULT_BANNER,
    DEFAULT_PROMPT,
    Settings,
    configure_logging,
    parse_log_level,
    parse_timeout,
)


def test_defaults() -> None:
    s = Settings.from_env({})
    assert s.banner == DEFAULT_BANNER == "My-BASIC 1.0"
    assert s.prompt == DEFAULT_PROMPT
    assert s.log_level == "WARNING"
    assert s.input_timeout is None


def test_from_env() -> None:
    s = Settings.from_env(
        {
            "MYBASIC_BANNER": "HELLO",
            "MYBASIC_PROMPT": "] ",
            "MYBASIC_LOG_LEVEL": "debug",
            "MYBASIC_INPUT_TIMEOUT": "2.5",
        }
    )
    assert s == Settings(banner="HELLO", prompt="] ", log_level="DEBUG", input_timeout=2.5)


def test_from_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MYBASIC_PROMPT", "$ ")
    assert Settings.from_env().prompt == "$ "


def test_empty_timeout_means_none() -> None:
    assert Settings.from_env({"MYBASIC_INPUT_TIMEOUT": ""}).input_timeout is None


@pytest.mark.parametrize("raw", ["soon", "0", "-1"])  # type: ignore[misc]
def test_bad_timeout(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_timeout(raw)


def test_bad_log_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        Settings.from_env({"MYBASIC_LOG_LEVEL": "LOUD"})


def test_parse_log_level() -> None:
    assert parse_log_level(" info ") == "INFO"


def test_override_ignores_none() -> None:
    s = Settings().override(prompt=None, input_timeout=3.0)
    assert s.prompt == DEFAULT_PROMPT
    assert s.input_timeout == 3.0


def test_configure_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    configure_logging(Settings(log_level="DEBUG"))
    assert calls[0]["level"] == "DEBUG"
