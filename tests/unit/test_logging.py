"""Unit tests for femtologging integration helpers."""

from __future__ import annotations

import pytest

from appshelf.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
    normalize_log_level,
)


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message


@pytest.mark.parametrize(
    ("raw", "expected", "invalid"),
    [
        ("debug", "DEBUG", False),
        (" Warn ", "WARN", False),
        (None, "INFO", True),
        ("   ", "INFO", True),
        ("loud", "INFO", True),
    ],
)
def test_normalize_log_level(raw: str | None, expected: str, *, invalid: bool) -> None:
    """Levels are upper-cased and unknown values fall back to INFO."""
    assert normalize_log_level(raw) == (expected, invalid)


def test_helpers_format_and_tag_levels() -> None:
    """Each helper interpolates arguments and emits its own level."""
    logger = _FakeLogger()

    log_debug(logger, "probe %s", "a")
    log_info(logger, "cloned %s", "b")
    log_warning(logger, "skipped %s after %ds", "c", 30)
    log_error(logger, "removed %s", "d")

    assert logger.calls == [
        ("DEBUG", "probe a", None, False),
        ("INFO", "cloned b", None, False),
        ("WARNING", "skipped c after 30s", None, False),
        ("ERROR", "removed d", None, False),
    ]


def test_message_without_args_is_not_interpolated() -> None:
    """Literal percent signs survive when no arguments are given."""
    logger = _FakeLogger()
    log_info(logger, "100% done")
    assert logger.calls == [("INFO", "100% done", None, False)]


def test_log_exception_attaches_exc_info() -> None:
    """log_exception forwards the exception payload."""
    logger = _FakeLogger()
    exc = RuntimeError("boom")

    log_exception(logger, "failed 50% of the time", exc)

    assert logger.calls == [("ERROR", "failed 50% of the time", exc, False)]


def test_configure_logging_passes_normalized_level(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """configure_logging hands the normalized level to femtologging."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("appshelf.logging.basicConfig", fake_basic_config)

    assert configure_logging("nope") == ("INFO", True)
    assert captured == {"level": "INFO", "force": False}
