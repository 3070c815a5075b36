import logging
from pathlib import Path

import pytest

from budget_categorizer.logger import ColourizedFormatter, get_logging_config, resolve_log_level


def test_resolve_log_level() -> None:
    assert resolve_log_level("debug") == "DEBUG"
    assert resolve_log_level(" warning ") == "WARNING"
    assert resolve_log_level("verbose") == "INFO"
    assert resolve_log_level(None) == "INFO"


def test_debug_level_applies_to_engine_only(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.delenv("LOG_DIR", raising=False)
    loggers = get_logging_config()["loggers"]

    assert loggers["budget_categorizer"]["level"] == "DEBUG"
    assert loggers[""]["level"] == "INFO"
    assert loggers[""]["handlers"] == ["console"]


def test_log_dir_adds_file_handler(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("LOG_DIR", str(log_dir))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    config = get_logging_config()

    assert log_dir.is_dir()
    assert config["handlers"]["file"]["filename"] == str(log_dir / "app.log")
    assert config["loggers"][""]["level"] == "WARNING"
    assert config["loggers"]["uvicorn.access"]["handlers"] == ["console", "file"]


def test_colourized_formatter_leaves_record_untouched() -> None:
    record = logging.LogRecord("budget_categorizer.test", logging.WARNING, __file__, 1, "hello", None, None)
    output = ColourizedFormatter("%(levelname)s %(message)s").format(record)

    assert "\x1b[33mWARNING\x1b[0m hello" == output
    assert record.levelname == "WARNING"
