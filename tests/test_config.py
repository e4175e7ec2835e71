"""Tests for environment parsing and logging setup."""

import logging
import sys

import pytest
from rich.console import Console
from rich.logging import RichHandler

from lookthrough import config
from lookthrough.utils.logging_config import EngineFormatter, configure_root_logger


class TestEnvParsing:
    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_flag_truthy(self, monkeypatch, raw):
        monkeypatch.setenv("LT_TEST_FLAG", raw)
        assert config._env_flag("LT_TEST_FLAG", False) is True

    def test_flag_default_and_falsy(self, monkeypatch):
        monkeypatch.delenv("LT_TEST_FLAG", raising=False)
        assert config._env_flag("LT_TEST_FLAG", True) is True
        monkeypatch.setenv("LT_TEST_FLAG", "off")
        assert config._env_flag("LT_TEST_FLAG", True) is False

    def test_float(self, monkeypatch):
        monkeypatch.setenv("LT_TEST_TIMEOUT", "2.5")
        assert config._env_float("LT_TEST_TIMEOUT", 10.0) == 2.5
        monkeypatch.setenv("LT_TEST_TIMEOUT", "soon")
        assert config._env_float("LT_TEST_TIMEOUT", 10.0) == 10.0
        monkeypatch.setenv("LT_TEST_TIMEOUT", "  ")
        assert config._env_float("LT_TEST_TIMEOUT", 10.0) == 10.0

    def test_bundled_catalog_dir_exists(self):
        assert (config.DEFAULT_CATALOG_DIR / "etf_constituents.json").is_file()


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for h in root.handlers[:]:
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


class TestLogging:
    def test_configure_installs_single_rich_handler(self, restore_root_logger):
        configure_root_logger(logging.DEBUG)
        configure_root_logger(logging.DEBUG)

        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0], RichHandler)
        assert restore_root_logger.level == logging.DEBUG

    def test_messages_reach_console(self, restore_root_logger):
        console = Console(record=True, width=200)
        configure_root_logger(console=console)

        logging.getLogger("lookthrough.test").info("hello engine")

        assert "LOOKTHROUGH lookthrough.test: hello engine" in console.export_text()

    def test_formatter_appends_traceback(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, None)
            record.exc_info = sys.exc_info()

        text = EngineFormatter().format(record)

        assert text.startswith("LOOKTHROUGH x: failed")
        assert "ValueError: boom" in text
