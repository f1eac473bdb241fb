import io
import logging

import pytest

from pico_throttle.logging import DEFAULT_FORMAT, configure_logging, get_logger


class TestGetLogger:
    def test_returns_logger(self):
        logger = get_logger("test")
        assert isinstance(logger, logging.Logger)

    def test_adds_pico_throttle_prefix(self):
        logger = get_logger("mymodule")
        assert logger.name == "pico_throttle.mymodule"

    def test_preserves_existing_prefix(self):
        logger = get_logger("pico_throttle.scheduler")
        assert logger.name == "pico_throttle.scheduler"


class TestConfigureLogging:
    def teardown_method(self):
        root_logger = logging.getLogger("pico_throttle")
        root_logger.handlers.clear()
        root_logger.setLevel(logging.NOTSET)

    def test_sets_log_level(self):
        configure_logging(level=logging.DEBUG)
        assert logging.getLogger("pico_throttle").level == logging.DEBUG

    @pytest.mark.parametrize("name, expected", [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("warn", logging.WARNING)])
    def test_accepts_level_names(self, name, expected):
        configure_logging(level=name)
        assert logging.getLogger("pico_throttle").level == expected

    def test_does_not_duplicate_handlers(self):
        configure_logging()
        configure_logging()
        configure_logging()
        assert len(logging.getLogger("pico_throttle").handlers) == 1

    def test_default_format_applied(self):
        stream = io.StringIO()
        configure_logging(level=logging.INFO, handler=logging.StreamHandler(stream))

        get_logger("scheduler").info("2 running, 5 queued")

        output = stream.getvalue()
        assert "INFO" in output
        assert "pico_throttle.scheduler" in output
        assert "2 running, 5 queued" in output

    def test_child_loggers_inherit_level(self):
        configure_logging(level=logging.WARNING)
        assert get_logger("child.module").getEffectiveLevel() == logging.WARNING


class TestDefaultFormat:
    def test_format_string_components(self):
        assert "%(asctime)s" in DEFAULT_FORMAT
        assert "%(levelname)" in DEFAULT_FORMAT
        assert "%(name)s" in DEFAULT_FORMAT
        assert "%(message)s" in DEFAULT_FORMAT
