"""
Tests for logging setup.
"""
import json
import logging

import pytest

from shortlinks_app.logging_config import ROOT_LOGGER, build_formatter, setup_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    package_logger = logging.getLogger(ROOT_LOGGER)
    level = package_logger.level
    yield
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()
    package_logger.setLevel(level)


class TestSetupLogging:
    """Handlers attached to the package logger"""

    def test_level_and_console_handler(self):
        package_logger = setup_logging("debug")

        assert package_logger.name == ROOT_LOGGER
        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0], logging.StreamHandler)

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("chatty").level == logging.INFO

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging()
        package_logger = setup_logging()

        assert len(package_logger.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "shortlinks.log"
        package_logger = setup_logging("INFO", log_file=str(log_file))

        logging.getLogger("shortlinks_app.services.url_service").info("Created %s", "abc123")
        for handler in package_logger.handlers:
            handler.flush()

        assert len(package_logger.handlers) == 2
        assert "Created abc123" in log_file.read_text()


class TestFormatters:
    """Text and JSON record layouts"""

    def _record(self):
        return logging.LogRecord(
            "shortlinks_app.web", logging.INFO, __file__, 1, "Status: %d", (302,), None
        )

    def test_json_lines_parse(self):
        line = build_formatter(json_format=True).format(self._record())

        payload = json.loads(line)
        assert payload["level"] == "INFO"
        assert payload["logger"] == "shortlinks_app.web"
        assert payload["message"] == "Status: 302"

    def test_text_layout(self):
        line = build_formatter().format(self._record())

        assert line.endswith("[INFO] shortlinks_app.web - Status: 302")
