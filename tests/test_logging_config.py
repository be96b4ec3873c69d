"""Tests for logging setup."""

import logging

from graphkeeper.logging_config import ROOT_LOGGER, get_logger, setup_logging


class TestGetLogger:
    def test_namespaced_under_package(self):
        assert get_logger("watcher").name == "graphkeeper.watcher"

    def test_package_names_kept(self):
        assert get_logger("graphkeeper.cache").name == "graphkeeper.cache"

    def test_root(self):
        assert get_logger().name == ROOT_LOGGER


class TestSetupLogging:
    def test_levels(self, package_logger):
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging(quiet=True).level == logging.ERROR
        assert setup_logging(verbose=True, quiet=True).level == logging.ERROR
        assert setup_logging().level == logging.WARNING

    def test_verbosity_overrides_flags(self, package_logger):
        assert setup_logging(verbose=True, verbosity="quiet").level == logging.ERROR
        assert setup_logging(verbosity="verbose").level == logging.DEBUG
        assert setup_logging(quiet=True, verbosity="normal").level == logging.WARNING

    def test_repeat_calls_replace_handlers(self, package_logger):
        setup_logging()
        count = len(package_logger.handlers)

        setup_logging(verbose=True)

        assert len(package_logger.handlers) == count

    def test_log_file(self, package_logger, tmp_path):
        log_file = tmp_path / "graphkeeper.log"
        setup_logging()

        setup_logging(verbose=True, log_file=str(log_file))
        get_logger("test").debug("hello file")
        for handler in package_logger.handlers:
            handler.flush()

        assert "hello file" in log_file.read_text()
