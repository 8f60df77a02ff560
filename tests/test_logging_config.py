"""
Tests for logging setup — level resolution and handlers.
"""

import logging
from pathlib import Path

from onsystem.core.observability.logging_config import (
    resolve_level,
    setup_logging,
    setup_logging_from_env,
)


class TestResolveLevel:

    def test_flags_win(self):
        env = {"ONSYSTEM_LOG_LEVEL": "ERROR"}
        assert resolve_level(debug=True, environ=env) == "DEBUG"
        assert resolve_level(verbose=True, environ=env) == "INFO"
        assert resolve_level(quiet=True, environ={}) == "ERROR"

    def test_env_then_default(self):
        assert resolve_level(environ={"ONSYSTEM_LOG_LEVEL": "INFO"}) == "INFO"
        assert resolve_level(environ={}) == "WARNING"


class TestSetupLogging:

    def test_console_level(self, restore_root_logger):
        setup_logging("INFO")
        assert restore_root_logger.level == logging.INFO
        assert len(restore_root_logger.handlers) == 1

    def test_unknown_level_falls_back(self, restore_root_logger):
        setup_logging("LOUD")
        assert restore_root_logger.level == logging.WARNING

    def test_file_handler(self, restore_root_logger, tmp_path: Path):
        log_file = tmp_path / "onsystem.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        assert restore_root_logger.level == logging.DEBUG

        logging.getLogger("onsystem.test").debug("to the file only")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "to the file only" in log_file.read_text()

    def test_third_party_quieted(self, restore_root_logger):
        logging.getLogger("yaml").setLevel(logging.NOTSET)
        setup_logging("INFO")
        assert logging.getLogger("yaml").level == logging.WARNING

    def test_from_env(self, restore_root_logger, tmp_path: Path):
        log_file = tmp_path / "env.log"
        setup_logging_from_env("ERROR", environ={"ONSYSTEM_LOG_FILE": str(log_file)})
        assert restore_root_logger.level == logging.ERROR
        assert any(isinstance(h, logging.FileHandler) for h in restore_root_logger.handlers)
