"""Tests for logging configuration."""

import logging
import logging.handlers

import pytest
import structlog
from marketplace.utils.logging import (
    bind_actor,
    build_processors,
    clear_context,
    configure_logging,
    get_log_level,
)


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers, root.level = handlers, level
    clear_context()
    structlog.reset_defaults()


class TestLogLevel:
    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", "production")
        assert get_log_level() == "INFO"

        monkeypatch.setenv("PROTEAN_ENV", "development")
        assert get_log_level() == "DEBUG"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.setenv("LOG_LEVEL", "error")
        assert get_log_level() == "ERROR"


class TestRenderers:
    def test_json_in_production(self):
        assert isinstance(build_processors("production")[-1], structlog.processors.JSONRenderer)

    def test_console_elsewhere(self):
        assert isinstance(build_processors("development")[-1], structlog.dev.ConsoleRenderer)


class TestConfigureLogging:
    def test_file_handler_only_with_log_dir(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MARKETPLACE_LOG_DIR", raising=False)
        configure_logging()
        assert not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logging.getLogger().handlers)

        configure_logging(log_dir=str(tmp_path))
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logging.getLogger().handlers)
        assert (tmp_path / "marketplace.log").exists()

    def test_protean_logger_quietened(self):
        configure_logging()
        assert logging.getLogger("protean").level == logging.WARNING

    def test_actor_bound_to_context(self):
        clear_context()
        bind_actor(42, actor_role="admin")
        assert structlog.contextvars.get_contextvars() == {"actor_id": "42", "actor_role": "admin"}
