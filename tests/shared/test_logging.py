"""Tests for the shared structlog setup."""

import logging
import logging.handlers

import pytest
import structlog
from shared.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    configure_logging()
    root.handlers, root.level = handlers, level


def _renderer():
    return structlog.get_config()["processors"][-1]


def test_development_renders_to_console(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_DIR", raising=False)

    configure_logging()

    assert isinstance(_renderer(), structlog.dev.ConsoleRenderer)
    assert logging.getLogger().level == logging.DEBUG


def test_production_renders_json(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    configure_logging()

    assert isinstance(_renderer(), structlog.processors.JSONRenderer)
    assert logging.getLogger().level == logging.INFO


def test_log_level_override(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")

    configure_logging()

    assert logging.getLogger().level == logging.ERROR


def test_log_dir_adds_rotating_file(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))

    configure_logging()

    files = [h for h in logging.getLogger().handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(files) == 1
    assert files[0].baseFilename == str(tmp_path / "logs" / "foodhub.log")
    files[0].close()


def test_get_logger_binds_key_values(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "test")
    configure_logging()

    logger = get_logger("ordering.test").bind(order_id="o-1")

    assert structlog.is_configured()
    logger.warning("Bound logger works", human_code="UBF-2026-000001-abcd")
