"""Tests for logging configuration."""

import logging

import pytest

from expense_ledger.config import AppSettings, get_settings
from expense_ledger.log import configure_logging


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    get_settings.cache_clear()
    yield
    monkeypatch.undo()
    get_settings.cache_clear()
    configure_logging()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level_from_settings(self):
        configure_logging(AppSettings(log_level="warning"))
        assert logging.getLogger("expense_ledger").level == logging.WARNING

    def test_debug_mode_forces_debug_level(self):
        configure_logging(AppSettings(log_level="ERROR", debug_mode=True))
        assert logging.getLogger("expense_ledger").level == logging.DEBUG

    def test_invalid_log_level_falls_back_to_info(self, monkeypatch):
        """An unknown LOG_LEVEL warns and keeps the defaults instead of raising."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        with pytest.warns(UserWarning, match="Invalid logging settings"):
            configure_logging()

        assert logging.getLogger("expense_ledger").level == logging.INFO
