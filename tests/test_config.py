"""Tests for configuration and logging setup."""

import logging

import pytest

from elimina.config import Config
from elimina.constants import RankingConstants
from elimina.utils.logger import setup_logger


class TestConfig:
    def test_defaults_are_valid(self):
        Config.validate()
        assert Config.LOG_TO_FILE is False

    def test_best_dates_count(self):
        assert RankingConstants.BEST_DATES_COUNT == Config.TOTAL_DATES_PER_TOURNAMENT - 2

    def test_missing_database_url(self, monkeypatch):
        monkeypatch.setattr(Config, 'DATABASE_URL', '')
        with pytest.raises(ValueError, match="DATABASE_URL"):
            Config.validate()

    def test_non_positive_dates(self, monkeypatch):
        monkeypatch.setattr(Config, 'TOTAL_DATES_PER_TOURNAMENT', 0)
        with pytest.raises(ValueError, match="TOTAL_DATES_PER_TOURNAMENT"):
            Config.validate()


class TestLogger:
    def test_handlers_added_once(self):
        first = setup_logger("elimina.tests.logger")
        second = setup_logger("elimina.tests.logger")
        assert first is second
        assert len(first.handlers) == 1
        assert isinstance(first.handlers[0], logging.StreamHandler)
