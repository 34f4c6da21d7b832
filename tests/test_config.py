"""Tests for the sport catalog and settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from surebet.config.constants import SportCategory, is_three_way_sport, sport_category
from surebet.config.settings import SchedulerSettings, Settings


@pytest.mark.parametrize(
    "key, category",
    [
        ("basketball_nba", SportCategory.BASKETBALL),
        ("soccer_epl", SportCategory.SOCCER),
        ("americanfootball_nfl", SportCategory.AMERICAN_FOOTBALL),
        ("soccer_netherlands_eredivisie", SportCategory.SOCCER),
        ("Soccer", SportCategory.SOCCER),
        ("tennis_atp_us_open", SportCategory.OTHER),
    ],
)
def test_sport_category(key, category):
    assert sport_category(key) == category


def test_three_way_sports():
    assert is_three_way_sport("soccer_epl")
    assert is_three_way_sport("Soccer")
    assert not is_three_way_sport("basketball_nba")
    assert not is_three_way_sport("Basketball")


def test_defaults(monkeypatch):
    monkeypatch.delenv("ODDS_API_KEY", raising=False)

    settings = Settings(_env_file=None)

    assert settings.odds_api.api_key == ""
    assert settings.odds_api.regions == ["eu"]
    assert settings.scheduler.interval_minutes == 60
    assert settings.scheduler.sports[0] == "basketball_nba"
    assert float(settings.arbitrage.default_investment) == 500


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ODDS_API_KEY", "from-env")
    monkeypatch.setenv("SYNC_INTERVAL_MINUTES", "15")

    settings = Settings(_env_file=None)

    assert settings.odds_api.api_key == "from-env"
    assert settings.scheduler.interval_minutes == 15


def test_interval_must_be_positive():
    with pytest.raises(ValidationError):
        SchedulerSettings(interval_minutes=0)


def test_setup_logging_creates_log_directory(tmp_path):
    from loguru import logger

    from surebet.utils.logging import setup_logging

    log_file = tmp_path / "logs" / "surebet.log"
    try:
        setup_logging("debug", str(log_file))
        assert log_file.parent.is_dir()
    finally:
        logger.remove()
