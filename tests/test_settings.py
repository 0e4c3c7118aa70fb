"""Settings file handling and logging configuration."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from armory.engine.logger import ChannelLogger, DEFAULT_CHANNELS, LoggerConfig
from armory.engine.settings import DEFAULT_INITIAL_WEAPON, Settings
from armory.engine.telemetry import FiringTelemetry, LOG_INTERVAL_SECONDS


def test_missing_settings_file_uses_defaults(tmp_path: Path) -> None:
    settings = Settings.load(tmp_path / "absent.json")
    assert settings.initial_weapon == DEFAULT_INITIAL_WEAPON
    assert settings.starting_currency == 0
    assert settings.sim_hz == 60.0


def test_settings_file_values(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "resolution": [1024, 768],
                "simHz": 120,
                "startingCurrency": 300,
                "startingScore": -4,
                "initialWeapon": "laser",
            }
        )
    )
    settings = Settings.load(path)
    assert settings.resolution == [1024, 768]
    assert settings.sim_hz == 120.0
    assert settings.starting_currency == 300
    assert settings.starting_score == 0
    assert settings.initial_weapon == "laser"


def test_unreadable_settings_fall_back(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("not json")
    assert Settings.load(path) == Settings()
    path.write_text("[1, 2]")
    assert Settings.load(path) == Settings()


def test_logger_config_from_settings(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"logLevel": "debug", "logChannels": {"input": True, "economy": False}}))
    config = LoggerConfig.from_settings(path)
    assert config.level == logging.DEBUG
    assert config.channels["input"] is True
    assert config.channels["economy"] is False
    assert config.channels["weapons"] is DEFAULT_CHANNELS["weapons"]


def test_disabled_channel_suppresses_info_but_not_errors(caplog) -> None:
    channel = ChannelLogger("weapons", logging.getLogger("armory.test_channel"), False)
    with caplog.at_level(logging.DEBUG, logger="armory.test_channel"):
        channel.info("hidden")
        channel.warning("hidden too")
        channel.error("visible")
    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["visible"]


def test_telemetry_logs_on_interval(caplog) -> None:
    channel = ChannelLogger("telemetry", logging.getLogger("armory.test_telemetry"), True)
    telemetry = FiringTelemetry()
    telemetry.record_shot("bullet")
    telemetry.record_denied("bullet")
    with caplog.at_level(logging.INFO, logger="armory.test_telemetry"):
        telemetry.advance_time(LOG_INTERVAL_SECONDS / 2, channel)
        assert caplog.records == []
        telemetry.advance_time(LOG_INTERVAL_SECONDS / 2, channel)
    assert len(caplog.records) == 1
    assert telemetry.snapshot().denial_rate() == 0.5
    telemetry.reset()
    assert telemetry.snapshot().total_shots == 0


def test_malformed_resolution_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    for resolution in (800, ["wide", 600], [640]):
        path.write_text(json.dumps({"resolution": resolution, "simHz": 30}))
        settings = Settings.load(path)
        assert settings.resolution == [800, 600]
        assert settings.sim_hz == 30.0
