"""Armory logging: per-subsystem channels that can be switched on and off."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

LOGGER_PREFIX = "armory"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

DEFAULT_CHANNELS = {
    "weapons": True,
    "economy": True,
    "powerups": True,
    "input": False,
    "telemetry": False,
}


def _channel_logger_name(channel: str) -> str:
    return f"{LOGGER_PREFIX}.{channel}"


@dataclass
class LoggerConfig:
    """Level and channel toggles, usually read from ``settings.json``."""

    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=lambda: DEFAULT_CHANNELS.copy())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoggerConfig":
        level = getattr(logging, str(data.get("logLevel", "INFO")).upper(), logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
        channels = DEFAULT_CHANNELS.copy()
        overrides = data.get("logChannels", {})
        if isinstance(overrides, Mapping):
            channels.update({str(k): bool(v) for k, v in overrides.items()})
        return cls(level=level, channels=channels)

    @classmethod
    def from_settings(cls, settings_path: Path) -> "LoggerConfig":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)


class ChannelLogger:
    """Forwards records to a stdlib logger while its channel is enabled.

    Errors are always forwarded; a disabled channel only silences the
    debug, info and warning chatter.
    """

    def __init__(self, name: str, logger: logging.Logger, enabled: bool) -> None:
        self._name = name
        self._logger = logger
        self.enabled = enabled

    @property
    def name(self) -> str:
        return self._name

    def _emit(self, level: int, msg: str, args: tuple, kwargs: Dict[str, Any]) -> None:
        if level < logging.ERROR and not self.enabled:
            return
        kwargs.setdefault("stacklevel", 3)
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.INFO, msg, args, kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.ERROR, msg, args, kwargs)

    def exception(self, msg: str, *args, **kwargs) -> None:
        kwargs.setdefault("exc_info", True)
        self._emit(logging.ERROR, msg, args, kwargs)


class GameLogger:
    """Owns the channel loggers for one run of the game."""

    def __init__(self, config: Optional[LoggerConfig] = None) -> None:
        config = config or LoggerConfig()
        logging.basicConfig(level=config.level, format=LOG_FORMAT, stream=sys.stdout)
        logging.getLogger(LOGGER_PREFIX).setLevel(config.level)
        self._channels: Dict[str, ChannelLogger] = {
            name: ChannelLogger(name, logging.getLogger(_channel_logger_name(name)), bool(enabled))
            for name, enabled in config.channels.items()
        }

    def channel(self, name: str) -> ChannelLogger:
        # Channels missing from the config stay silent until enabled.
        return self._channels.setdefault(
            name, ChannelLogger(name, logging.getLogger(_channel_logger_name(name)), False)
        )

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled

    def channels(self) -> Iterable[str]:
        return self._channels.keys()


def default_channel(name: str) -> ChannelLogger:
    """Enabled channel for components built without a :class:`GameLogger`."""

    return ChannelLogger(name, logging.getLogger(_channel_logger_name(name)), True)


def init_logger(settings_path: Optional[Path] = None) -> GameLogger:
    return GameLogger(LoggerConfig.from_settings(settings_path or Path("settings.json")))


__all__ = [
    "ChannelLogger",
    "DEFAULT_CHANNELS",
    "GameLogger",
    "LoggerConfig",
    "default_channel",
    "init_logger",
]
