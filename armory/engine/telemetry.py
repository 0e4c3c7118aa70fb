"""Lightweight runtime telemetry for weapon usage."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from armory.engine.logger import ChannelLogger

LOG_INTERVAL_SECONDS = 5.0


@dataclass
class FiringTelemetrySnapshot:
    shots: Dict[str, int]
    denied: Dict[str, int]

    @property
    def total_shots(self) -> int:
        return sum(self.shots.values())

    @property
    def total_denied(self) -> int:
        return sum(self.denied.values())

    def denial_rate(self) -> float:
        attempts = self.total_shots + self.total_denied
        if attempts <= 0:
            return 0.0
        return self.total_denied / attempts


@dataclass
class FiringTelemetry:
    """Counts fire requests and refused fire attempts per weapon."""

    shots: Dict[str, int] = field(default_factory=dict)
    denied: Dict[str, int] = field(default_factory=dict)
    _log_accumulator: float = 0.0

    def record_shot(self, weapon_id: str) -> None:
        self.shots[weapon_id] = self.shots.get(weapon_id, 0) + 1

    def record_denied(self, weapon_id: str) -> None:
        self.denied[weapon_id] = self.denied.get(weapon_id, 0) + 1

    def advance_time(self, dt: float, logger: ChannelLogger | None = None) -> None:
        self._log_accumulator += dt
        if self._log_accumulator >= LOG_INTERVAL_SECONDS:
            self._log_accumulator = 0.0
            if logger and logger.enabled:
                snapshot = self.snapshot()
                logger.info(
                    "Firing: shots=%d denied=%d (%.0f%% denied) per weapon=%s",
                    snapshot.total_shots,
                    snapshot.total_denied,
                    snapshot.denial_rate() * 100.0,
                    snapshot.shots,
                )

    def reset(self) -> None:
        self.shots.clear()
        self.denied.clear()
        self._log_accumulator = 0.0

    def snapshot(self) -> FiringTelemetrySnapshot:
        return FiringTelemetrySnapshot(shots=dict(self.shots), denied=dict(self.denied))


__all__ = ["FiringTelemetry", "FiringTelemetrySnapshot", "LOG_INTERVAL_SECONDS"]
