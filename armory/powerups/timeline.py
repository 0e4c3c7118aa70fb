"""Powerup definitions and the timer that applies and expires their effects."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from armory.combat.catalog import (
    CatalogError,
    optional_number,
    require_number,
    require_positive,
)
from armory.combat.events import PowerupEffectApplied, PowerupEffectRemoved
from armory.engine.logger import ChannelLogger, default_channel
from armory.engine.signals import Signal


@dataclass(frozen=True)
class PowerupDefinition:
    id: str
    name: str
    effect: str
    duration_ms: float
    multiplier: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "powerup") -> "PowerupDefinition":
        if not isinstance(data, Mapping):
            raise CatalogError(f"{where} must be an object")
        for key in ("id", "name", "effect"):
            value = data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise CatalogError(f"{where}.{key} must be a non-empty string")
        if "durationMs" not in data:
            raise CatalogError(f"{where}.durationMs is required")
        duration = require_number(data["durationMs"], f"{where}.durationMs")
        require_positive(duration, f"{where}.durationMs")
        multiplier = optional_number(data, "multiplier", where)
        require_positive(multiplier, f"{where}.multiplier")
        return cls(
            id=data["id"],
            name=data["name"],
            effect=data["effect"],
            duration_ms=duration,
            multiplier=multiplier,
        )


@dataclass
class ActiveEffect:
    definition: PowerupDefinition
    remaining_ms: float


class PowerupTimeline:
    """Owns active effect timers, keyed by effect name.

    Collecting a powerup whose effect is already running refreshes the timer
    instead of stacking it.
    """

    def __init__(
        self,
        definitions: Sequence[PowerupDefinition],
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self._logger = logger or default_channel("powerups")
        self._definitions: Dict[str, PowerupDefinition] = {d.id: d for d in definitions}
        self._active: Dict[str, ActiveEffect] = {}
        self.effect_applied: Signal[PowerupEffectApplied] = Signal("effect_applied", self._logger)
        self.effect_removed: Signal[PowerupEffectRemoved] = Signal("effect_removed", self._logger)

    def definition(self, powerup_id: str) -> Optional[PowerupDefinition]:
        return self._definitions.get(powerup_id)

    def active_effects(self) -> Dict[str, float]:
        return {effect: active.remaining_ms for effect, active in self._active.items()}

    def is_active(self, effect: str) -> bool:
        return effect in self._active

    def activate(self, powerup_id: str) -> bool:
        definition = self._definitions.get(powerup_id)
        if definition is None:
            self._logger.warning("Unknown powerup id: %s", powerup_id)
            return False
        existing = self._active.get(definition.effect)
        if existing is not None:
            existing.definition = definition
            existing.remaining_ms = definition.duration_ms
            self._logger.debug("Refreshed %s for %.0fms", definition.effect, definition.duration_ms)
            return True
        self._active[definition.effect] = ActiveEffect(definition, definition.duration_ms)
        self._logger.info("Powerup %s applied (%s)", definition.name, definition.effect)
        self.effect_applied.publish(
            PowerupEffectApplied(
                effect=definition.effect,
                multiplier=definition.multiplier,
                duration_ms=definition.duration_ms,
                powerup_id=definition.id,
            )
        )
        return True

    def update(self, delta_ms: float) -> None:
        if not math.isfinite(delta_ms) or delta_ms <= 0:
            return
        expired: List[str] = []
        for effect, active in self._active.items():
            active.remaining_ms -= delta_ms
            if active.remaining_ms <= 0:
                expired.append(effect)
        for effect in expired:
            self._remove(effect)

    def clear(self) -> None:
        for effect in list(self._active):
            self._remove(effect)

    def _remove(self, effect: str) -> None:
        active = self._active.pop(effect, None)
        if active is None:
            return
        self._logger.info("Powerup effect %s expired", effect)
        self.effect_removed.publish(
            PowerupEffectRemoved(effect=effect, powerup_id=active.definition.id)
        )


__all__ = [
    "ActiveEffect",
    "PowerupDefinition",
    "PowerupTimeline",
]
