"""Payloads exchanged between the combat core and its collaborators."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from armory.combat.catalog import WeaponDefinition


@dataclass(frozen=True)
class FireRequest:
    """Asks the projectile layer to spawn a shot for ``definition``."""

    definition: "WeaponDefinition"
    damage: int
    projectile_speed: int

    @property
    def weapon_id(self) -> str:
        return self.definition.id


@dataclass(frozen=True)
class WeaponStateChanged:
    active_weapon_id: str
    progress: Dict[str, float] = field(default_factory=dict)
    next_upgrade_costs: Dict[str, Optional[int]] = field(default_factory=dict)
    levels: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CurrencyChanged:
    balance: int


@dataclass(frozen=True)
class ScoreChanged:
    score: int


@dataclass(frozen=True)
class EntityDestroyed:
    reward: float
    score_value: int = 0


@dataclass(frozen=True)
class PowerupEffectApplied:
    effect: str
    multiplier: Optional[float] = None
    duration_ms: Optional[float] = None
    powerup_id: str = ""


@dataclass(frozen=True)
class PowerupEffectRemoved:
    effect: str
    powerup_id: str = ""


__all__ = [
    "CurrencyChanged",
    "EntityDestroyed",
    "FireRequest",
    "PowerupEffectApplied",
    "PowerupEffectRemoved",
    "ScoreChanged",
    "WeaponStateChanged",
]
