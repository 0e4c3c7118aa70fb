"""Weapon definitions and the load-time catalog that indexes them."""
from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from armory.engine.settings import FALLBACK_COOLDOWN_MS


class CatalogError(ValueError):
    """Raised when weapon content fails validation."""


_UPGRADE_MULTIPLIER_KEYS = {
    "cost_multiplier": "costMultiplier",
    "cooldown_multiplier": "cooldownMultiplier",
    "damage_multiplier": "damageMultiplier",
    "projectile_speed_multiplier": "projectileSpeedMultiplier",
    "slow_factor_multiplier": "slowFactorMultiplier",
    "duration_multiplier": "durationMultiplier",
    "energy_capacity_multiplier": "energyCapacityMultiplier",
    "energy_refill_multiplier": "energyRefillMultiplier",
}


def require_number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CatalogError(f"{where} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise CatalogError(f"{where} must be finite")
    return number


def optional_number(data: Mapping[str, Any], key: str, where: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    return require_number(value, f"{where}.{key}")


def require_non_negative(value: Optional[float], where: str) -> None:
    if value is not None and value < 0:
        raise CatalogError(f"{where} must be non-negative")


def require_positive(value: Optional[float], where: str) -> None:
    if value is not None and value <= 0:
        raise CatalogError(f"{where} must be positive")


@dataclass(frozen=True)
class UpgradeTable:
    """Per-level multipliers; ``None`` leaves the stat unchanged."""

    cost_multiplier: Optional[float] = None
    cooldown_multiplier: Optional[float] = None
    damage_multiplier: Optional[float] = None
    projectile_speed_multiplier: Optional[float] = None
    slow_factor_multiplier: Optional[float] = None
    duration_multiplier: Optional[float] = None
    energy_capacity_multiplier: Optional[float] = None
    energy_refill_multiplier: Optional[float] = None
    range_add: float = 0.0
    duration_add_ms: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "upgrade") -> "UpgradeTable":
        if not isinstance(data, Mapping):
            raise CatalogError(f"{where} must be an object")
        values: Dict[str, Any] = {}
        for attr, key in _UPGRADE_MULTIPLIER_KEYS.items():
            value = optional_number(data, key, where)
            require_positive(value, f"{where}.{key}")
            values[attr] = value
        range_add = optional_number(data, "rangeAdd", where) or 0.0
        require_non_negative(range_add, f"{where}.rangeAdd")
        duration_add = optional_number(data, "durationAddMs", where) or 0.0
        require_non_negative(duration_add, f"{where}.durationAddMs")
        return cls(range_add=range_add, duration_add_ms=duration_add, **values)


@dataclass(frozen=True)
class EnergyProfile:
    capacity: float
    drain_per_sec: float = 0.0
    refill_per_sec: float = 0.0


@dataclass(frozen=True)
class WeaponDefinition:
    id: str
    name: str
    base_cost: float
    base_cooldown_ms: float
    base_range: float
    base_damage: Optional[float] = None
    base_damage_per_sec: Optional[float] = None
    projectile_type: str = "none"
    projectile_speed: Optional[float] = None
    base_slow_factor: Optional[float] = None
    base_duration_ms: Optional[float] = None
    energy: Optional[EnergyProfile] = None
    upgrade: Optional[UpgradeTable] = None

    @property
    def is_energy_based(self) -> bool:
        return self.energy is not None and self.energy.capacity > 0

    @property
    def deals_damage_per_sec(self) -> bool:
        """Energy beams and DPS-only weapons report damage per second."""

        if self.is_energy_based:
            return True
        return self.base_damage is None and self.base_damage_per_sec is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "weapon") -> "WeaponDefinition":
        if not isinstance(data, Mapping):
            raise CatalogError(f"{where} must be an object")
        weapon_id = data.get("id")
        if not isinstance(weapon_id, str) or not weapon_id.strip():
            raise CatalogError(f"{where}.id must be a non-empty string")
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise CatalogError(f"{where}.name must be a non-empty string")

        if "baseCost" not in data:
            raise CatalogError(f"{where}.baseCost is required")
        base_cost = require_number(data["baseCost"], f"{where}.baseCost")
        require_non_negative(base_cost, f"{where}.baseCost")

        if "baseRange" not in data:
            raise CatalogError(f"{where}.baseRange is required")
        base_range = require_number(data["baseRange"], f"{where}.baseRange")
        require_positive(base_range, f"{where}.baseRange")

        energy = None
        capacity = optional_number(data, "baseEnergyCapacity", where)
        if capacity is not None:
            drain = optional_number(data, "baseEnergyDrainPerSec", where) or 0.0
            refill = optional_number(data, "baseEnergyRefillPerSec", where) or 0.0
            require_non_negative(capacity, f"{where}.baseEnergyCapacity")
            require_non_negative(drain, f"{where}.baseEnergyDrainPerSec")
            require_non_negative(refill, f"{where}.baseEnergyRefillPerSec")
            energy = EnergyProfile(capacity=capacity, drain_per_sec=drain, refill_per_sec=refill)

        cooldown = optional_number(data, "baseCooldownMs", where)
        if cooldown is None:
            cooldown = 0.0 if energy is not None and energy.capacity > 0 else float(FALLBACK_COOLDOWN_MS)
        require_non_negative(cooldown, f"{where}.baseCooldownMs")

        base_damage = optional_number(data, "baseDamage", where)
        require_non_negative(base_damage, f"{where}.baseDamage")
        base_dps = optional_number(data, "baseDamagePerSec", where)
        require_non_negative(base_dps, f"{where}.baseDamagePerSec")
        speed = optional_number(data, "projectileSpeed", where)
        require_positive(speed, f"{where}.projectileSpeed")
        slow = optional_number(data, "baseSlowFactor", where)
        require_positive(slow, f"{where}.baseSlowFactor")
        duration = optional_number(data, "baseDurationMs", where)
        require_positive(duration, f"{where}.baseDurationMs")

        upgrade = None
        if data.get("upgrade") is not None:
            upgrade = UpgradeTable.from_dict(data["upgrade"], f"{where}.upgrade")

        return cls(
            id=weapon_id,
            name=name,
            base_cost=base_cost,
            base_cooldown_ms=cooldown,
            base_range=base_range,
            base_damage=base_damage,
            base_damage_per_sec=base_dps,
            projectile_type=str(data.get("projectileType", "none")),
            projectile_speed=speed,
            base_slow_factor=slow,
            base_duration_ms=duration,
            energy=energy,
            upgrade=upgrade,
        )


class WeaponCatalog:
    """Immutable, ordered weapon list with a stable id -> index lookup."""

    def __init__(self, definitions: Sequence[WeaponDefinition]) -> None:
        self._definitions: Tuple[WeaponDefinition, ...] = tuple(definitions)
        self._index: Dict[str, int] = {}
        for index, definition in enumerate(self._definitions):
            if definition.id in self._index:
                raise CatalogError(f"Duplicate weapon id '{definition.id}'")
            self._index[definition.id] = index

    @classmethod
    def from_list(cls, entries: Sequence[Mapping[str, Any]]) -> "WeaponCatalog":
        if isinstance(entries, Mapping):
            entries = [entries]
        definitions = [
            WeaponDefinition.from_dict(entry, f"weapons[{position}]")
            for position, entry in enumerate(entries)
        ]
        return cls(definitions)

    @classmethod
    def load_file(cls, path: Path) -> "WeaponCatalog":
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise CatalogError(f"{path.name}: invalid JSON ({exc.msg})") from exc
        return cls.from_list(data)

    def index_of(self, weapon_id: str) -> Optional[int]:
        return self._index.get(weapon_id)

    def get(self, weapon_id: str) -> WeaponDefinition:
        return self._definitions[self._index[weapon_id]]

    def at(self, index: int) -> WeaponDefinition:
        return self._definitions[index]

    def ids(self) -> List[str]:
        return [definition.id for definition in self._definitions]

    def __contains__(self, weapon_id: object) -> bool:
        return weapon_id in self._index

    def __iter__(self) -> Iterator[WeaponDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)


__all__ = [
    "CatalogError",
    "EnergyProfile",
    "UpgradeTable",
    "WeaponCatalog",
    "WeaponDefinition",
    "optional_number",
    "require_non_negative",
    "require_number",
    "require_positive",
]
