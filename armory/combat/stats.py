"""Per-level weapon statistics derived from a definition and its upgrade table."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from armory.combat.catalog import UpgradeTable, WeaponDefinition
from armory.combat.formulas import apply_multiplier, geometric_cost, round_half_up


@dataclass(frozen=True)
class WeaponStats:
    """Snapshot of a weapon's stats at one level."""

    level: int
    cooldown_ms: int
    damage: int
    damage_per_sec: int
    range: float
    projectile_speed: Optional[int]
    slow_factor: Optional[float]
    duration_ms: Optional[int]
    energy_capacity: int
    energy_drain_per_sec: float
    energy_refill_per_sec: int
    next_upgrade_cost: Optional[int]

    @property
    def is_energy_based(self) -> bool:
        return self.energy_capacity > 0


def next_upgrade_cost(definition: WeaponDefinition, level: int) -> Optional[int]:
    """Cost of going from ``level`` to ``level + 1``, or ``None`` if not upgradeable."""

    if definition.upgrade is None or definition.base_cost is None or definition.base_cost < 0:
        return None
    return geometric_cost(definition.base_cost, definition.upgrade.cost_multiplier, level)


def _scaled(base: Optional[float], multiplier: Optional[float], steps: int) -> Optional[int]:
    if base is None:
        return None
    return round_half_up(apply_multiplier(base, multiplier, steps))


def compute_state_for_level(definition: WeaponDefinition, level: int) -> WeaponStats:
    """Return the stats of ``definition`` at ``level`` (level 1 is the base config).

    Multipliers are applied once per level step above 1 and the accumulated
    value is rounded half-up to whole units. Slow factor is a fraction and is
    left unrounded.
    """

    level = max(1, int(level))
    steps = level - 1
    table = definition.upgrade or UpgradeTable()

    cooldown = round_half_up(apply_multiplier(definition.base_cooldown_ms, table.cooldown_multiplier, steps))
    damage = round_half_up(apply_multiplier(definition.base_damage or 0.0, table.damage_multiplier, steps))
    dps = round_half_up(apply_multiplier(definition.base_damage_per_sec or 0.0, table.damage_multiplier, steps))
    weapon_range = definition.base_range + table.range_add * steps

    speed = _scaled(definition.projectile_speed, table.projectile_speed_multiplier, steps)

    slow_factor = definition.base_slow_factor
    if slow_factor is not None:
        slow_factor = apply_multiplier(slow_factor, table.slow_factor_multiplier, steps)

    duration = None
    if definition.base_duration_ms is not None:
        value = definition.base_duration_ms
        for _ in range(steps):
            value = apply_multiplier(value, table.duration_multiplier, 1) + table.duration_add_ms
        duration = round_half_up(value)

    capacity = 0
    drain = 0.0
    refill = 0
    if definition.is_energy_based:
        energy = definition.energy
        capacity = round_half_up(apply_multiplier(energy.capacity, table.energy_capacity_multiplier, steps))
        refill = round_half_up(apply_multiplier(energy.refill_per_sec, table.energy_refill_multiplier, steps))
        drain = energy.drain_per_sec

    return WeaponStats(
        level=level,
        cooldown_ms=cooldown,
        damage=damage,
        damage_per_sec=dps,
        range=weapon_range,
        projectile_speed=speed,
        slow_factor=slow_factor,
        duration_ms=duration,
        energy_capacity=capacity,
        energy_drain_per_sec=drain,
        energy_refill_per_sec=refill,
        next_upgrade_cost=next_upgrade_cost(definition, level),
    )


__all__ = ["WeaponStats", "compute_state_for_level", "next_upgrade_cost"]
