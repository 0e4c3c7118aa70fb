"""Per-weapon firing state: cooldown timers, energy pools and switching."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from armory.combat.catalog import CatalogError, WeaponCatalog, WeaponDefinition
from armory.combat.events import FireRequest, WeaponStateChanged
from armory.combat.formulas import clamp_fraction
from armory.combat.stats import WeaponStats, compute_state_for_level
from armory.combat.upgrades import UpgradeGate, UpgradeResult
from armory.engine.logger import ChannelLogger, default_channel
from armory.engine.settings import DEFAULT_ENERGY_PROJECTILE_SPEED, DEFAULT_INITIAL_WEAPON
from armory.engine.signals import Signal
from armory.engine.telemetry import FiringTelemetry
from armory.powerups.modifiers import WeaponPowerupModifiers


@dataclass
class CooldownTimer:
    """Ready when ``remaining_ms`` is zero; ``duration_ms`` is the running cooldown."""

    remaining_ms: float = 0.0
    duration_ms: float = 0.0

    @property
    def ready(self) -> bool:
        return self.remaining_ms <= 0.0

    def start(self, duration_ms: float) -> None:
        self.duration_ms = max(0.0, duration_ms)
        self.remaining_ms = self.duration_ms

    def tick(self, delta_ms: float) -> None:
        if self.remaining_ms > 0.0:
            self.remaining_ms = max(0.0, self.remaining_ms - delta_ms)

    def progress(self) -> float:
        if self.ready or self.duration_ms <= 0.0:
            return 1.0
        return clamp_fraction(1.0 - self.remaining_ms / self.duration_ms)


@dataclass
class EnergyPool:
    """Real-valued energy that drains while held and refills otherwise."""

    current: float
    capacity: float
    draining: bool = False

    @property
    def empty(self) -> bool:
        return self.current <= 0.0

    def drain(self, amount: float) -> None:
        self.current = max(0.0, self.current - amount)

    def refill(self, amount: float) -> None:
        self.current = min(self.capacity, self.current + amount)

    def progress(self) -> float:
        if self.capacity <= 0.0:
            return 0.0
        return clamp_fraction(self.current / self.capacity)


WeaponResource = Union[CooldownTimer, EnergyPool]


@dataclass
class WeaponRuntimeState:
    definition: WeaponDefinition
    stats: WeaponStats
    resource: WeaponResource = field(default_factory=CooldownTimer)

    @property
    def weapon_id(self) -> str:
        return self.definition.id

    @property
    def level(self) -> int:
        return self.stats.level

    @property
    def next_upgrade_cost(self) -> Optional[int]:
        return self.stats.next_upgrade_cost

    @property
    def is_energy_based(self) -> bool:
        return isinstance(self.resource, EnergyPool)

    def progress(self) -> float:
        return self.resource.progress()


def create_runtime_state(definition: WeaponDefinition, level: int = 1) -> WeaponRuntimeState:
    """Fresh state at ``level``: cooldown ready, energy full."""

    stats = compute_state_for_level(definition, level)
    if stats.is_energy_based:
        resource: WeaponResource = EnergyPool(
            current=float(stats.energy_capacity), capacity=float(stats.energy_capacity)
        )
    else:
        resource = CooldownTimer()
    return WeaponRuntimeState(definition=definition, stats=stats, resource=resource)


class FiringController:
    """Fire, switch and upgrade intents for the player's weapon rack.

    Every catalog entry gets a runtime state at level 1, stored densely in
    catalog order. Only the active weapon fires; all timers and pools advance
    on :meth:`update`.
    """

    def __init__(
        self,
        catalog: WeaponCatalog,
        upgrade_gate: UpgradeGate,
        modifiers: WeaponPowerupModifiers,
        *,
        initial_weapon: str = DEFAULT_INITIAL_WEAPON,
        telemetry: Optional[FiringTelemetry] = None,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        if len(catalog) == 0:
            raise CatalogError("Weapon catalog is empty")
        self._logger = logger or default_channel("weapons")
        self._catalog = catalog
        self._gate = upgrade_gate
        self._modifiers = modifiers
        self._telemetry = telemetry
        self._states: List[WeaponRuntimeState] = [create_runtime_state(d) for d in catalog]
        index = catalog.index_of(initial_weapon)
        if index is None:
            self._logger.error(
                "Initial weapon '%s' not in catalog; using '%s'", initial_weapon, catalog.at(0).id
            )
            index = 0
        self._active_index = index
        self.is_firing = False
        self.fire_requested: Signal[FireRequest] = Signal("fire_requested", self._logger)
        self.state_changed: Signal[WeaponStateChanged] = Signal("state_changed", self._logger)
        self._logger.debug("Initialised runtime state for %d weapons", len(self._states))

    # Queries ---------------------------------------------------------------

    @property
    def active_weapon_id(self) -> str:
        return self._states[self._active_index].weapon_id

    @property
    def active_state(self) -> WeaponRuntimeState:
        return self._states[self._active_index]

    def state(self, weapon_id: str) -> Optional[WeaponRuntimeState]:
        index = self._catalog.index_of(weapon_id)
        if index is None:
            return None
        return self._states[index]

    def states(self) -> List[WeaponRuntimeState]:
        return list(self._states)

    def build_state_event(self) -> WeaponStateChanged:
        progress: Dict[str, float] = {}
        costs: Dict[str, Optional[int]] = {}
        levels: Dict[str, int] = {}
        for state in self._states:
            progress[state.weapon_id] = state.progress()
            costs[state.weapon_id] = state.next_upgrade_cost
            levels[state.weapon_id] = state.level
        return WeaponStateChanged(
            active_weapon_id=self.active_weapon_id,
            progress=progress,
            next_upgrade_costs=costs,
            levels=levels,
        )

    def publish_state(self) -> None:
        self.state_changed.publish(self.build_state_event())

    # Intents ---------------------------------------------------------------

    def fire_start(self) -> bool:
        self._logger.debug("Fire input received")
        self.is_firing = True
        return self.attempt_fire()

    def fire_stop(self) -> None:
        self._logger.debug("Fire input ended")
        self.is_firing = False
        resource = self.active_state.resource
        if isinstance(resource, EnergyPool) and resource.draining:
            resource.draining = False
            self._logger.debug("Stopped firing energy weapon %s", self.active_weapon_id)

    def attempt_fire(self) -> bool:
        """Try to fire the active weapon; returns whether firing started."""

        state = self.active_state
        resource = state.resource
        if isinstance(resource, EnergyPool):
            if resource.empty:
                self._logger.debug("Weapon %s has no energy to fire", state.weapon_id)
                self._record_denied(state)
                return False
            resource.draining = True
            self._logger.debug("Energy weapon %s draining", state.weapon_id)
            return True

        if not resource.ready:
            self._logger.debug(
                "Weapon %s on cooldown (%.0fms left)", state.weapon_id, resource.remaining_ms
            )
            self._record_denied(state)
            return False

        self._emit_fire_request(state)
        multiplier = self._modifiers.cooldown_multiplier
        resource.start(state.stats.cooldown_ms * multiplier)
        self._logger.debug(
            "Cooldown started for %s: %.0fms (level %dms x%.2f)",
            state.weapon_id,
            resource.remaining_ms,
            state.stats.cooldown_ms,
            multiplier,
        )
        return True

    def switch_weapon(self, weapon_id: str) -> bool:
        index = self._catalog.index_of(weapon_id)
        if index is None:
            self._logger.warning("Attempted to switch to unknown weapon ID: %s", weapon_id)
            return False
        if index == self._active_index:
            self._logger.debug("Weapon %s is already selected.", weapon_id)
            return False
        previous = self.active_state.resource
        if isinstance(previous, EnergyPool):
            previous.draining = False
        self._active_index = index
        self.is_firing = False
        self._logger.info("Switched weapon to %s", weapon_id)
        self.publish_state()
        return True

    def request_upgrade(self) -> UpgradeResult:
        """Upgrade the active weapon through the gate."""

        index = self._active_index
        current = self._states[index]
        result = self._gate.attempt_upgrade(current.definition, current.level)
        if not result.success:
            self._logger.info(
                "Upgrade failed for %s: %s", current.weapon_id, result.failure.value
            )
            return result
        upgraded = create_runtime_state(current.definition, result.new_level)
        # Held fire keeps draining the refilled pool.
        if isinstance(current.resource, EnergyPool) and isinstance(upgraded.resource, EnergyPool):
            upgraded.resource.draining = current.resource.draining
        self._states[index] = upgraded
        self.publish_state()
        return result

    # Tick ------------------------------------------------------------------

    def update(self, delta_ms: float) -> None:
        if not math.isfinite(delta_ms) or delta_ms <= 0:
            return
        seconds = delta_ms / 1000.0
        for index, state in enumerate(self._states):
            resource = state.resource
            if isinstance(resource, CooldownTimer):
                resource.tick(delta_ms)
                continue
            if resource.draining and index == self._active_index:
                self._emit_fire_request(state)
                resource.drain(state.stats.energy_drain_per_sec * seconds)
                if resource.empty:
                    resource.draining = False
                    self.is_firing = False
                    self._logger.debug("Weapon %s out of energy", state.weapon_id)
            else:
                resource.draining = False
                resource.refill(state.stats.energy_refill_per_sec * seconds)

    # Helpers ---------------------------------------------------------------

    def _emit_fire_request(self, state: WeaponRuntimeState) -> None:
        stats = state.stats
        damage = stats.damage_per_sec if state.definition.deals_damage_per_sec else stats.damage
        speed = stats.projectile_speed
        if speed is None:
            speed = DEFAULT_ENERGY_PROJECTILE_SPEED if state.is_energy_based else 0
        if self._telemetry is not None:
            self._telemetry.record_shot(state.weapon_id)
        self.fire_requested.publish(
            FireRequest(definition=state.definition, damage=damage, projectile_speed=speed)
        )

    def _record_denied(self, state: WeaponRuntimeState) -> None:
        if self._telemetry is not None:
            self._telemetry.record_denied(state.weapon_id)


__all__ = [
    "CooldownTimer",
    "EnergyPool",
    "FiringController",
    "WeaponRuntimeState",
    "create_runtime_state",
]
