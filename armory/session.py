"""Wires the combat core together for one play session."""
from __future__ import annotations

import math
from typing import List, Optional, Sequence

from armory.combat.catalog import WeaponCatalog
from armory.combat.events import EntityDestroyed, PowerupEffectApplied, PowerupEffectRemoved
from armory.combat.firing import FiringController
from armory.combat.upgrades import UpgradeGate, UpgradeResult
from armory.economy.ledger import EconomyLedger
from armory.engine.logger import DEFAULT_CHANNELS, GameLogger, LoggerConfig
from armory.engine.settings import Settings
from armory.engine.signals import SubscriptionScope
from armory.engine.telemetry import FiringTelemetry
from armory.powerups.modifiers import PlayerPowerupModifiers, WeaponPowerupModifiers
from armory.powerups.timeline import PowerupDefinition, PowerupTimeline


class CombatSession:
    """Owns the ledger, modifiers, firing controller and powerup timeline.

    Inbound notifications from the surrounding game arrive as method calls;
    outbound ones are the signals on :attr:`firing`, :attr:`ledger` and
    :attr:`timeline`. :meth:`close` releases every internal subscription.
    """

    def __init__(
        self,
        catalog: WeaponCatalog,
        powerups: Sequence[PowerupDefinition] = (),
        settings: Optional[Settings] = None,
        logger: Optional[GameLogger] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.logger = logger or GameLogger(LoggerConfig(channels=DEFAULT_CHANNELS.copy()))
        weapons_log = self.logger.channel("weapons")
        powerups_log = self.logger.channel("powerups")
        self._telemetry_log = self.logger.channel("telemetry")

        self.ledger = EconomyLedger(
            self.settings.starting_currency,
            self.settings.starting_score,
            logger=self.logger.channel("economy"),
        )
        self.weapon_modifiers = WeaponPowerupModifiers(powerups_log)
        self.player_modifiers = PlayerPowerupModifiers(powerups_log)
        self.telemetry = FiringTelemetry()
        self.upgrades = UpgradeGate(self.ledger, weapons_log)
        self.firing = FiringController(
            catalog,
            self.upgrades,
            self.weapon_modifiers,
            initial_weapon=self.settings.initial_weapon,
            telemetry=self.telemetry,
            logger=weapons_log,
        )
        self.timeline = PowerupTimeline(powerups, powerups_log)

        self._scope = SubscriptionScope()
        for handler in (
            self.weapon_modifiers.on_effect_applied,
            self.player_modifiers.on_effect_applied,
            self.ledger.on_effect_applied,
        ):
            self._scope.subscribe(self.timeline.effect_applied, handler)
        for handler in (
            self.weapon_modifiers.on_effect_removed,
            self.player_modifiers.on_effect_removed,
            self.ledger.on_effect_removed,
        ):
            self._scope.subscribe(self.timeline.effect_removed, handler)

    @property
    def closed(self) -> bool:
        return self._scope.closed

    @property
    def damage_immunity(self) -> bool:
        return self.player_modifiers.damage_immunity

    def weapon_ids(self) -> List[str]:
        """Weapon ids in catalog order, the order weapon slots are numbered in."""

        return [state.weapon_id for state in self.firing.states()]

    def start(self) -> None:
        """Publish initial balances and weapon state once observers are attached."""

        self.ledger.publish_balances()
        self.firing.publish_state()

    # Inbound notifications ---------------------------------------------

    def fire_start(self) -> bool:
        return self.firing.fire_start()

    def fire_stop(self) -> None:
        self.firing.fire_stop()

    def switch_weapon(self, weapon_id: str) -> bool:
        return self.firing.switch_weapon(weapon_id)

    def request_upgrade(self) -> UpgradeResult:
        return self.firing.request_upgrade()

    def entity_destroyed(self, reward: float, score_value: int = 0) -> None:
        self.ledger.on_entity_destroyed(EntityDestroyed(reward=reward, score_value=score_value))

    def collect_powerup(self, powerup_id: str) -> bool:
        return self.timeline.activate(powerup_id)

    def apply_effect(self, event: PowerupEffectApplied) -> None:
        """Forward an effect whose lifetime is managed outside the session."""

        self.timeline.effect_applied.publish(event)

    def remove_effect(self, event: PowerupEffectRemoved) -> None:
        self.timeline.effect_removed.publish(event)

    def update(self, delta_ms: float) -> None:
        if not math.isfinite(delta_ms) or delta_ms <= 0:
            return
        self.timeline.update(delta_ms)
        self.firing.update(delta_ms)
        self.telemetry.advance_time(delta_ms / 1000.0, self._telemetry_log)

    def close(self) -> None:
        if self._scope.closed:
            return
        self._scope.close()
        self.logger.channel("weapons").info("Combat session closed")


__all__ = ["CombatSession"]
