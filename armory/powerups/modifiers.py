"""Transient powerup effects layered over base weapon and player behaviour."""
from __future__ import annotations

from typing import Optional

from armory.combat.events import PowerupEffectApplied, PowerupEffectRemoved
from armory.engine.logger import ChannelLogger, default_channel
from armory.engine.settings import (
    DEFAULT_CURRENCY_BOOST,
    DEFAULT_RAPID_FIRE_MULTIPLIER,
    NEUTRAL_MULTIPLIER,
)

RAPID_FIRE_EFFECT = "weapon_cooldown_reduction"
SHIELD_EFFECT = "temporary_invulnerability"
CURRENCY_EFFECT = "currency_multiplier"


class PowerupModifiers:
    """Tracks one named effect from applied/removed notifications.

    Expiry belongs to whoever publishes the notifications; this class only
    mirrors the latest state it was told about.
    """

    effect: str = ""
    default_multiplier: float = NEUTRAL_MULTIPLIER

    def __init__(
        self,
        logger: Optional[ChannelLogger] = None,
        *,
        default_multiplier: Optional[float] = None,
    ) -> None:
        self._logger = logger or default_channel("powerups")
        if default_multiplier is not None:
            self.default_multiplier = default_multiplier
        self._active = False
        self._multiplier = NEUTRAL_MULTIPLIER

    @property
    def active(self) -> bool:
        return self._active

    @property
    def multiplier(self) -> float:
        return self._multiplier

    def on_effect_applied(self, event: PowerupEffectApplied) -> None:
        if event.effect != self.effect:
            return
        multiplier = event.multiplier
        if multiplier is None or multiplier <= 0:
            multiplier = self.default_multiplier
        self._active = True
        self._multiplier = multiplier
        self._logger.info("%s activated (x%.2f)", self.effect, multiplier)

    def on_effect_removed(self, event: PowerupEffectRemoved) -> None:
        if event.effect != self.effect:
            return
        self._active = False
        self._multiplier = NEUTRAL_MULTIPLIER
        self._logger.info("%s deactivated", self.effect)


class WeaponPowerupModifiers(PowerupModifiers):
    """Rapid fire: scales the cooldown started by the next shot."""

    effect = RAPID_FIRE_EFFECT
    default_multiplier = DEFAULT_RAPID_FIRE_MULTIPLIER

    @property
    def cooldown_multiplier(self) -> float:
        return self._multiplier


class CurrencyPowerupModifiers(PowerupModifiers):
    """Cash boost: scales currency rewards, never score."""

    effect = CURRENCY_EFFECT
    default_multiplier = DEFAULT_CURRENCY_BOOST

    @property
    def currency_multiplier(self) -> float:
        return self._multiplier


class PlayerPowerupModifiers(PowerupModifiers):
    """Shield: a damage immunity flag for the player damage path."""

    effect = SHIELD_EFFECT

    @property
    def damage_immunity(self) -> bool:
        return self._active


__all__ = [
    "CURRENCY_EFFECT",
    "CurrencyPowerupModifiers",
    "PlayerPowerupModifiers",
    "PowerupModifiers",
    "RAPID_FIRE_EFFECT",
    "SHIELD_EFFECT",
    "WeaponPowerupModifiers",
]
