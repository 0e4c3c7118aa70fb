"""Currency and score bookkeeping."""
from __future__ import annotations

import math
from typing import Optional

from armory.combat.events import (
    CurrencyChanged,
    EntityDestroyed,
    PowerupEffectApplied,
    PowerupEffectRemoved,
    ScoreChanged,
)
from armory.combat.formulas import round_half_up
from armory.engine.logger import ChannelLogger, default_channel
from armory.engine.settings import DEFAULT_CURRENCY_BOOST
from armory.engine.signals import Signal
from armory.powerups.modifiers import CurrencyPowerupModifiers


class EconomyLedger:
    """Owns the player's currency balance and score.

    Both counters are non-negative integers and change only through the
    add/spend operations below. Every change is published on
    ``currency_changed`` / ``score_changed``.
    """

    def __init__(
        self,
        initial_currency: int = 0,
        initial_score: int = 0,
        *,
        currency_boost: float = DEFAULT_CURRENCY_BOOST,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self._logger = logger or default_channel("economy")
        self._currency = max(0, int(initial_currency))
        self._score = max(0, int(initial_score))
        self._boost = CurrencyPowerupModifiers(self._logger, default_multiplier=currency_boost)
        self.currency_changed: Signal[CurrencyChanged] = Signal("currency_changed", self._logger)
        self.score_changed: Signal[ScoreChanged] = Signal("score_changed", self._logger)
        self._logger.info(
            "Ledger initialised with %d currency and %d score", self._currency, self._score
        )

    @property
    def currency(self) -> int:
        return self._currency

    @property
    def score(self) -> int:
        return self._score

    @property
    def currency_multiplier(self) -> float:
        return self._boost.currency_multiplier

    def can_afford(self, amount: float) -> bool:
        return amount <= self._currency

    def publish_balances(self) -> None:
        self.currency_changed.publish(CurrencyChanged(self._currency))
        self.score_changed.publish(ScoreChanged(self._score))

    def add_currency(self, amount: float) -> None:
        amount = int(amount)
        if amount <= 0:
            self._logger.warning("Attempted to add non-positive currency amount: %s", amount)
            return
        self._currency += amount
        self._logger.info("Added %d currency. New total: %d", amount, self._currency)
        self.currency_changed.publish(CurrencyChanged(self._currency))

    def add_score(self, amount: float) -> None:
        amount = int(amount)
        if amount <= 0:
            self._logger.warning("Attempted to add non-positive score amount: %s", amount)
            return
        self._score += amount
        self._logger.info("Added %d score. New total: %d", amount, self._score)
        self.score_changed.publish(ScoreChanged(self._score))

    def spend_currency(self, amount: float) -> bool:
        """Deduct ``amount`` rounded up to whole currency, or change nothing."""

        if not math.isfinite(amount) or amount <= 0:
            self._logger.warning("Attempted to spend invalid currency amount: %s", amount)
            return False
        cost = math.ceil(amount)
        if cost > self._currency:
            self._logger.info("Insufficient currency to spend %d. Current: %d", cost, self._currency)
            return False
        self._currency -= cost
        self._logger.info("Spent %d currency. New total: %d", cost, self._currency)
        self.currency_changed.publish(CurrencyChanged(self._currency))
        return True

    # Notification handlers ----------------------------------------------

    def on_entity_destroyed(self, event: EntityDestroyed) -> None:
        multiplier = self._boost.currency_multiplier
        reward = round_half_up(event.reward * multiplier)
        self._logger.debug(
            "Entity destroyed: reward=%s multiplier=%.2f score=%s",
            event.reward,
            multiplier,
            event.score_value,
        )
        if reward > 0:
            self.add_currency(reward)
        if event.score_value > 0:
            self.add_score(event.score_value)

    def on_effect_applied(self, event: PowerupEffectApplied) -> None:
        self._boost.on_effect_applied(event)

    def on_effect_removed(self, event: PowerupEffectRemoved) -> None:
        self._boost.on_effect_removed(event)


__all__ = ["EconomyLedger"]
