"""Turns currency into weapon levels."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from armory.combat.catalog import WeaponDefinition
from armory.combat.formulas import geometric_cost
from armory.combat.stats import WeaponStats, compute_state_for_level, next_upgrade_cost
from armory.economy.ledger import EconomyLedger
from armory.engine.logger import ChannelLogger, default_channel


class UpgradeFailure(Enum):
    NO_UPGRADE_CONFIGURATION = "no upgrade configuration"
    INSUFFICIENT_CURRENCY = "insufficient currency"
    SPEND_FAILED = "spend failed"


@dataclass(frozen=True)
class UpgradeResult:
    success: bool
    new_level: Optional[int] = None
    stats: Optional[WeaponStats] = None
    cost: Optional[int] = None
    failure: Optional[UpgradeFailure] = None
    message: str = ""

    @classmethod
    def failed(cls, failure: UpgradeFailure, message: str, cost: Optional[int] = None) -> "UpgradeResult":
        return cls(success=False, failure=failure, message=message, cost=cost)


class UpgradeGate:
    """Checks affordability against the ledger and spends for the next level."""

    def __init__(self, ledger: EconomyLedger, logger: Optional[ChannelLogger] = None) -> None:
        self._ledger = ledger
        self._logger = logger or default_channel("weapons")

    def calculate_next_upgrade_cost(self, definition: WeaponDefinition, current_level: int) -> Optional[int]:
        return next_upgrade_cost(definition, current_level)

    def attempt_upgrade(self, definition: WeaponDefinition, current_level: int) -> UpgradeResult:
        if definition.upgrade is None:
            self._logger.warning("Weapon %s has no upgrade configuration.", definition.id)
            return UpgradeResult.failed(
                UpgradeFailure.NO_UPGRADE_CONFIGURATION, "No upgrade configuration."
            )

        cost = geometric_cost(definition.base_cost, definition.upgrade.cost_multiplier, current_level)
        balance = self._ledger.currency
        if balance < cost:
            message = f"Insufficient currency. Need: {cost}, Have: {balance}"
            self._logger.info("%s", message)
            return UpgradeResult.failed(UpgradeFailure.INSUFFICIENT_CURRENCY, message, cost)

        # A zero cost upgrade is free; the ledger rejects non-positive spends.
        if cost > 0 and not self._ledger.spend_currency(cost):
            message = f"Failed to spend currency {cost} despite having {balance}."
            self._logger.error("%s", message)
            return UpgradeResult.failed(UpgradeFailure.SPEND_FAILED, message, cost)

        new_level = max(1, int(current_level)) + 1
        stats = compute_state_for_level(definition, new_level)
        self._logger.info(
            "Upgraded %s to level %d for %d (cooldown=%dms damage=%d)",
            definition.id,
            new_level,
            cost,
            stats.cooldown_ms,
            stats.damage,
        )
        return UpgradeResult(success=True, new_level=new_level, stats=stats, cost=cost)


__all__ = ["UpgradeFailure", "UpgradeGate", "UpgradeResult"]
