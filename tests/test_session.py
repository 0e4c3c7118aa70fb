"""End-to-end wiring of the combat session."""
from __future__ import annotations

import logging

import pytest

from armory.assets.content import ContentManager
from armory.combat.events import (
    CurrencyChanged,
    FireRequest,
    PowerupEffectApplied,
    PowerupEffectRemoved,
    WeaponStateChanged,
)
from armory.engine.logger import GameLogger, LoggerConfig
from armory.engine.settings import Settings
from armory.powerups.modifiers import SHIELD_EFFECT
from armory.session import CombatSession


def _quiet_logger() -> GameLogger:
    return GameLogger(
        LoggerConfig(
            level=logging.CRITICAL,
            channels={
                "weapons": False,
                "economy": False,
                "powerups": False,
                "input": False,
                "telemetry": False,
            },
        )
    )


def _session(currency: int = 1_000, initial_weapon: str = "bullet") -> CombatSession:
    content = ContentManager()
    content.load()
    settings = Settings(starting_currency=currency, initial_weapon=initial_weapon)
    return CombatSession(content.weapons, content.powerups, settings, _quiet_logger())


def test_start_publishes_initial_state_and_balances() -> None:
    session = _session(currency=250)
    states: list[WeaponStateChanged] = []
    balances: list[CurrencyChanged] = []
    session.firing.state_changed.subscribe(states.append)
    session.ledger.currency_changed.subscribe(balances.append)
    session.start()
    assert states[0].active_weapon_id == "bullet"
    assert states[0].levels == {"bullet": 1, "laser": 1, "slow_field": 1}
    assert balances == [CurrencyChanged(250)]


def test_weapon_ids_follow_catalog_order() -> None:
    assert _session().weapon_ids() == ["bullet", "laser", "slow_field"]


def test_cash_boost_doubles_rewards_until_expiry() -> None:
    session = _session(currency=0)
    assert session.collect_powerup("cash_boost")
    session.entity_destroyed(100, 10)
    assert session.ledger.currency == 200
    assert session.ledger.score == 10

    session.update(10_000)
    session.entity_destroyed(100, 10)
    assert session.ledger.currency == 300
    assert session.ledger.score == 20


def test_rapid_fire_shortens_cooldown_through_session() -> None:
    session = _session()
    requests: list[FireRequest] = []
    session.firing.fire_requested.subscribe(requests.append)
    session.collect_powerup("rapid_fire")
    session.fire_start()
    session.fire_stop()
    assert session.firing.active_state.resource.remaining_ms == pytest.approx(250)

    session.update(8_000)
    assert not session.weapon_modifiers.active
    session.fire_start()
    assert session.firing.active_state.resource.remaining_ms == pytest.approx(500)
    assert len(requests) == 2


def test_shield_sets_damage_immunity() -> None:
    session = _session()
    session.collect_powerup("shield")
    assert session.damage_immunity
    session.update(5_000)
    assert not session.damage_immunity


def test_external_effect_notifications_are_forwarded() -> None:
    session = _session()
    session.apply_effect(PowerupEffectApplied(SHIELD_EFFECT))
    assert session.damage_immunity
    session.remove_effect(PowerupEffectRemoved(SHIELD_EFFECT))
    assert not session.damage_immunity


def test_upgrade_and_switch_through_session() -> None:
    session = _session(currency=200)
    result = session.request_upgrade()
    assert result.success
    assert session.ledger.currency == 125
    assert session.switch_weapon("laser")
    assert session.firing.active_weapon_id == "laser"
    assert not session.switch_weapon("unknown")


def test_session_update_counts_shots() -> None:
    session = _session(initial_weapon="laser")
    session.fire_start()
    session.update(100)
    session.update(100)
    assert session.telemetry.snapshot().shots == {"laser": 2}


def test_close_releases_internal_subscriptions() -> None:
    session = _session()
    session.close()
    assert session.closed
    assert session.timeline.effect_applied.subscriber_count() == 0
    assert session.timeline.effect_removed.subscriber_count() == 0
    session.collect_powerup("rapid_fire")
    assert not session.weapon_modifiers.active
    session.close()
