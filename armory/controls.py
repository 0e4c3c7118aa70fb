"""Routes mapped input actions to a combat session."""
from __future__ import annotations

from typing import Iterable

from armory.engine.input import InputAction
from armory.session import CombatSession

WEAPON_SLOT_PREFIX = "weapon_"


def route_actions(session: CombatSession, actions: Iterable[InputAction]) -> None:
    """Apply press/release transitions: fire is held, the rest trigger on press."""

    for action in actions:
        if action.name == "fire":
            if action.pressed:
                session.fire_start()
            else:
                session.fire_stop()
            continue
        if not action.pressed:
            continue
        if action.name == "upgrade":
            session.request_upgrade()
        elif action.name.startswith(WEAPON_SLOT_PREFIX):
            slot = action.name[len(WEAPON_SLOT_PREFIX):]
            if not slot.isdigit():
                continue
            weapon_ids = session.weapon_ids()
            index = int(slot) - 1
            if 0 <= index < len(weapon_ids):
                session.switch_weapon(weapon_ids[index])


__all__ = ["route_actions"]
