"""Input mapping, action routing and the fixed-step loop."""
from __future__ import annotations

import json
import logging
from pathlib import Path

import pygame
import pytest

from armory.assets.content import ContentManager
from armory.controls import route_actions
from armory.engine.input import InputAction, InputBindings, InputMapper
from armory.engine.logger import GameLogger, LoggerConfig
from armory.engine.loop import FixedTimestepLoop
from armory.engine.settings import Settings
from armory.session import CombatSession


def _key(event_type: int, key: int) -> pygame.event.Event:
    return pygame.event.Event(event_type, key=key)


def _session() -> CombatSession:
    content = ContentManager()
    content.load()
    logger = GameLogger(LoggerConfig(level=logging.CRITICAL, channels={"weapons": False}))
    return CombatSession(content.weapons, content.powerups, Settings(starting_currency=500), logger)


def test_key_and_mouse_events_map_to_actions() -> None:
    mapper = InputMapper()
    assert mapper.handle_event(_key(pygame.KEYDOWN, pygame.K_SPACE)) == [InputAction("fire", True)]
    assert mapper.action("fire")
    # Repeated press of an already held action is not a transition.
    assert mapper.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1)) == []
    assert mapper.handle_event(_key(pygame.KEYUP, pygame.K_SPACE)) == [InputAction("fire", False)]
    assert mapper.handle_event(_key(pygame.KEYDOWN, pygame.K_2)) == [InputAction("weapon_2", True)]
    assert mapper.handle_event(pygame.event.Event(pygame.MOUSEMOTION, rel=(1, 1))) == []


def test_bindings_load_overrides(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"bindings": {"upgrade": ["K_p"], "fire": ["K_NOT_A_KEY"]}}))
    bindings = InputBindings.load(path)
    assert bindings.actions["upgrade"] == ["K_p"]
    assert bindings.actions["weapon_1"] == ["K_1"]
    mapper = InputMapper(bindings)
    assert mapper.handle_event(_key(pygame.KEYDOWN, pygame.K_p)) == [InputAction("upgrade", True)]
    assert mapper.handle_event(_key(pygame.KEYDOWN, pygame.K_SPACE)) == []


def test_bindings_round_trip_through_file(tmp_path: Path) -> None:
    path = tmp_path / "bindings.json"
    bindings = InputBindings()
    bindings.actions["upgrade"] = ["K_y"]
    bindings.save(path)
    assert InputBindings.load(path).actions["upgrade"] == ["K_y"]


def test_routed_actions_drive_the_session() -> None:
    session = _session()
    route_actions(session, [InputAction("weapon_2", True)])
    assert session.firing.active_weapon_id == "laser"

    route_actions(session, [InputAction("fire", True)])
    assert session.firing.active_state.resource.draining
    route_actions(session, [InputAction("fire", False)])
    assert not session.firing.active_state.resource.draining

    route_actions(session, [InputAction("upgrade", True), InputAction("upgrade", False)])
    assert session.firing.active_state.level == 2

    route_actions(session, [InputAction("weapon_9", True), InputAction("weapon_x", True)])
    assert session.firing.active_weapon_id == "laser"


def test_loop_step_runs_fixed_updates_in_milliseconds() -> None:
    deltas: list[float] = []
    loop = FixedTimestepLoop(deltas.append, lambda alpha: None, lambda: None, fixed_hz=8.0)
    assert loop.step(0.3) == 2
    assert deltas == [pytest.approx(125.0), pytest.approx(125.0)]
    # Long frames are clamped to max_frame_time.
    assert loop.step(5.0) == 2
    assert loop.step(-1.0) == 0


def test_loop_run_stops_from_event_processing() -> None:
    times = iter([0.0, 0.1, 0.2, 0.3])
    updates: list[float] = []
    renders: list[float] = []
    calls = {"events": 0}

    def process_events() -> None:
        calls["events"] += 1
        if calls["events"] == 3:
            loop.stop()

    loop = FixedTimestepLoop(
        updates.append, renders.append, process_events, fixed_hz=10.0, clock=lambda: next(times)
    )
    loop.run()
    assert calls["events"] == 3
    assert len(renders) == 2
    assert len(updates) == 2
