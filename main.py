"""Entry point for the Armory weapon sandbox."""
from __future__ import annotations

from pathlib import Path

import pygame

from armory.assets.content import ContentManager
from armory.combat.events import FireRequest, WeaponStateChanged
from armory.controls import route_actions
from armory.engine.input import InputBindings, InputMapper
from armory.engine.logger import init_logger
from armory.engine.loop import FixedTimestepLoop
from armory.engine.settings import Settings
from armory.session import CombatSession

SETTINGS_PATH = Path("settings.json")
BACKGROUND = (8, 10, 18)


def main() -> None:
    settings = Settings.load(SETTINGS_PATH)
    logger = init_logger(SETTINGS_PATH)
    content = ContentManager(logger=logger.channel("weapons"))
    content.load()

    pygame.init()
    screen = pygame.display.set_mode(tuple(settings.resolution))
    pygame.display.set_caption("Armory")
    clock = pygame.time.Clock()

    input_mapper = InputMapper(InputBindings.load(SETTINGS_PATH), logger.channel("input"))
    session = CombatSession(content.weapons, content.powerups, settings, logger)
    weapons_log = logger.channel("weapons")

    def on_fire(request: FireRequest) -> None:
        weapons_log.debug(
            "Fire %s damage=%d speed=%d", request.weapon_id, request.damage, request.projectile_speed
        )

    def on_state(event: WeaponStateChanged) -> None:
        pygame.display.set_caption(
            f"Armory - {event.active_weapon_id} L{event.levels.get(event.active_weapon_id, 1)}"
            f" - {session.ledger.currency} credits"
        )

    fire_sub = session.firing.fire_requested.subscribe(on_fire)
    state_sub = session.firing.state_changed.subscribe(on_state)
    session.start()

    def process_events() -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                loop.stop()
                return
            route_actions(session, input_mapper.handle_event(event))

    def render(alpha: float) -> None:
        screen.fill(BACKGROUND)
        pygame.display.flip()
        clock.tick(settings.max_fps)

    loop = FixedTimestepLoop(
        session.update,
        render,
        process_events,
        fixed_hz=settings.sim_hz,
    )

    try:
        loop.run()
    finally:
        fire_sub.release()
        state_sub.release()
        session.close()
        pygame.quit()
        print("\nUsage: LMB/Space fire, 1-3 switch weapon, U upgrade.")


if __name__ == "__main__":
    main()
