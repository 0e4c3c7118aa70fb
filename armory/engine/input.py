"""Input mapping and rebind support."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pygame

from armory.engine.logger import ChannelLogger, default_channel

DEFAULT_BINDINGS = {
    "fire": ["BUTTON_LEFT", "K_SPACE"],
    "weapon_1": ["K_1"],
    "weapon_2": ["K_2"],
    "weapon_3": ["K_3"],
    "upgrade": ["K_u"],
}

MOUSE_BUTTONS = {
    "BUTTON_LEFT": 1,
    "BUTTON_MIDDLE": 2,
    "BUTTON_RIGHT": 3,
}


@dataclass
class InputBindings:
    """Runtime structure representing current bindings."""

    actions: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_BINDINGS.items()}
    )

    @classmethod
    def load(cls, path: Path) -> "InputBindings":
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            return cls()
        bindings = cls()
        if isinstance(data, dict):
            bindings.actions.update({k: list(v) for k, v in data.get("bindings", {}).items()})
        return bindings

    def save(self, path: Path) -> None:
        path.write_text(json.dumps({"bindings": self.actions}, indent=2))


@dataclass(frozen=True)
class InputAction:
    name: str
    pressed: bool


class InputMapper:
    """Translates pygame key and mouse events into named actions.

    Binding names resolve to pygame constants once, at construction; names
    pygame does not know are logged and ignored.
    """

    def __init__(
        self,
        bindings: Optional[InputBindings] = None,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self.bindings = bindings or InputBindings()
        self._logger = logger or default_channel("input")
        self._keys: Dict[int, List[str]] = {}
        self._buttons: Dict[int, List[str]] = {}
        for action, names in self.bindings.actions.items():
            for name in names:
                if name in MOUSE_BUTTONS:
                    self._buttons.setdefault(MOUSE_BUTTONS[name], []).append(action)
                    continue
                code = getattr(pygame, name, None)
                if not isinstance(code, int):
                    self._logger.warning("Unknown binding '%s' for action %s", name, action)
                    continue
                self._keys.setdefault(code, []).append(action)
        self.action_state: Dict[str, bool] = {action: False for action in self.bindings.actions}

    def handle_event(self, event: pygame.event.Event) -> List[InputAction]:
        """Update held state and return the actions whose state changed."""

        if event.type in (pygame.KEYDOWN, pygame.KEYUP):
            actions = self._keys.get(event.key, [])
            pressed = event.type == pygame.KEYDOWN
        elif event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            actions = self._buttons.get(event.button, [])
            pressed = event.type == pygame.MOUSEBUTTONDOWN
        else:
            return []
        changed: List[InputAction] = []
        for action in actions:
            if self.action_state.get(action) == pressed:
                continue
            self.action_state[action] = pressed
            changed.append(InputAction(action, pressed))
            self._logger.debug("Action %s %s", action, "pressed" if pressed else "released")
        return changed

    def action(self, name: str) -> bool:
        return self.action_state.get(name, False)


__all__ = ["DEFAULT_BINDINGS", "InputAction", "InputBindings", "InputMapper"]
