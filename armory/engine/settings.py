"""Runtime settings and the default values the combat core falls back to."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_INITIAL_WEAPON = "bullet"
# Energy weapons without a configured projectile speed still report one.
DEFAULT_ENERGY_PROJECTILE_SPEED = 400
DEFAULT_RAPID_FIRE_MULTIPLIER = 0.5
DEFAULT_CURRENCY_BOOST = 2.0
FALLBACK_COOLDOWN_MS = 500

NEUTRAL_MULTIPLIER = 1.0

DEFAULT_SETTINGS: Dict[str, Any] = {
    "resolution": [800, 600],
    "simHz": 60,
    "maxFps": 120,
    "startingCurrency": 0,
    "startingScore": 0,
    "initialWeapon": DEFAULT_INITIAL_WEAPON,
}


def _non_negative_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default


@dataclass
class Settings:
    """Values read from ``settings.json``; missing keys keep their defaults."""

    resolution: List[int] = field(default_factory=lambda: list(DEFAULT_SETTINGS["resolution"]))
    sim_hz: float = 60.0
    max_fps: int = 120
    starting_currency: int = 0
    starting_score: int = 0
    initial_weapon: str = DEFAULT_INITIAL_WEAPON

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        merged = {**DEFAULT_SETTINGS, **data}
        try:
            resolution = [int(v) for v in merged.get("resolution")][:2]
        except (TypeError, ValueError):
            resolution = []
        if len(resolution) != 2:
            resolution = list(DEFAULT_SETTINGS["resolution"])
        try:
            sim_hz = float(merged.get("simHz", 60))
        except (TypeError, ValueError):
            sim_hz = 60.0
        if sim_hz <= 0:
            sim_hz = 60.0
        return cls(
            resolution=resolution,
            sim_hz=sim_hz,
            max_fps=_non_negative_int(merged.get("maxFps"), 120),
            starting_currency=_non_negative_int(merged.get("startingCurrency"), 0),
            starting_score=_non_negative_int(merged.get("startingScore"), 0),
            initial_weapon=str(merged.get("initialWeapon") or DEFAULT_INITIAL_WEAPON),
        )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = path or Path("settings.json")
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)


__all__ = [
    "DEFAULT_CURRENCY_BOOST",
    "DEFAULT_ENERGY_PROJECTILE_SPEED",
    "DEFAULT_INITIAL_WEAPON",
    "DEFAULT_RAPID_FIRE_MULTIPLIER",
    "FALLBACK_COOLDOWN_MS",
    "NEUTRAL_MULTIPLIER",
    "Settings",
]
