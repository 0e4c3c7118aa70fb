"""Content loading entry point."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from armory.combat.catalog import CatalogError, WeaponCatalog
from armory.engine.logger import ChannelLogger, default_channel
from armory.powerups.timeline import PowerupDefinition

ASSETS_ROOT = Path(__file__).resolve().parent


def _read_entries(directory: Path, logger: ChannelLogger) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    if not directory.exists():
        return entries
    for path in sorted(directory.glob("*.json")):
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise CatalogError(f"{path.name}: invalid JSON ({exc.msg})") from exc
        if isinstance(data, dict):
            data = [data]
        logger.debug("Loaded %d entries from %s", len(data), path.name)
        entries.extend(data)
    return entries


class ContentManager:
    """Loads the weapon catalog and powerup definitions from ``root/data``."""

    def __init__(self, root: Path = ASSETS_ROOT, logger: Optional[ChannelLogger] = None) -> None:
        self.root = root
        self._logger = logger or default_channel("weapons")
        self.weapons = WeaponCatalog([])
        self.powerups: List[PowerupDefinition] = []

    def load(self) -> None:
        weapon_entries = _read_entries(self.root / "data" / "weapons", self._logger)
        self.weapons = WeaponCatalog.from_list(weapon_entries)
        powerup_entries = _read_entries(self.root / "data" / "powerups", self._logger)
        self.powerups = [
            PowerupDefinition.from_dict(entry, f"powerups[{i}]")
            for i, entry in enumerate(powerup_entries)
        ]
        self._logger.info(
            "Loaded %d weapons and %d powerups", len(self.weapons), len(self.powerups)
        )


__all__ = ["ASSETS_ROOT", "ContentManager"]
