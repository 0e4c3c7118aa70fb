"""Bundled content and the content loader."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from armory.assets.content import ContentManager
from armory.combat.catalog import CatalogError


def test_bundled_content_loads() -> None:
    content = ContentManager()
    content.load()
    assert content.weapons.ids() == ["bullet", "laser", "slow_field"]
    assert content.weapons.get("laser").is_energy_based
    assert {powerup.id for powerup in content.powerups} == {"shield", "rapid_fire", "cash_boost"}
    rapid = next(p for p in content.powerups if p.id == "rapid_fire")
    assert rapid.effect == "weapon_cooldown_reduction"
    assert rapid.multiplier == pytest.approx(0.5)


def test_custom_root(tmp_path: Path) -> None:
    weapons = tmp_path / "data" / "weapons"
    weapons.mkdir(parents=True)
    (weapons / "one.json").write_text(
        json.dumps({"id": "pea", "name": "Pea", "baseCost": 5, "baseCooldownMs": 100, "baseRange": 40})
    )
    content = ContentManager(tmp_path)
    content.load()
    assert content.weapons.ids() == ["pea"]
    assert content.powerups == []


def test_invalid_json_raises(tmp_path: Path) -> None:
    weapons = tmp_path / "data" / "weapons"
    weapons.mkdir(parents=True)
    (weapons / "broken.json").write_text("{")
    with pytest.raises(CatalogError):
        ContentManager(tmp_path).load()
