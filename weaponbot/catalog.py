"""Static weapon dataset used to seed and validate the weapons table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import yaml

from .models import WeaponSpec

logger = logging.getLogger("weaponbot.catalog")

PACKAGE_DIR = Path(__file__).resolve().parent
CATALOG_FILE = PACKAGE_DIR / "data" / "weapons.yaml"


@dataclass(frozen=True)
class WeaponCatalog:
    weapons: Tuple[WeaponSpec, ...]
    types: Tuple[str, ...]

    def names(self, weapon_type: Optional[str] = None) -> List[str]:
        if weapon_type is None:
            return [weapon.name for weapon in self.weapons]
        return [weapon.name for weapon in self.weapons if weapon.weapon_type == weapon_type]

    def resolve_type(self, raw: Optional[str]) -> Optional[str]:
        if raw is None:
            return None
        return self._type_lookup().get(raw.strip().lower())

    def resolve_weapon(self, raw: Optional[str]) -> Optional[str]:
        if raw is None:
            return None
        return self._weapon_lookup().get(raw.strip().lower())

    def type_of(self, name: str) -> Optional[str]:
        for weapon in self.weapons:
            if weapon.name == name:
                return weapon.weapon_type
        return None

    def _type_lookup(self) -> Dict[str, str]:
        return {weapon_type.lower(): weapon_type for weapon_type in self.types}

    def _weapon_lookup(self) -> Dict[str, str]:
        return {weapon.name.lower(): weapon.name for weapon in self.weapons}

    def __len__(self) -> int:
        return len(self.weapons)


def catalog_from_mapping(payload: Mapping[str, object]) -> WeaponCatalog:
    groups = payload.get("weapons") if isinstance(payload, Mapping) else None
    if not isinstance(groups, Mapping) or not groups:
        raise ValueError("Weapon catalog must define a non-empty 'weapons' mapping.")
    weapons: List[WeaponSpec] = []
    types: List[str] = []
    seen: Dict[str, str] = {}
    for weapon_type, names in groups.items():
        type_name = str(weapon_type).strip()
        if not type_name:
            raise ValueError("Weapon class names must not be empty.")
        if not isinstance(names, list):
            raise ValueError(f"Weapon class {type_name!r} must list weapon names.")
        types.append(type_name)
        for raw_name in names:
            name = str(raw_name).strip()
            if not name:
                continue
            key = name.lower()
            if key in seen:
                raise ValueError(f"Weapon {name!r} is listed under both {seen[key]!r} and {type_name!r}.")
            seen[key] = type_name
            weapons.append(WeaponSpec(name=name, weapon_type=type_name))
    return WeaponCatalog(weapons=tuple(weapons), types=tuple(types))


def load_catalog(path: Optional[Path] = None) -> WeaponCatalog:
    catalog_path = path or CATALOG_FILE
    try:
        payload = yaml.safe_load(catalog_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse {catalog_path}: {exc}") from exc
    catalog = catalog_from_mapping(payload)
    logger.debug("Loaded %d weapons in %d classes from %s", len(catalog), len(catalog.types), catalog_path)
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> WeaponCatalog:
    return load_catalog()


__all__ = [
    "CATALOG_FILE",
    "WeaponCatalog",
    "catalog_from_mapping",
    "default_catalog",
    "load_catalog",
]
