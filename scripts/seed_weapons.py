"""Create the weapons table, seed it from the catalog and print its status."""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from weaponbot.catalog import default_catalog, load_catalog
from weaponbot.errors import WeaponStoreError
from weaponbot.repository import WeaponRepository


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the WeaponBot weapons table.")
    parser.add_argument(
        "--db-path",
        type=Path,
        default=Path(os.getenv("WEAPONBOT_DB_PATH", "data/weapons.db")),
        help="SQLite database file (defaults to WEAPONBOT_DB_PATH or data/weapons.db).",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Weapon catalog YAML file (defaults to the bundled catalog).",
    )
    parser.add_argument("--reset", action="store_true", help="Clear the exclusion list after seeding.")
    return parser.parse_args()


def main() -> int:
    load_dotenv()
    args = parse_args()

    try:
        catalog = load_catalog(args.catalog) if args.catalog else default_catalog()
    except (OSError, ValueError) as exc:
        print(f"[ERROR] Could not load the weapon catalog: {exc}", file=sys.stderr)
        return 1

    repository = WeaponRepository.from_path(args.db_path, catalog)
    try:
        seeded = repository.initialize()
        print(f"Seeded {seeded} new weapon(s) into {args.db_path}.")
        if args.reset:
            restored = repository.enable_all()
            print(f"Cleared the exclusion list ({restored} weapon(s) re-enabled).")
        stats = repository.stats()
    except WeaponStoreError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    finally:
        repository.dispose()

    print(f"Total: {stats['total']} | Enabled: {stats['enabled']} | Excluded: {stats['disabled']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
