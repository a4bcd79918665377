"""
Seeding bootstrapper
Populates empty reference collections from the JSON snapshots bundled in
seed_data/ on startup
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)

SEED_DIR = Path(__file__).resolve().parent.parent / "seed_data"


def load_snapshot(name: str, seed_dir: Optional[Path] = None) -> list[dict]:
    """Read seed_data/<name>.json; the file must hold a JSON list"""
    path = (seed_dir or SEED_DIR) / f"{name}.json"
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Snapshot {path.name} must contain a JSON list")
    return data


class Seeder:
    """
    Seeds any store exposing count(kind) and replace_all(kind, entries).
    seed() never touches a collection that already has data; reseed() always
    reloads it.
    """

    def __init__(self, store):
        self.store = store

    def seed(self, kind: str, snapshot: list[dict]) -> dict:
        existing = self.store.count(kind)
        if existing > 0:
            logger.info(f"Seed skipped for {kind}: {existing} record(s) already present")
            return {"seeded": False, "count": existing}

        count = self.store.replace_all(kind, snapshot)
        logger.info(f"🌱 Seeded {kind} with {count} record(s)")
        return {"seeded": True, "count": count}

    def reseed(self, kind: str, snapshot: list[dict]) -> dict:
        count = self.store.replace_all(kind, snapshot)
        logger.warning(f"🌱 Reseeded {kind} with {count} record(s) (existing data replaced)")
        return {"seeded": True, "count": count}


def seed_all(targets: dict, seed_dir: Optional[Path] = None) -> dict:
    """
    Seed every kind in `targets` ({kind: store}). A snapshot that cannot be
    read, or a store that fails, is logged and skipped so startup continues.
    """
    results = {}
    for kind, store in targets.items():
        try:
            snapshot = load_snapshot(kind, seed_dir)
        except (OSError, ValueError) as e:
            logger.error(f"❌ Seed snapshot for {kind} unavailable: {e}")
            continue
        try:
            results[kind] = Seeder(store).seed(kind, snapshot)
        except PersistenceError as e:
            logger.error(f"❌ Seeding {kind} failed: {e}")
    return results
