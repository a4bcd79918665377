"""
Reference list storage

Two interchangeable backends for the replace-all lookup lists: rows in the
reference_entries table, or one JSON file per list.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...exceptions import PersistenceError
from ...models import ReferenceEntry

logger = logging.getLogger(__name__)

REFERENCE_KINDS = ("ecount-stores", "static-managers", "ecount-warehouses", "item-codes")


class DatabaseReferenceStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_all(self, kind: str) -> list[dict]:
        db = self.session_factory()
        try:
            rows = (
                db.query(ReferenceEntry)
                .filter(ReferenceEntry.kind == kind)
                .order_by(ReferenceEntry.position, ReferenceEntry.id)
                .all()
            )
            return [row.data for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to read {kind}: {e}")
            raise PersistenceError(f"Failed to read {kind}") from e
        finally:
            db.close()

    def count(self, kind: str) -> int:
        db = self.session_factory()
        try:
            return db.query(ReferenceEntry).filter(ReferenceEntry.kind == kind).count()
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to count {kind}: {e}")
            raise PersistenceError(f"Failed to count {kind}") from e
        finally:
            db.close()

    def replace_all(self, kind: str, entries: list[dict]) -> int:
        """Delete every row of `kind`, then insert `entries` in order"""
        db = self.session_factory()
        try:
            db.query(ReferenceEntry).filter(ReferenceEntry.kind == kind).delete(
                synchronize_session=False
            )
            db.add_all(
                ReferenceEntry(kind=kind, position=position, data=entry)
                for position, entry in enumerate(entries)
            )
            db.commit()
            return len(entries)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to replace {kind}: {e}")
            raise PersistenceError(f"Failed to replace {kind}") from e
        finally:
            db.close()


class FileReferenceStore:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def _path(self, kind: str) -> Path:
        return self.data_dir / f"{kind}.json"

    def get_all(self, kind: str) -> list[dict]:
        path = self._path(kind)
        if not path.exists():
            return []
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"❌ Failed to read {path}: {e}")
            raise PersistenceError(f"Failed to read {kind}") from e
        return data if isinstance(data, list) else []

    def count(self, kind: str) -> int:
        return len(self.get_all(kind))

    def replace_all(self, kind: str, entries: list[dict]) -> int:
        path = self._path(kind)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"❌ Failed to write {path}: {e}")
            raise PersistenceError(f"Failed to replace {kind}") from e
        return len(entries)


def build_reference_store(storage: str, session_factory: Callable[[], Session], data_dir: str):
    if storage == "file":
        logger.info(f"📁 Reference lists stored as JSON files in {data_dir}")
        return FileReferenceStore(data_dir)
    return DatabaseReferenceStore(session_factory)
