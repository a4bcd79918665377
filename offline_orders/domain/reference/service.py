"""Reference service - replace-all lookup lists used by the intake forms"""

import logging

from ...exceptions import EmptyPayload, InvalidFilter, NotFound
from .repository import REFERENCE_KINDS

logger = logging.getLogger(__name__)


class ReferenceService:
    def __init__(self, store):
        self.store = store

    @staticmethod
    def check_kind(kind: str) -> None:
        if kind not in REFERENCE_KINDS:
            raise NotFound(f"Unknown reference list: {kind}")

    def get_all(self, kind: str) -> list[dict]:
        self.check_kind(kind)
        return self.store.get_all(kind)

    def replace_all(self, kind: str, entries: list, force: bool = False) -> int:
        """
        Replace the whole list. An empty payload would wipe the list, so it is
        rejected unless `force` is set.
        """
        self.check_kind(kind)
        if not entries and not force:
            raise EmptyPayload()
        if any(not isinstance(entry, dict) for entry in entries):
            raise InvalidFilter("Every entry must be an object")

        count = self.store.replace_all(kind, entries)
        if count == 0:
            logger.warning(f"⚠️ {kind} cleared by forced empty replace")
        else:
            logger.info(f"💾 {kind} replaced with {count} entries")
        return count
