"""Mapping service - manager to store / warehouse assignments"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ...database import db_operation
from ...exceptions import EmptyPayload, NotFound
from ...models import ManagerStoreMapping
from ...shared.validators import require_valid_id
from .repository import MappingRepository, mapping_fields
from .schemas import MappingCreate, MappingUpdate

logger = logging.getLogger(__name__)


class MappingService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = MappingRepository()

    def get_mappings(self) -> list[ManagerStoreMapping]:
        with db_operation(self.db, "Mapping list"):
            return self.repo.get_mappings(self.db)

    def get_mapping(self, mapping_id: str) -> ManagerStoreMapping:
        require_valid_id(mapping_id)
        with db_operation(self.db, "Mapping lookup"):
            mapping = self.repo.get_mapping(self.db, mapping_id)
        if not mapping:
            raise NotFound("Mapping not found")
        return mapping

    def create_mapping(self, data: MappingCreate) -> ManagerStoreMapping:
        with db_operation(self.db, "Mapping save"):
            mapping = self.repo.create_mapping(self.db, **mapping_fields(data.model_dump()))
        logger.info(f"Mapping created: {mapping.manager_name} -> {mapping.store_name}")
        return mapping

    def update_mapping(self, mapping_id: str, data: MappingUpdate) -> ManagerStoreMapping:
        mapping = self.get_mapping(mapping_id)
        updates = {key: value for key, value in data.model_dump(exclude_unset=True).items() if value is not None}
        updates["updated_at"] = datetime.utcnow()
        with db_operation(self.db, "Mapping update"):
            return self.repo.update_mapping(self.db, mapping, **updates)

    def delete_mapping(self, mapping_id: str) -> None:
        mapping = self.get_mapping(mapping_id)
        with db_operation(self.db, "Mapping delete"):
            self.repo.delete_mapping(self.db, mapping)

    def bulk_import(self, entries: list[MappingCreate], force: bool = False) -> int:
        """Replace every mapping with `entries`; empty imports need `force`"""
        if not entries and not force:
            raise EmptyPayload()
        rows = [mapping_fields(entry.model_dump()) for entry in entries]
        with db_operation(self.db, "Mapping import"):
            count = self.repo.replace_all(self.db, rows)
        logger.info(f"💾 Imported {count} manager/store mapping(s)")
        return count
