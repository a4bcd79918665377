"""Mapping repository - Database operations for manager/store mappings"""

from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...exceptions import PersistenceError
from ...models import DEFAULT_TRADE_TYPE, DEFAULT_WAREHOUSE_CODE, ManagerStoreMapping

MAPPING_KIND = "manager-mappings"


def mapping_fields(entry: dict) -> dict:
    """Column values for one mapping, with warehouse and trade type defaults applied"""
    return {
        "manager_code": entry.get("manager_code"),
        "manager_name": entry.get("manager_name") or "",
        "store_name": entry.get("store_name") or "",
        "store_code": entry.get("store_code"),
        "warehouse_code": entry.get("warehouse_code") or DEFAULT_WAREHOUSE_CODE,
        "trade_type": entry.get("trade_type") or DEFAULT_TRADE_TYPE,
    }


class MappingRepository:
    """Repository for manager/store mapping operations"""

    @staticmethod
    def get_mappings(db: Session) -> list[ManagerStoreMapping]:
        return (
            db.query(ManagerStoreMapping)
            .order_by(ManagerStoreMapping.store_name, ManagerStoreMapping.manager_name)
            .all()
        )

    @staticmethod
    def get_mapping(db: Session, mapping_id: str) -> Optional[ManagerStoreMapping]:
        return db.query(ManagerStoreMapping).filter(ManagerStoreMapping.id == mapping_id).first()

    @staticmethod
    def create_mapping(db: Session, **mapping_data) -> ManagerStoreMapping:
        mapping = ManagerStoreMapping(**mapping_data)
        db.add(mapping)
        db.commit()
        db.refresh(mapping)
        return mapping

    @staticmethod
    def update_mapping(db: Session, mapping: ManagerStoreMapping, **updates) -> ManagerStoreMapping:
        for key, value in updates.items():
            setattr(mapping, key, value)
        db.commit()
        db.refresh(mapping)
        return mapping

    @staticmethod
    def delete_mapping(db: Session, mapping: ManagerStoreMapping) -> None:
        db.delete(mapping)
        db.commit()

    @staticmethod
    def count(db: Session) -> int:
        return db.query(ManagerStoreMapping).count()

    @staticmethod
    def replace_all(db: Session, rows: list[dict]) -> int:
        db.query(ManagerStoreMapping).delete(synchronize_session=False)
        db.add_all(ManagerStoreMapping(**row) for row in rows)
        db.commit()
        return len(rows)


class MappingSeedTarget:
    """Adapts the mapping table to the Seeder's count/replace_all interface"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def count(self, kind: str = MAPPING_KIND) -> int:
        db = self.session_factory()
        try:
            return MappingRepository.count(db)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to count mappings") from e
        finally:
            db.close()

    def replace_all(self, kind: str, entries: list[dict]) -> int:
        db = self.session_factory()
        try:
            return MappingRepository.replace_all(db, [mapping_fields(entry) for entry in entries])
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError("Failed to replace mappings") from e
        finally:
            db.close()
