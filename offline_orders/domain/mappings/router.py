"""Mapping router - manager/store mapping CRUD, bulk import and reseed"""

import logging

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ...database import get_db
from ...services.seeding import Seeder, load_snapshot
from ...shared.admin import require_admin
from .repository import MAPPING_KIND, MappingSeedTarget
from .schemas import MappingBulkRequest, MappingCreate, MappingUpdate, serialize_mapping
from .service import MappingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mappings", tags=["Mappings"])


def get_mapping_service(db: Session = Depends(get_db)) -> MappingService:
    """Dependency injection for MappingService"""
    return MappingService(db)


@router.get("")
async def get_mappings(service: MappingService = Depends(get_mapping_service)):
    mappings = service.get_mappings()
    return {"success": True, "count": len(mappings), "data": [serialize_mapping(m) for m in mappings]}


@router.post("")
async def create_mapping(data: MappingCreate, service: MappingService = Depends(get_mapping_service)):
    mapping = service.create_mapping(data)
    return {"success": True, "data": serialize_mapping(mapping)}


@router.post("/bulk")
async def bulk_import_mappings(
    data: MappingBulkRequest,
    force: bool = Query(False),
    service: MappingService = Depends(get_mapping_service),
):
    """Replace all mappings with the uploaded list"""
    count = service.bulk_import(data.mappings, force=force)
    return {"success": True, "count": count}


@router.post("/reseed", dependencies=[Depends(require_admin)])
async def reseed_mappings(request: Request):
    """Administrative recovery: reload mappings from the bundled snapshot"""
    target = MappingSeedTarget(request.app.state.session_factory)
    result = Seeder(target).reseed(MAPPING_KIND, load_snapshot(MAPPING_KIND))
    return {"success": True, **result}


@router.get("/{mapping_id}")
async def get_mapping(mapping_id: str, service: MappingService = Depends(get_mapping_service)):
    return {"success": True, "data": serialize_mapping(service.get_mapping(mapping_id))}


@router.put("/{mapping_id}")
async def update_mapping(
    mapping_id: str, data: MappingUpdate, service: MappingService = Depends(get_mapping_service)
):
    mapping = service.update_mapping(mapping_id, data)
    return {"success": True, "data": serialize_mapping(mapping)}


@router.delete("/{mapping_id}")
async def delete_mapping(mapping_id: str, service: MappingService = Depends(get_mapping_service)):
    service.delete_mapping(mapping_id)
    return {"success": True, "message": "Deleted successfully"}
