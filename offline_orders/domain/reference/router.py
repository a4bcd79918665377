"""Reference router - read/replace endpoints for the intake lookup lists"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request

from ...exceptions import InvalidFilter
from ...services.seeding import Seeder, load_snapshot
from ...shared.admin import require_admin
from .repository import REFERENCE_KINDS
from .service import ReferenceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reference"])


def get_reference_service(request: Request) -> ReferenceService:
    """Dependency injection for ReferenceService over the configured store"""
    return ReferenceService(request.app.state.reference_store)


def _entries_from_body(body: Any) -> list:
    # Accept a bare list or the {data: [...]} envelope the GET returns
    if isinstance(body, dict):
        body = body.get("data")
    if not isinstance(body, list):
        raise InvalidFilter("Body must be a list of entries")
    return body


def _register(kind: str) -> None:
    async def get_entries(service: ReferenceService = Depends(get_reference_service)):
        entries = service.get_all(kind)
        return {"success": True, "count": len(entries), "data": entries}

    async def replace_entries(
        body: Any = Body(...),
        force: bool = Query(False),
        service: ReferenceService = Depends(get_reference_service),
    ):
        count = service.replace_all(kind, _entries_from_body(body), force=force)
        return {"success": True, "count": count}

    name = kind.replace("-", "_")
    router.add_api_route(f"/{kind}", get_entries, methods=["GET"], name=f"get_{name}")
    router.add_api_route(f"/{kind}", replace_entries, methods=["PUT"], name=f"replace_{name}")


for _kind in REFERENCE_KINDS:
    _register(_kind)


@router.post("/reference/{kind}/reseed", dependencies=[Depends(require_admin)])
async def reseed_reference(kind: str, service: ReferenceService = Depends(get_reference_service)):
    """Administrative recovery: replace a list with its bundled snapshot"""
    service.check_kind(kind)
    result = Seeder(service.store).reseed(kind, load_snapshot(kind))
    return {"success": True, **result}
