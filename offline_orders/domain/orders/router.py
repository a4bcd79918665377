"""Order router - FastAPI endpoints for offline orders"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...exceptions import InvalidFilter
from ...shared.admin import check_admin_key
from .schemas import OrderCreate, OrderUpdate, SyncRequest, serialize_order
from .service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ordersOffData", tags=["Orders"])


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency injection for OrderService"""
    return OrderService(db)


@router.post("")
async def create_order(data: OrderCreate, service: OrderService = Depends(get_order_service)):
    """Save an order written at the store"""
    order = service.create_order(data)
    return {"success": True, "message": "Order Saved", "orderId": order.id, "data": serialize_order(order)}


@router.get("")
async def list_orders(
    store_name: Optional[str] = Query(None),
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    keyword: Optional[str] = Query(None),
    view: Optional[str] = Query("active"),
    service: OrderService = Depends(get_order_service),
):
    """List orders for one view (active / completed / trash) with optional filters"""
    orders = service.list_orders(
        view=view, store_name=store_name, start_date=startDate, end_date=endDate, keyword=keyword
    )
    return {"success": True, "count": len(orders), "data": [serialize_order(o) for o in orders]}


# ============================================================================
# ERP SYNC
# ============================================================================


@router.post("/sync")
async def sync_orders(data: SyncRequest, service: OrderService = Depends(get_order_service)):
    """
    Mark orders as sent to ERP.
    Accepts plain ids, per-id results, or (customer_name, total_amount) matches.
    """
    if data.results:
        updated = service.sync_batch(data.results)
    elif data.matches:
        updated = service.sync_by_content(data.matches)
    elif data.orderIds:
        updated = service.sync_ids(data.orderIds)
    else:
        raise InvalidFilter("No IDs provided")
    return {"success": True, "updatedCount": updated}


@router.put("/restore/{order_id}")
async def restore_order(order_id: str, service: OrderService = Depends(get_order_service)):
    """Move an order out of trash back to the active list"""
    order = service.restore(order_id)
    return {"success": True, "message": "Restored successfully", "data": serialize_order(order)}


# ============================================================================
# SINGLE ORDER OPERATIONS
# ============================================================================


@router.get("/{order_id}")
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    order = service.get_order(order_id)
    return {"success": True, "data": serialize_order(order)}


@router.put("/{order_id}")
async def update_order(
    order_id: str,
    patch: OrderUpdate,
    service: OrderService = Depends(get_order_service),
):
    """Edit order fields; unknown fields are ignored"""
    order = service.update_order(order_id, patch)
    return {"success": True, "message": "Updated successfully", "data": serialize_order(order)}


@router.delete("/{order_id}")
async def delete_order(
    order_id: str,
    delete_type: str = Query("soft", alias="type"),
    force: bool = Query(False),
    x_admin_key: Optional[str] = Header(None),
    service: OrderService = Depends(get_order_service),
):
    """
    Soft delete (default) moves the order to trash. Hard delete removes a
    trashed order permanently; with force=true and a valid X-Admin-Key it
    also removes an order that is not in trash.
    """
    delete_type = delete_type.lower()
    if delete_type == "hard":
        if force:
            check_admin_key(x_admin_key)
        service.hard_delete(order_id, force=force)
        return {"success": True, "message": "Deleted permanently"}
    if delete_type != "soft":
        raise InvalidFilter(f"Unknown delete type: {delete_type}")

    service.soft_delete(order_id)
    return {"success": True, "message": "Moved to trash"}
