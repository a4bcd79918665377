"""Catalog router - Cafe24 product search endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from .client import Cafe24Client
from .schemas import CatalogSearchResponse, OptionListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cafe24", tags=["Catalog"])


def get_catalog_client(request: Request) -> Cafe24Client:
    """Dependency injection for the process-wide Cafe24Client"""
    return request.app.state.catalog_client


@router.get("/products", response_model=CatalogSearchResponse)
async def search_products(
    keyword: Optional[str] = Query(None),
    client: Cafe24Client = Depends(get_catalog_client),
):
    """Search Cafe24 products (with options and images) by name"""
    items = await client.search((keyword or "").strip())
    return {"success": True, "count": len(items), "data": items}


@router.get("/products/{product_no}/options", response_model=OptionListResponse)
async def get_product_options(
    product_no: str,
    client: Cafe24Client = Depends(get_catalog_client),
):
    """Get the selectable option values for one product"""
    result = await client.get_options(product_no)
    return {"success": True, **result}
