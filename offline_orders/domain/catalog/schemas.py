"""Catalog schemas - response models for Cafe24 product lookups"""

from typing import Optional, Union

from pydantic import BaseModel


class CatalogOption(BaseModel):
    option_code: Optional[Union[str, int]] = None
    option_name: Optional[str] = None


class CatalogItem(BaseModel):
    product_no: Optional[Union[str, int]] = None
    product_name: Optional[str] = None
    price: Optional[int] = None
    options: list[CatalogOption] = []
    detail_image: str = ""
    list_image: str = ""
    small_image: str = ""


class CatalogSearchResponse(BaseModel):
    success: bool = True
    count: int
    data: list[CatalogItem]


class OptionListResponse(BaseModel):
    success: bool = True
    product_no: Optional[Union[str, int]] = None
    product_name: Optional[str] = None
    options: list[CatalogOption]
