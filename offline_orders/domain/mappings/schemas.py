"""Mapping schemas - manager/store mapping payloads"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MappingCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    manager_code: Optional[str] = None
    manager_name: str
    store_name: str
    store_code: Optional[str] = None
    warehouse_code: Optional[str] = None
    trade_type: Optional[str] = None

    @field_validator("manager_name", "store_name")
    @classmethod
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class MappingUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    manager_code: Optional[str] = None
    manager_name: Optional[str] = None
    store_name: Optional[str] = None
    store_code: Optional[str] = None
    warehouse_code: Optional[str] = None
    trade_type: Optional[str] = None


class MappingBulkRequest(BaseModel):
    mappings: list[MappingCreate]


class MappingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    manager_code: Optional[str] = None
    manager_name: str
    store_name: str
    store_code: Optional[str] = None
    warehouse_code: str
    trade_type: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def serialize_mapping(mapping) -> dict:
    return MappingResponse.model_validate(mapping).model_dump(by_alias=True, mode="json")
