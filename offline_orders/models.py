import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    String,
    Text,
)

from .database import Base

UNASSIGNED = "미지정"
DEFAULT_WAREHOUSE_CODE = "Y000"
DEFAULT_TRADE_TYPE = "VAT-applicable"
TOKEN_STORE_KEY = "cafe24"


def generate_id():
    """Generate the server-side identifier for a new record"""
    return str(uuid.uuid4())


class Cafe24Token(Base):
    """Singleton row holding the Cafe24 OAuth token pair (possibly encrypted)"""

    __tablename__ = "cafe24_tokens"

    key = Column(String(50), primary_key=True, default=TOKEN_STORE_KEY)
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Order(Base):
    __tablename__ = "orders_off_data"

    id = Column(String(36), primary_key=True, default=generate_id)
    store_name = Column(String(255), default=UNASSIGNED, index=True)
    manager_name = Column(String(255), default=UNASSIGNED)
    customer_name = Column(String(255), nullable=True, index=True)
    customer_phone = Column(String(50), nullable=True)
    address = Column(Text, default="")
    memo = Column(Text, nullable=True)

    items = Column(JSON, nullable=False, default=list)
    # Legacy flat fields; product_name doubles as the searchable item summary
    product_name = Column(Text, nullable=True)
    option_name = Column(String(255), nullable=True)
    quantity = Column(Integer, default=1)
    price = Column(Integer, default=0)

    total_amount = Column(Integer, default=0, nullable=False)
    shipping_cost = Column(Integer, default=0, nullable=False)

    is_synced = Column(Boolean, default=False, nullable=False, index=True)
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    external_sync_success = Column(Boolean, nullable=True)
    external_sync_message = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=True)
    synced_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True)


class ReferenceEntry(Base):
    """One row of a replace-all reference list (stores, managers, warehouses, item codes)"""

    __tablename__ = "reference_entries"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String(50), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class ManagerStoreMapping(Base):
    __tablename__ = "manager_store_mappings"

    id = Column(String(36), primary_key=True, default=generate_id)
    manager_code = Column(String(50), nullable=True, index=True)
    manager_name = Column(String(255), nullable=False)
    store_name = Column(String(255), nullable=False)
    store_code = Column(String(50), nullable=True)
    warehouse_code = Column(String(50), nullable=False, default=DEFAULT_WAREHOUSE_CODE)
    trade_type = Column(String(50), nullable=False, default=DEFAULT_TRADE_TYPE)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)


class CouponMapping(Base):
    """Cafe24 coupon linked to a locally curated product list"""

    __tablename__ = "coupon_mappings"

    id = Column(String(36), primary_key=True, default=generate_id)
    coupon_no = Column(String(100), nullable=False, index=True)
    coupon_name = Column(String(255), nullable=True)
    products = Column(JSON, nullable=False, default=list)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
