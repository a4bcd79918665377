"""Admin key check for administrative overrides (direct hard delete, reseed)"""

import logging
import secrets
from typing import Optional

from fastapi import Header

from .. import config
from ..exceptions import AdminRequired

logger = logging.getLogger(__name__)


def check_admin_key(provided: Optional[str]) -> None:
    """Raise AdminRequired unless `provided` matches ADMIN_API_KEY"""
    expected = config.ADMIN_API_KEY
    if not expected:
        raise AdminRequired("Administrative overrides are disabled (ADMIN_API_KEY not set)")
    if not provided or not secrets.compare_digest(provided, expected):
        logger.warning("🚫 Rejected administrative request with missing or invalid admin key")
        raise AdminRequired()


def require_admin(x_admin_key: Optional[str] = Header(None)) -> None:
    """FastAPI dependency form of check_admin_key"""
    check_admin_key(x_admin_key)
