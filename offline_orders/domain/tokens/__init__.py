"""Tokens domain - Cafe24 OAuth token store and refresher"""

from .repository import TokenPair, TokenRepository
from .service import TokenManager

__all__ = ["TokenManager", "TokenPair", "TokenRepository"]
