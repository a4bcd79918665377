"""
Cafe24 token lifecycle
Owns the in-memory access/refresh token pair and refreshes it against the
Cafe24 OAuth endpoint
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError

from ...exceptions import UpstreamAuthError
from .repository import TokenPair, TokenRepository

logger = logging.getLogger(__name__)


class TokenManager:
    """
    Single owner of the process-wide token pair.

    Refreshes are single-flight: callers pass the access token they saw
    rejected, and a caller that acquires the lock after another request has
    already rotated the pair gets the new pair without a second exchange.
    """

    def __init__(
        self,
        mall_id: str,
        client_id: str,
        client_secret: str,
        repository: TokenRepository,
        http_client: httpx.AsyncClient,
    ):
        self.token_url = f"https://{mall_id}.cafe24api.com/api/v2/oauth/token"
        self.client_id = client_id
        self.client_secret = client_secret
        self.repository = repository
        self.http_client = http_client
        self._pair: Optional[TokenPair] = None
        self._lock = asyncio.Lock()
        self.refresh_count = 0

    @property
    def access_token(self) -> Optional[str]:
        return self._pair.access_token if self._pair else None

    def get(self) -> Optional[TokenPair]:
        return self._pair

    def load(
        self, fallback_access_token: Optional[str] = None, fallback_refresh_token: Optional[str] = None
    ) -> Optional[TokenPair]:
        """
        Load the stored pair. When the store is empty, fall back to the pair
        supplied through configuration and persist it.
        """
        try:
            stored = self.repository.load()
        except SQLAlchemyError as e:
            logger.error(f"❌ Token Load Error: {e}")
            stored = None

        if stored:
            self._pair = stored
            logger.info("🔑 Token loaded from DB")
            return self._pair

        if fallback_access_token and fallback_refresh_token:
            logger.info("⚠️ No tokens in DB, using configured tokens")
            self._pair = TokenPair(fallback_access_token, fallback_refresh_token, datetime.utcnow())
            self._persist(self._pair)
        else:
            logger.warning("⚠️ No Cafe24 tokens available - catalog requests will fail until refreshed")
        return self._pair

    def invalidate(self, value: str = "INVALID_TOKEN_TEST") -> None:
        """Corrupt the in-memory access token (debug route) to exercise the refresh path"""
        if self._pair:
            self._pair = TokenPair(value, self._pair.refresh_token, self._pair.updated_at)
        else:
            self._pair = TokenPair(value, "", None)

    async def refresh(self, stale_access_token: Optional[str] = None) -> TokenPair:
        """
        Exchange the refresh token for a new pair.

        Raises UpstreamAuthError if the exchange is rejected. A failure to
        persist the new pair only logs a warning; the pair stays usable for
        the lifetime of this process.
        """
        async with self._lock:
            if (
                stale_access_token is not None
                and self._pair is not None
                and self._pair.access_token != stale_access_token
            ):
                logger.info("🔄 Token already refreshed by a concurrent request")
                return self._pair

            pair = await self._exchange()
            self._pair = pair
            self._persist(pair)
            logger.info("✅ Token refreshed successfully")
            return pair

    async def _exchange(self) -> TokenPair:
        if not self._pair or not self._pair.refresh_token:
            raise UpstreamAuthError("No refresh token available")

        logger.info("🚨 Refreshing Cafe24 access token...")
        self.refresh_count += 1
        try:
            response = await self.http_client.post(
                self.token_url,
                auth=(self.client_id, self.client_secret),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                data={"grant_type": "refresh_token", "refresh_token": self._pair.refresh_token},
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ Token refresh request failed: {e}")
            raise UpstreamAuthError(f"Token refresh request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"❌ Token refresh failed ({response.status_code}): {response.text}")
            raise UpstreamAuthError(
                "Failed to refresh Cafe24 token", status=response.status_code, body=response.text
            )

        token_data = response.json()
        access_token = token_data.get("access_token")
        refresh_token = token_data.get("refresh_token")
        if not access_token or not refresh_token:
            logger.error(f"❌ Invalid token response from Cafe24: {token_data}")
            raise UpstreamAuthError(
                "Invalid token response from Cafe24", status=response.status_code, body=response.text
            )

        return TokenPair(access_token, refresh_token, datetime.utcnow())

    def _persist(self, pair: TokenPair) -> None:
        try:
            self.repository.save(pair)
            logger.info("💾 Tokens saved to DB")
        except SQLAlchemyError as e:
            logger.warning(f"⚠️ Token save failed, new token kept in memory only: {e}")
