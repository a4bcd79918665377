"""
Cafe24 Admin API client
Authenticated product search with a single token refresh on 401
"""

import logging
from typing import Any, Optional

import httpx

from ...exceptions import CatalogError
from ..tokens import TokenManager
from .normalizers import extract_options, normalize_product

logger = logging.getLogger(__name__)

# One refresh-and-retry per request; a second 401 is terminal
MAX_AUTH_RETRIES = 1
SEARCH_LIMIT = 50


class Cafe24Client:
    """Client for the Cafe24 admin product endpoints"""

    def __init__(
        self,
        mall_id: str,
        api_version: str,
        token_manager: TokenManager,
        http_client: httpx.AsyncClient,
    ):
        self.base_url = f"https://{mall_id}.cafe24api.com/api/v2"
        self.api_version = api_version
        self.tokens = token_manager
        self.http_client = http_client

    def _headers(self, access_token: Optional[str]) -> dict:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "X-Cafe24-Api-Version": self.api_version,
        }

    async def request(
        self, method: str, path: str, params: Optional[dict] = None, json: Any = None
    ) -> dict:
        """
        Issue an authenticated request and return the decoded JSON body.

        Raises CatalogError on non-2xx responses, transport errors, or when
        authorization still fails after one refresh. UpstreamAuthError from
        the refresh itself propagates unchanged.
        """
        url = f"{self.base_url}{path}"

        for attempt in range(MAX_AUTH_RETRIES + 1):
            access_token = self.tokens.access_token
            try:
                response = await self.http_client.request(
                    method, url, params=params, json=json, headers=self._headers(access_token)
                )
            except httpx.HTTPError as e:
                logger.error(f"❌ Cafe24 request failed: {method} {path} - {e}")
                raise CatalogError(f"Cafe24 request failed: {e}") from e

            if response.status_code == 401:
                if attempt < MAX_AUTH_RETRIES:
                    logger.warning("⚠️ 401 Error detected. Refreshing token...")
                    await self.tokens.refresh(stale_access_token=access_token)
                    continue
                logger.error(f"❌ Cafe24 authorization still failing after refresh: {path}")
                raise CatalogError(
                    "Cafe24 authorization failed after token refresh",
                    status=response.status_code,
                    body=response.text,
                )

            if response.status_code >= 400:
                logger.error(f"❌ Cafe24 API error ({response.status_code}): {response.text[:500]}")
                raise CatalogError(
                    f"Cafe24 API error {response.status_code}",
                    status=response.status_code,
                    body=response.text,
                )

            try:
                return response.json()
            except ValueError as e:
                raise CatalogError(
                    "Invalid JSON from Cafe24", status=response.status_code, body=response.text
                ) from e

        # The loop always returns or raises
        raise CatalogError("Cafe24 request retry loop exhausted")

    async def search(self, keyword: str) -> list[dict]:
        """Search displayed, on-sale products by name"""
        if not keyword:
            return []

        logger.info(f"🔍 Searching Product: \"{keyword}\"")
        data = await self.request(
            "GET",
            "/admin/products",
            params={
                "shop_no": 1,
                "product_name": keyword,
                "display": "T",
                "selling": "T",
                "embed": "options,images",
                "limit": SEARCH_LIMIT,
            },
        )
        products = data.get("products") or []
        return [normalize_product(item) for item in products if isinstance(item, dict)]

    async def get_options(self, product_no: str) -> dict:
        """Selected option set (color-like group) for one product"""
        data = await self.request(
            "GET", f"/admin/products/{product_no}", params={"shop_no": 1, "embed": "options"}
        )
        product = data.get("product") or {}
        return {
            "product_no": product.get("product_no", product_no),
            "product_name": product.get("product_name"),
            "options": extract_options(product.get("options")),
        }
