"""
Google Content API for Shopping client (Merchant Center).

Only what the sync job needs: OAuth refresh-token renewal, product insert and
the ``accounts/authinfo`` lookup used to discover linked merchant accounts.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import aiohttp

from promojour import config
from promojour.utils import get_logger
from promojour.utils.time import utc_now
from .http import HttpResponse, JsonHttpClient

logger = get_logger(__name__)


class GoogleMerchantError(Exception):
    """Raised when Merchant Center or Google OAuth rejects a call."""


@dataclass
class RefreshedToken:
    access_token: str
    expires_at: datetime


class GoogleMerchantClient(JsonHttpClient):
    def __init__(self, session: Optional[aiohttp.ClientSession] = None, *, base_url: Optional[str] = None):
        super().__init__(session)
        self.base_url = (base_url or config.GOOGLE_CONTENT_API_BASE_URL).rstrip("/")

    async def refresh_access_token(self, refresh_token: str) -> RefreshedToken:
        client_id = config.require_setting("GOOGLE_CLIENT_ID")
        client_secret = config.require_setting("GOOGLE_CLIENT_SECRET")
        response = await self.post(
            config.GOOGLE_TOKEN_URL,
            data={
                "client_id": client_id,
                "client_secret": client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
        )
        if not response.ok or "access_token" not in response.data:
            logger.error("Google token refresh failed", status=response.status)
            raise GoogleMerchantError("Failed to refresh access token")
        expires_in = int(response.data.get("expires_in", 3600))
        return RefreshedToken(
            access_token=str(response.data["access_token"]),
            expires_at=utc_now() + timedelta(seconds=expires_in),
        )

    async def insert_product(self, merchant_id: str, access_token: str, product: Dict[str, Any]) -> HttpResponse:
        return await self.post(
            f"{self.base_url}/{merchant_id}/products",
            json=product,
            headers={"Authorization": f"Bearer {access_token}"},
        )

    async def account_info(self, access_token: str) -> Dict[str, Any]:
        response = await self.get(
            f"{self.base_url}/accounts/authinfo",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if not response.ok:
            raise GoogleMerchantError(f"Failed to fetch Merchant Center accounts: HTTP {response.status}")
        return response.data

    async def account_detail(self, merchant_id: str, access_token: str) -> HttpResponse:
        return await self.get(
            f"{self.base_url}/{merchant_id}/accounts/{merchant_id}",
            headers={"Authorization": f"Bearer {access_token}"},
        )

    async def list_products(self, merchant_id: str, access_token: str) -> list[Dict[str, Any]]:
        response = await self.get(
            f"{self.base_url}/{merchant_id}/products",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if not response.ok:
            logger.error("Merchant product listing failed", merchant_id=merchant_id, status=response.status)
            raise GoogleMerchantError(f"Failed to fetch products from Google Merchant Center: {response.text[:200]}")
        return list(response.data.get("resources") or [])


__all__ = ["GoogleMerchantClient", "GoogleMerchantError", "RefreshedToken"]
