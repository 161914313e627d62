"""Push a store's active promotions to Google Merchant Center as products.

The OAuth access token is refreshed (and persisted) when it expires within
the configured margin. A product the Content API rejects is reported in the
results and does not stop the batch; ``last_synced_at`` is updated once the
batch has been attempted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from promojour import config
from promojour.integrations import GoogleMerchantClient, GoogleMerchantError
from promojour.models.db import GoogleMerchantAccount, Promotion, Store
from promojour.models.db.enums import PromotionStatus
from promojour.utils import get_logger, log_business_event
from promojour.utils.time import as_utc, utc_now
from .social_publisher import promotion_url

logger = get_logger(__name__)


class MerchantNotConnectedError(GoogleMerchantError):
    """The store has no usable Merchant Center link."""


@dataclass
class MerchantSyncResult:
    message: str
    results: list[Dict[str, Any]] = field(default_factory=list)

    @property
    def synced(self) -> int:
        return sum(1 for r in self.results if r["success"])


def _iso(value) -> str:
    return as_utc(value).isoformat().replace("+00:00", "Z")


def build_product_payload(promotion: Promotion, store: Optional[Store]) -> Dict[str, Any]:
    settings = config.MERCHANT_SETTINGS
    currency = settings["currency"]
    attributes = promotion.attributes or {}
    original_price = str(attributes.get("original_price") or "0")
    discounted_price = str(attributes.get("discounted_price") or original_price)
    ean_code = attributes.get("cta_ean_code") or attributes.get("ean_code")

    link = (store.website_url if store else None) or promotion_url(promotion.store_id or "", promotion.id)

    product: Dict[str, Any] = {
        "offerId": f"promo-{promotion.id}",
        "contentLanguage": settings["content_language"],
        "targetCountry": settings["target_country"],
        "channel": settings["channel"],
        "title": promotion.title,
        "description": promotion.description or promotion.title,
        "link": link,
        "imageLink": promotion.image_url or settings["placeholder_image_url"],
        "price": {"value": original_price, "currency": currency},
        "availability": "in stock",
        "condition": "new",
        "brand": (store.name if store else None) or settings["default_brand"],
    }
    if discounted_price != original_price:
        product["salePrice"] = {"value": discounted_price, "currency": currency}
        if promotion.start_date and promotion.end_date:
            product["salePriceEffectiveDate"] = f"{_iso(promotion.start_date)}/{_iso(promotion.end_date)}"
    if ean_code:
        product["gtin"] = str(ean_code)
    return product


async def ensure_access_token(session: Session, client: GoogleMerchantClient, account: GoogleMerchantAccount) -> str:
    margin = timedelta(seconds=int(config.MERCHANT_SETTINGS["token_refresh_margin_seconds"]))
    expires_at = as_utc(account.token_expires_at) if account.token_expires_at else None
    if account.access_token and expires_at and expires_at - utc_now() >= margin:
        return account.access_token

    if not account.refresh_token:
        raise MerchantNotConnectedError("Google access token expired and no refresh token is stored")

    logger.info("Refreshing Google access token", store_id=account.store_id)
    refreshed = await client.refresh_access_token(account.refresh_token)
    account.access_token = refreshed.access_token
    account.token_expires_at = refreshed.expires_at
    session.commit()
    return refreshed.access_token


def _linked_account(session: Session, store_id: str, *, require_merchant_id: bool = True) -> GoogleMerchantAccount:
    account = session.query(GoogleMerchantAccount).filter(GoogleMerchantAccount.store_id == store_id).first()
    if account is None:
        raise MerchantNotConnectedError("Google Merchant Center not connected for this store")
    if require_merchant_id and not account.google_merchant_account_id:
        raise MerchantNotConnectedError("Merchant Center account ID not configured")
    return account


async def list_merchant_accounts(session: Session, client: GoogleMerchantClient, store_id: str) -> list[Dict[str, Any]]:
    """Merchant Center accounts reachable with the store's Google token.

    A failed ``authinfo`` lookup yields no accounts; a failed detail lookup
    keeps the account with a generic name.
    """
    account = _linked_account(session, store_id, require_merchant_id=False)
    access_token = await ensure_access_token(session, client, account)
    try:
        info = await client.account_info(access_token)
    except GoogleMerchantError as e:
        logger.warning("Merchant account listing failed", store_id=store_id, error=str(e))
        return []

    accounts: list[Dict[str, Any]] = []
    for identifier in info.get("accountIdentifiers") or []:
        merchant_id = identifier.get("merchantId")
        if not merchant_id:
            continue
        merchant_id = str(merchant_id)
        detail = await client.account_detail(merchant_id, access_token)
        if detail.ok:
            accounts.append({
                "id": merchant_id,
                "name": detail.data.get("name") or f"Account {merchant_id}",
                "website_url": detail.data.get("websiteUrl"),
            })
        else:
            accounts.append({"id": merchant_id, "name": f"Merchant Account {merchant_id}", "website_url": None})
    logger.info("Merchant accounts listed", store_id=store_id, count=len(accounts))
    return accounts


async def list_store_products(session: Session, client: GoogleMerchantClient, store_id: str) -> tuple[str, list[Dict[str, Any]]]:
    """Products currently in the store's Merchant Center account."""
    account = _linked_account(session, store_id)
    access_token = await ensure_access_token(session, client, account)
    merchant_id = account.google_merchant_account_id
    resources = await client.list_products(merchant_id, access_token)
    products = [
        {
            "id": p.get("id"),
            "title": p.get("title"),
            "description": p.get("description"),
            "link": p.get("link"),
            "image_link": p.get("imageLink"),
            "price": p.get("price"),
            "availability": p.get("availability"),
        }
        for p in resources
    ]
    return merchant_id, products


async def sync_store_promotions(session: Session, client: GoogleMerchantClient, store_id: str) -> MerchantSyncResult:
    account = _linked_account(session, store_id)

    access_token = await ensure_access_token(session, client, account)

    promotions = (
        session.query(Promotion)
        .filter(Promotion.store_id == store_id, Promotion.status == PromotionStatus.ACTIVE)
        .order_by(Promotion.created_at.asc())
        .all()
    )
    if not promotions:
        return MerchantSyncResult(message="No active promotions to sync")

    store = session.get(Store, store_id)
    outcome = MerchantSyncResult(message="")
    for promotion in promotions:
        try:
            response = await client.insert_product(
                account.google_merchant_account_id,
                access_token,
                build_product_payload(promotion, store),
            )
        except Exception as e:
            logger.error("Merchant product sync raised", promotion_id=promotion.id, error=str(e))
            outcome.results.append({"promotion_id": promotion.id, "success": False, "error": str(e)})
            continue
        if response.ok:
            outcome.results.append({"promotion_id": promotion.id, "success": True})
        else:
            logger.warning("Merchant rejected product", promotion_id=promotion.id, status=response.status)
            outcome.results.append({"promotion_id": promotion.id, "success": False, "error": response.text})

    account.last_synced_at = utc_now()
    session.commit()

    outcome.message = f"Synced {outcome.synced} of {len(outcome.results)} promotions"
    log_business_event(
        "merchant_sync_completed",
        {"store_id": store_id, "synced": outcome.synced, "total": len(outcome.results)},
    )
    return outcome


__all__ = [
    "MerchantNotConnectedError",
    "MerchantSyncResult",
    "build_product_payload",
    "ensure_access_token",
    "list_merchant_accounts",
    "list_store_products",
    "sync_store_promotions",
]
