"""Low promotion stock alerts.

For every store with alert emails enabled, count the organization's active
and scheduled promotions and email the store when either count is below its
minimum. A store that cannot be alerted is reported, not fatal.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from promojour import config
from promojour.integrations import BrevoClient
from promojour.models.db import Promotion, Store, StoreSettings
from promojour.models.db.enums import PromotionStatus
from promojour.utils import get_logger

logger = get_logger(__name__)


@dataclass
class StoreAlert:
    store_id: str
    store_name: str
    recipient: str
    active_count: int
    upcoming_count: int
    min_active: int
    min_upcoming: int

    def email_params(self) -> Dict[str, str]:
        return {
            "MAGASIN": self.store_name,
            "NOMBRE_ACTIVES": str(self.active_count),
            "MINIMUM_ACTIVES": str(self.min_active),
            "NOMBRE_A_VENIR": str(self.upcoming_count),
            "MINIMUM_A_VENIR": str(self.min_upcoming),
            "TYPE": "alerte_promotions",
            "MESSAGE": (
                f'Votre magasin "{self.store_name}" a {self.active_count} promotion(s) active(s) '
                f"(minimum recommandé: {self.min_active}) et {self.upcoming_count} promotion(s) à venir "
                f"(minimum recommandé: {self.min_upcoming})."
            ),
        }


def _count(session: Session, organization_id: str, status: PromotionStatus) -> int:
    return (
        session.query(func.count(Promotion.id))
        .filter(Promotion.organization_id == organization_id, Promotion.status == status)
        .scalar()
        or 0
    )


def evaluate_store(session: Session, settings: StoreSettings) -> Optional[StoreAlert]:
    """Return the alert to send for this store, or None when stock is sufficient."""
    store = session.get(Store, settings.store_id)
    if store is None:
        raise LookupError(f"Store {settings.store_id} not found")

    min_active = settings.min_active_promotions or int(config.ALERT_SETTINGS["default_min_active"])
    min_upcoming = settings.min_upcoming_promotions or int(config.ALERT_SETTINGS["default_min_upcoming"])
    active_count = _count(session, store.organization_id, PromotionStatus.ACTIVE)
    upcoming_count = _count(session, store.organization_id, PromotionStatus.SCHEDULED)

    if active_count >= min_active and upcoming_count >= min_upcoming:
        return None

    recipient = store.email or (store.organization.email if store.organization else None)
    if not recipient:
        raise LookupError(f"No alert recipient for store {store.id}")
    return StoreAlert(
        store_id=store.id,
        store_name=store.name,
        recipient=recipient,
        active_count=active_count,
        upcoming_count=upcoming_count,
        min_active=min_active,
        min_upcoming=min_upcoming,
    )


async def check_promotion_alerts(session: Session, client: BrevoClient) -> Dict[str, Any]:
    # Fail before touching any store when email is not configured
    config.require_setting("BREVO_API_KEY")

    enabled = (
        session.query(StoreSettings)
        .filter(StoreSettings.alert_email_enabled == True)
        .all()
    )
    logger.info("Promotion alert check started", stores=len(enabled))

    results: list[Dict[str, Any]] = []
    for settings in enabled:
        try:
            alert = evaluate_store(session, settings)
        except LookupError as e:
            logger.warning("Store skipped during alert check", store_id=settings.store_id, error=str(e))
            results.append({"store_id": settings.store_id, "success": False, "error": str(e)})
            continue
        if alert is None:
            continue
        try:
            message_id = await client.send_template(
                to_email=alert.recipient,
                template_id=int(config.ALERT_SETTINGS["template_id"]),
                params=alert.email_params(),
            )
        except Exception as e:
            logger.error("Alert email failed", store_id=alert.store_id, error=str(e))
            results.append({"store_id": alert.store_id, "store": alert.store_name, "success": False, "error": str(e)})
            continue
        results.append(
            {"store_id": alert.store_id, "store": alert.store_name, "success": True, "message_id": message_id}
        )

    alerts_sent = sum(1 for r in results if r["success"])
    logger.info("Promotion alert check completed", stores_checked=len(enabled), alerts_sent=alerts_sent)
    return {"stores_checked": len(enabled), "alerts_sent": alerts_sent, "results": results}


__all__ = ["StoreAlert", "evaluate_store", "check_promotion_alerts"]
