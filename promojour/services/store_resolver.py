"""Store fan-out and per-store publishing settings."""
from __future__ import annotations

from typing import Iterable

from sqlalchemy.orm import Session

from promojour.models.db import Campaign, SocialConnection, Store, StoreSettings
from promojour.models.db.enums import SocialPlatform
from promojour.utils import get_logger

logger = get_logger(__name__)


def resolve_target_stores(session: Session, campaign: Campaign) -> list[str]:
    """Pinned store when set, otherwise every active store of the organization."""
    if campaign.store_id:
        return [campaign.store_id]
    rows = (
        session.query(Store.id)
        .filter(
            Store.organization_id == campaign.organization_id,
            Store.is_active == True,
        )
        .order_by(Store.created_at.asc(), Store.id.asc())
        .all()
    )
    store_ids = [row[0] for row in rows]
    if not store_ids:
        logger.info("No active stores for campaign", campaign_id=campaign.id, organization_id=campaign.organization_id)
    return store_ids


def auto_publish_platforms(session: Session, store_id: str) -> list[SocialPlatform]:
    settings = session.query(StoreSettings).filter(StoreSettings.store_id == store_id).first()
    if settings is None:
        return []
    platforms: list[SocialPlatform] = []
    if settings.auto_publish_facebook:
        platforms.append(SocialPlatform.FACEBOOK)
    if settings.auto_publish_instagram:
        platforms.append(SocialPlatform.INSTAGRAM)
    return platforms


def usable_connections(
    session: Session,
    store_id: str,
    platforms: Iterable[SocialPlatform],
) -> list[SocialConnection]:
    """Connected connections with a token, for the requested platforms only."""
    wanted = [SocialPlatform(p) for p in platforms]
    if not wanted:
        return []
    connections = (
        session.query(SocialConnection)
        .filter(
            SocialConnection.store_id == store_id,
            SocialConnection.platform.in_(wanted),
            SocialConnection.is_connected == True,
            SocialConnection.access_token.isnot(None),
        )
        .all()
    )
    # Keep the caller's platform order
    order = {p: i for i, p in enumerate(wanted)}
    return sorted(connections, key=lambda c: order[c.platform])


__all__ = ["resolve_target_stores", "auto_publish_platforms", "usable_connections"]
