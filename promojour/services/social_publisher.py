"""Publish one promotion to one store's connected social accounts.

Shared by the campaign distribution job (Reels only) and the manual publish
endpoints (Reel or image post). Every platform attempt ends with exactly one
ledger row; a failing platform never prevents the next one from running.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from promojour import config
from promojour.integrations import MediaRef, PublisherRegistry
from promojour.models.db import Promotion
from promojour.models.db.enums import MediaKind, SocialPlatform
from promojour.utils import get_logger, log_business_event
from . import publication_ledger
from .store_resolver import usable_connections

logger = get_logger(__name__)


class MissingMediaError(ValueError):
    """The promotion has no media of the requested kind."""


class NoActiveConnectionError(LookupError):
    """None of the requested platforms has a usable connection for the store."""


@dataclass
class PlatformOutcome:
    platform: SocialPlatform
    success: bool
    post_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["platform"] = self.platform.value
        return data


def promotion_url(store_id: str, promotion_id: str) -> str:
    return f"{config.PUBLIC_APP_BASE_URL}/magasin/{store_id}/{promotion_id}"


def build_caption(promotion: Promotion, store_id: str) -> str:
    link = promotion_url(store_id, promotion.id)
    return f"{promotion.title}\n\n{promotion.description or ''}\n\n{config.CAPTION_LINK_LABEL} {link}"


def media_for(promotion: Promotion, kind: MediaKind) -> MediaRef:
    url = promotion.video_url if kind == MediaKind.VIDEO else promotion.image_url
    if not url:
        label = "video" if kind == MediaKind.VIDEO else "image"
        raise MissingMediaError(f"Promotion has no {label}")
    return MediaRef(kind=kind, url=url)


async def publish_to_store(
    session: Session,
    publishers: PublisherRegistry,
    promotion: Promotion,
    store_id: str,
    platforms: Iterable[SocialPlatform],
    *,
    kind: MediaKind = MediaKind.VIDEO,
    campaign_id: Optional[str] = None,
) -> list[PlatformOutcome]:
    """Publish ``promotion`` to each requested platform the store is connected to.

    Raises:
        MissingMediaError: the promotion lacks the media for ``kind``.
        NoActiveConnectionError: no requested platform has a usable connection.
            Nothing is attempted and nothing is recorded in that case.
    """
    log = logger.bind(promotion_id=promotion.id, store_id=store_id)
    media = media_for(promotion, kind)
    requested = [SocialPlatform(p) for p in platforms]
    connections = usable_connections(session, store_id, requested)
    if not connections:
        log.warning(
            "No active social connection for requested platforms",
            platforms=[p.value for p in requested],
        )
        raise NoActiveConnectionError("No active social connections found for specified platforms")

    caption = build_caption(promotion, store_id)
    outcomes: list[PlatformOutcome] = []
    for connection in connections:
        platform = connection.platform
        try:
            if not connection.account_id:
                raise ValueError(f"{platform.value} connection has no account id")
            publisher = publishers.get(platform)
            result = await publisher.publish(
                media,
                caption,
                account_id=connection.account_id,
                access_token=connection.access_token,
            )
        except Exception as e:
            message = str(e) or type(e).__name__
            log.error(
                "Publish attempt failed",
                platform=platform.value,
                stage=getattr(e, "stage", None),
                error=message,
            )
            publication_ledger.record_error(
                session,
                promotion_id=promotion.id,
                store_id=store_id,
                platform=platform,
                error_message=message,
                campaign_id=campaign_id,
            )
            outcomes.append(PlatformOutcome(platform=platform, success=False, error=message))
            continue

        try:
            publication_ledger.record_success(
                session,
                promotion_id=promotion.id,
                store_id=store_id,
                platform=platform,
                post_id=result.post_id,
                campaign_id=campaign_id,
            )
        except SQLAlchemyError as e:
            # The post is live; the remaining platforms still get their attempt
            session.rollback()
            log.error(
                "Published but not recorded",
                platform=platform.value,
                post_id=result.post_id,
                error=str(e),
            )
            outcomes.append(PlatformOutcome(
                platform=platform,
                success=True,
                post_id=result.post_id,
                error=f"Publication not recorded: {e}",
            ))
            continue
        log_business_event(
            "promotion_published",
            {
                "promotion_id": promotion.id,
                "store_id": store_id,
                "platform": platform.value,
                "media": kind.value,
                "post_id": result.post_id,
                "campaign_id": campaign_id,
            },
        )
        outcomes.append(PlatformOutcome(platform=platform, success=True, post_id=result.post_id))
    return outcomes


__all__ = [
    "MissingMediaError",
    "NoActiveConnectionError",
    "PlatformOutcome",
    "promotion_url",
    "build_caption",
    "media_for",
    "publish_to_store",
]
