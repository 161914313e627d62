"""Append-only publication ledger.

Every publish attempt writes one ``PublicationHistory`` row, committed
immediately so a later crash in the same pass cannot lose it. Rows are never
updated or deleted. The daily quota reads ``success`` rows only, so a failed
attempt never blocks a retry on the next pass.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from promojour.models.db import PublicationHistory
from promojour.models.db.enums import PublicationStatus, SocialPlatform
from promojour.utils import get_logger
from promojour.utils.time import day_bounds, utc_now

logger = get_logger(__name__)


def distributed_promotion_ids(session: Session, campaign_id: str, day: date) -> set[str]:
    """Distinct promotions with a success row for the campaign on ``day`` (UTC)."""
    start, end = day_bounds(day)
    rows = (
        session.query(PublicationHistory.promotion_id)
        .filter(
            PublicationHistory.campaign_id == campaign_id,
            PublicationHistory.status == PublicationStatus.SUCCESS,
            PublicationHistory.published_at >= start,
            PublicationHistory.published_at < end,
        )
        .distinct()
        .all()
    )
    return {row[0] for row in rows}


def _append(session: Session, **values: Any) -> PublicationHistory:
    row = PublicationHistory(published_at=utc_now(), **values)
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def record_success(
    session: Session,
    *,
    promotion_id: str,
    store_id: str,
    platform: SocialPlatform,
    post_id: Optional[str],
    campaign_id: Optional[str] = None,
) -> PublicationHistory:
    row = _append(
        session,
        promotion_id=promotion_id,
        store_id=store_id,
        campaign_id=campaign_id,
        platform=platform,
        status=PublicationStatus.SUCCESS,
        post_id=post_id,
    )
    logger.info(
        "Publication recorded",
        promotion_id=promotion_id,
        store_id=store_id,
        platform=platform.value,
        post_id=post_id,
    )
    return row


def record_error(
    session: Session,
    *,
    promotion_id: str,
    store_id: str,
    platform: SocialPlatform,
    error_message: str,
    campaign_id: Optional[str] = None,
) -> PublicationHistory:
    row = _append(
        session,
        promotion_id=promotion_id,
        store_id=store_id,
        campaign_id=campaign_id,
        platform=platform,
        status=PublicationStatus.ERROR,
        error_message=error_message,
    )
    logger.warning(
        "Publication failure recorded",
        promotion_id=promotion_id,
        store_id=store_id,
        platform=platform.value,
        error_message=error_message,
    )
    return row


def list_history(
    session: Session,
    filters: Optional[Dict[str, Any]] = None,
    *,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[PublicationHistory], int]:
    """Newest first. Unknown or empty filter keys are ignored."""
    query = session.query(PublicationHistory)
    for key in ("store_id", "promotion_id", "campaign_id", "platform", "status"):
        value = (filters or {}).get(key)
        if value is not None:
            query = query.filter(getattr(PublicationHistory, key) == value)
    total = query.count()
    rows = (
        query.order_by(PublicationHistory.published_at.desc(), PublicationHistory.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total


__all__ = [
    "day_bounds",
    "distributed_promotion_ids",
    "record_success",
    "record_error",
    "list_history",
]
