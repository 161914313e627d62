"""Archive promotions whose end date has passed."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from promojour.models.db import Promotion
from promojour.models.db.enums import PromotionStatus
from promojour.utils import get_logger
from promojour.utils.time import utc_now

logger = get_logger(__name__)


def archive_expired_promotions(session: Session, now: Optional[datetime] = None) -> list[str]:
    """Set ``archived`` on every non-archived promotion ended before ``now``."""
    now = now or utc_now()
    expired = (
        session.query(Promotion)
        .filter(
            Promotion.end_date.isnot(None),
            Promotion.end_date < now,
            Promotion.status != PromotionStatus.ARCHIVED,
        )
        .all()
    )
    for promotion in expired:
        promotion.status = PromotionStatus.ARCHIVED
    session.commit()

    archived_ids = [p.id for p in expired]
    if archived_ids:
        logger.info("Archived expired promotions", count=len(archived_ids), promotion_ids=archived_ids)
    return archived_ids


__all__ = ["archive_expired_promotions"]
