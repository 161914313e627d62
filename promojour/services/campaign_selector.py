"""Campaign eligibility and daily promotion selection.

Eligibility: ``status == active`` and ``start_date <= today <= end_date``
(date comparison only).

Selection per campaign and day:
1. ineligible campaign -> nothing;
2. ``remaining = daily_promotion_count - |distributed today|``; nothing when <= 0;
3. drop promotions already distributed today;
4. ``random_order`` -> uniform shuffle then take ``remaining``; otherwise the
   first ``remaining`` in pool order.

A short pool under-delivers; the quota is never exceeded.
"""
from __future__ import annotations

import random
from datetime import date
from typing import Iterable, Optional, Sequence

from sqlalchemy.orm import Session

from promojour.models.db import Campaign, Promotion
from promojour.models.db.enums import CampaignStatus, PromotionStatus
from promojour.utils import get_logger

logger = get_logger(__name__)


def is_campaign_eligible(campaign: Campaign, today: date) -> bool:
    if campaign.status != CampaignStatus.ACTIVE:
        return False
    return campaign.start_date <= today <= campaign.end_date


def filter_eligible_campaigns(campaigns: Iterable[Campaign], today: date) -> list[Campaign]:
    return [c for c in campaigns if is_campaign_eligible(c, today)]


def load_eligible_campaigns(session: Session, today: date) -> list[Campaign]:
    campaigns = (
        session.query(Campaign)
        .filter(
            Campaign.status == CampaignStatus.ACTIVE,
            Campaign.start_date <= today,
            Campaign.end_date >= today,
        )
        .order_by(Campaign.created_at.asc(), Campaign.id.asc())
        .all()
    )
    logger.info("Eligible campaigns loaded", count=len(campaigns), today=today.isoformat())
    return campaigns


def load_campaign_pool(session: Session, campaign_id: str) -> list[Promotion]:
    """Active promotions associated with the campaign, in insertion order."""
    return (
        session.query(Promotion)
        .filter(
            Promotion.campaign_id == campaign_id,
            Promotion.status == PromotionStatus.ACTIVE,
        )
        .order_by(Promotion.created_at.asc(), Promotion.id.asc())
        .all()
    )


def select_promotions(
    campaign: Campaign,
    pool: Sequence[Promotion],
    distributed_ids: set[str],
    today: date,
    rng: Optional[random.Random] = None,
) -> list[Promotion]:
    if not is_campaign_eligible(campaign, today):
        return []

    quota = campaign.daily_promotion_count or 0
    remaining = quota - len(distributed_ids)
    if remaining <= 0:
        logger.info(
            "Daily quota reached",
            campaign_id=campaign.id,
            daily_promotion_count=quota,
            distributed_today=len(distributed_ids),
        )
        return []

    candidates = [p for p in pool if p.id not in distributed_ids]
    if not candidates:
        logger.info("No promotions left to distribute today", campaign_id=campaign.id)
        return []

    if campaign.random_order:
        candidates = list(candidates)
        (rng or random.Random()).shuffle(candidates)

    selected = candidates[:remaining]
    if len(selected) < remaining:
        logger.info(
            "Promotion pool shorter than remaining quota",
            campaign_id=campaign.id,
            remaining=remaining,
            selected=len(selected),
        )
    return selected


__all__ = [
    "is_campaign_eligible",
    "filter_eligible_campaigns",
    "load_eligible_campaigns",
    "load_campaign_pool",
    "select_promotions",
]
