"""Campaign distribution pass (the cron entry point's business logic).

For each eligible campaign: pick today's promotions, fan them out to the
campaign's stores and publish each (promotion, store) pair as a Reel to the
platforms the store has auto-publish enabled for. The pass is sequential and
best effort: a failing campaign or unit is logged and counted, never fatal.
Only loading the eligible campaigns can fail the whole pass.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from promojour import config
from promojour.integrations import GraphAPIClient, PublisherRegistry
from promojour.models.db import Campaign, Promotion
from promojour.models.db.enums import MediaKind
from promojour.utils import get_logger, log_business_event, log_performance
from promojour.utils.campaign_lock import GLOBAL_CAMPAIGN_LOCKS, CampaignLockRegistry
from promojour.utils.time import utc_today
from . import campaign_selector, publication_ledger, store_resolver
from .social_publisher import NoActiveConnectionError, publish_to_store

logger = get_logger(__name__)


@dataclass
class DistributionSummary:
    campaigns_considered: int = 0
    campaigns_processed: int = 0
    campaigns_skipped_locked: int = 0
    campaigns_failed: int = 0
    promotions_selected: int = 0
    units_published: int = 0
    units_skipped: int = 0
    units_failed: int = 0
    publish_successes: int = 0
    publish_errors: int = 0
    errors: list[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


async def publish_gate(
    session: Session,
    publishers: PublisherRegistry,
    campaign: Campaign,
    promotion: Promotion,
    store_id: str,
    summary: DistributionSummary,
) -> None:
    """Publish one (promotion, store) pair when the store opted in."""
    if not promotion.video_url:
        logger.info("Promotion has no video, skipping", promotion_id=promotion.id, store_id=store_id)
        summary.units_skipped += 1
        return

    platforms = store_resolver.auto_publish_platforms(session, store_id)
    if not platforms:
        logger.info("Auto-publish disabled for store", store_id=store_id, promotion_id=promotion.id)
        summary.units_skipped += 1
        return

    try:
        outcomes = await publish_to_store(
            session,
            publishers,
            promotion,
            store_id,
            platforms,
            kind=MediaKind.VIDEO,
            campaign_id=campaign.id,
        )
    except NoActiveConnectionError as e:
        summary.units_failed += 1
        summary.errors.append(
            {"campaign_id": campaign.id, "promotion_id": promotion.id, "store_id": store_id, "error": str(e)}
        )
        return

    successes = sum(1 for o in outcomes if o.success)
    summary.publish_successes += successes
    summary.publish_errors += len(outcomes) - successes
    if successes:
        summary.units_published += 1
    else:
        summary.units_failed += 1


async def distribute_campaign(
    session: Session,
    publishers: PublisherRegistry,
    campaign: Campaign,
    today: date,
    rng: random.Random,
    summary: DistributionSummary,
) -> None:
    log = logger.bind(campaign_id=campaign.id)
    pool = campaign_selector.load_campaign_pool(session, campaign.id)
    distributed = publication_ledger.distributed_promotion_ids(session, campaign.id, today)
    selected = campaign_selector.select_promotions(campaign, pool, distributed, today, rng=rng)
    log.info(
        "Campaign selection",
        pool_size=len(pool),
        distributed_today=len(distributed),
        selected=[p.id for p in selected],
    )
    if not selected:
        return
    summary.promotions_selected += len(selected)

    store_ids = store_resolver.resolve_target_stores(session, campaign)
    for promotion in selected:
        for store_id in store_ids:
            try:
                await publish_gate(session, publishers, campaign, promotion, store_id, summary)
            except Exception as e:
                # Failures past the ledger write (or before any attempt) stay local to the unit
                session.rollback()
                log.error(
                    "Distribution unit failed",
                    promotion_id=promotion.id,
                    store_id=store_id,
                    error=str(e),
                    exc_info=True,
                )
                summary.units_failed += 1
                summary.errors.append(
                    {"campaign_id": campaign.id, "promotion_id": promotion.id, "store_id": store_id, "error": str(e)}
                )


async def run_distribution(
    session: Session,
    client: GraphAPIClient,
    *,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
    locks: CampaignLockRegistry = GLOBAL_CAMPAIGN_LOCKS,
) -> DistributionSummary:
    """Run one distribution pass and return the tally.

    Raises whatever loading the eligible campaigns raises; everything after
    that is contained per campaign.
    """
    start_time = time.time()
    today = today or utc_today()
    if rng is None:
        rng = random.Random(config.DISTRIBUTION_RANDOM_SEED)
    publishers = PublisherRegistry(client)
    summary = DistributionSummary()

    campaigns = campaign_selector.load_eligible_campaigns(session, today)
    summary.campaigns_considered = len(campaigns)

    for campaign in campaigns:
        with locks.hold(campaign.id) as acquired:
            if not acquired:
                logger.warning("Campaign already being distributed, skipping", campaign_id=campaign.id)
                summary.campaigns_skipped_locked += 1
                continue
            try:
                await distribute_campaign(session, publishers, campaign, today, rng, summary)
                summary.campaigns_processed += 1
            except Exception as e:
                session.rollback()
                logger.error("Campaign distribution failed", campaign_id=campaign.id, error=str(e), exc_info=True)
                summary.campaigns_failed += 1
                summary.errors.append({"campaign_id": campaign.id, "error": str(e)})

    duration_ms = (time.time() - start_time) * 1000
    log_performance(
        operation="run_distribution",
        duration_ms=duration_ms,
        additional_data={"campaigns": summary.campaigns_considered},
    )
    log_business_event(
        "distribution_completed",
        {
            "today": today.isoformat(),
            "campaigns_processed": summary.campaigns_processed,
            "campaigns_failed": summary.campaigns_failed,
            "publish_successes": summary.publish_successes,
            "publish_errors": summary.publish_errors,
        },
    )
    return summary


__all__ = ["DistributionSummary", "publish_gate", "distribute_campaign", "run_distribution"]
