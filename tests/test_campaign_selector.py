import random
from datetime import date, timedelta

from promojour.models.db import Campaign, PublicationHistory
from promojour.models.db.enums import CampaignStatus, PromotionStatus, PublicationStatus, SocialPlatform

from promojour.services.campaign_selector import (
    filter_eligible_campaigns,
    is_campaign_eligible,
    load_campaign_pool,
    load_eligible_campaigns,
    select_promotions,
)
from promojour.services.publication_ledger import distributed_promotion_ids
from promojour.utils.time import utc_now, utc_today

TODAY = date(2025, 6, 15)


def _campaign(**overrides) -> Campaign:
    values = dict(
        id="c-1",
        organization_id="org-1",
        name="Summer",
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 30),
        status=CampaignStatus.ACTIVE,
        daily_promotion_count=2,
        random_order=False,
    )
    values.update(overrides)
    return Campaign(**values)


def test_eligibility_requires_active_status_and_date_window():
    assert is_campaign_eligible(_campaign(), TODAY) is True
    for status in (CampaignStatus.DRAFT, CampaignStatus.SCHEDULED, CampaignStatus.COMPLETED, CampaignStatus.ARCHIVED):
        assert is_campaign_eligible(_campaign(status=status), TODAY) is False
    assert is_campaign_eligible(_campaign(start_date=date(2025, 6, 16)), TODAY) is False
    assert is_campaign_eligible(_campaign(end_date=date(2025, 6, 14)), TODAY) is False


def test_eligibility_window_is_inclusive_on_both_ends():
    assert is_campaign_eligible(_campaign(start_date=TODAY, end_date=TODAY), TODAY) is True


def test_filter_eligible_campaigns_preserves_order():
    a = _campaign(id="a")
    b = _campaign(id="b", status=CampaignStatus.DRAFT)
    c = _campaign(id="c")
    assert [x.id for x in filter_eligible_campaigns([a, b, c], TODAY)] == ["a", "c"]
    assert filter_eligible_campaigns([], TODAY) == []


def test_load_eligible_campaigns_applies_same_predicate(db_session, campaign_factory):
    today = utc_today()
    active = campaign_factory()
    campaign_factory(status=CampaignStatus.DRAFT)
    campaign_factory(start_date=today + timedelta(days=1), end_date=today + timedelta(days=3))
    campaign_factory(start_date=today - timedelta(days=5), end_date=today - timedelta(days=1))
    assert [c.id for c in load_eligible_campaigns(db_session, today)] == [active.id]


def test_pool_contains_only_active_promotions_of_the_campaign(db_session, campaign_factory, promotion_factory):
    campaign = campaign_factory()
    other = campaign_factory()
    p1 = promotion_factory(campaign)
    promotion_factory(campaign, status=PromotionStatus.DRAFT)
    promotion_factory(campaign, status=PromotionStatus.EXPIRED)
    p2 = promotion_factory(campaign)
    promotion_factory(other)
    assert [p.id for p in load_campaign_pool(db_session, campaign.id)] == [p1.id, p2.id]


def test_sequential_selection_takes_first_remaining(db_session, campaign_factory, promotion_factory):
    campaign = campaign_factory(daily_promotion_count=2)
    promos = [promotion_factory(campaign, title=f"P{i}") for i in range(1, 6)]
    pool = load_campaign_pool(db_session, campaign.id)
    selected = select_promotions(campaign, pool, set(), utc_today())
    assert [p.id for p in selected] == [promos[0].id, promos[1].id]
    # Same unconsumed pool, same answer
    assert [p.id for p in select_promotions(campaign, pool, set(), utc_today())] == [promos[0].id, promos[1].id]


def test_already_distributed_promotion_is_skipped(db_session, campaign_factory, promotion_factory, store_factory):
    campaign = campaign_factory(daily_promotion_count=2)
    store = store_factory(campaign.organization)
    promos = [promotion_factory(campaign, title=f"P{i}") for i in range(1, 6)]
    db_session.add(PublicationHistory(
        promotion_id=promos[0].id,
        store_id=store.id,
        campaign_id=campaign.id,
        platform=SocialPlatform.FACEBOOK,
        status=PublicationStatus.SUCCESS,
        post_id="fb-1",
        published_at=utc_now(),
    ))
    db_session.commit()

    distributed = distributed_promotion_ids(db_session, campaign.id, utc_today())
    assert distributed == {promos[0].id}
    pool = load_campaign_pool(db_session, campaign.id)
    selected = select_promotions(campaign, pool, distributed, utc_today())
    # One slot of the quota is used: only P2 remains for today
    assert [p.id for p in selected] == [promos[1].id]


def test_quota_counts_remaining_slots():
    campaign = _campaign(daily_promotion_count=3)
    pool = [_promo(f"p{i}") for i in range(1, 6)]
    selected = select_promotions(campaign, pool, {"p1"}, TODAY)
    assert [p.id for p in selected] == ["p2", "p3"]


def test_quota_reached_selects_nothing():
    campaign = _campaign(daily_promotion_count=2)
    pool = [_promo(f"p{i}") for i in range(1, 6)]
    assert select_promotions(campaign, pool, {"p1", "p2"}, TODAY) == []
    assert select_promotions(campaign, pool, {"p1", "p2", "x"}, TODAY) == []


def test_zero_daily_count_selects_nothing():
    assert select_promotions(_campaign(daily_promotion_count=0), [_promo("p1")], set(), TODAY) == []


def test_exhausted_pool_under_delivers():
    campaign = _campaign(daily_promotion_count=5)
    pool = [_promo("p1"), _promo("p2")]
    assert [p.id for p in select_promotions(campaign, pool, set(), TODAY)] == ["p1", "p2"]
    assert select_promotions(campaign, pool, {"p1", "p2"}, TODAY) == []


def test_ineligible_campaign_selects_nothing():
    pool = [_promo("p1"), _promo("p2")]
    assert select_promotions(_campaign(status=CampaignStatus.DRAFT), pool, set(), TODAY) == []
    assert select_promotions(_campaign(end_date=date(2025, 6, 1)), pool, set(), TODAY) == []


def test_random_order_selects_exactly_remaining():
    campaign = _campaign(daily_promotion_count=3, random_order=True)
    pool = [_promo(f"p{i}") for i in range(10)]
    for seed in range(20):
        selected = select_promotions(campaign, pool, {"p0"}, TODAY, rng=random.Random(seed))
        ids = [p.id for p in selected]
        assert len(ids) == 2
        assert len(set(ids)) == 2
        assert "p0" not in ids


def test_random_order_is_reproducible_with_seed_and_leaves_pool_untouched():
    campaign = _campaign(daily_promotion_count=4, random_order=True)
    pool = [_promo(f"p{i}") for i in range(8)]
    first = select_promotions(campaign, pool, set(), TODAY, rng=random.Random(42))
    second = select_promotions(campaign, pool, set(), TODAY, rng=random.Random(42))
    assert [p.id for p in first] == [p.id for p in second]
    assert [p.id for p in pool] == [f"p{i}" for i in range(8)]


def _promo(promotion_id: str):
    from promojour.models.db import Promotion
    return Promotion(id=promotion_id, organization_id="org-1", title=promotion_id, status=PromotionStatus.ACTIVE)


