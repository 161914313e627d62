from datetime import date, datetime, timedelta, timezone

from promojour.models.db import PublicationHistory
from promojour.models.db.enums import PublicationStatus, SocialPlatform
from promojour.services.publication_ledger import (
    day_bounds,
    distributed_promotion_ids,
    list_history,
    record_error,
    record_success,
)
from promojour.utils.time import utc_now, utc_today


def _row(db_session, promotion, store, campaign, *, status=PublicationStatus.SUCCESS, published_at=None, platform=SocialPlatform.FACEBOOK):
    row = PublicationHistory(
        promotion_id=promotion.id,
        store_id=store.id,
        campaign_id=campaign.id if campaign else None,
        platform=platform,
        status=status,
        published_at=published_at or utc_now(),
    )
    db_session.add(row)
    db_session.commit()
    return row


def test_day_bounds_is_half_open_utc_window():
    start, end = day_bounds(date(2025, 3, 9))
    assert start == datetime(2025, 3, 9, tzinfo=timezone.utc)
    assert end == datetime(2025, 3, 10, tzinfo=timezone.utc)
    assert end - start == timedelta(days=1)


def test_distributed_ids_are_distinct_across_stores(db_session, campaign_factory, store_factory, promotion_factory):
    campaign = campaign_factory()
    s1 = store_factory(campaign.organization)
    s2 = store_factory(campaign.organization)
    promo = promotion_factory(campaign)
    _row(db_session, promo, s1, campaign)
    _row(db_session, promo, s2, campaign)
    _row(db_session, promo, s2, campaign, platform=SocialPlatform.INSTAGRAM)
    assert distributed_promotion_ids(db_session, campaign.id, utc_today()) == {promo.id}


def test_distributed_ids_ignore_errors_other_days_and_other_campaigns(db_session, campaign_factory, store_factory, promotion_factory):
    campaign = campaign_factory()
    other_campaign = campaign_factory(campaign.organization)
    store = store_factory(campaign.organization)
    failed = promotion_factory(campaign)
    yesterday = promotion_factory(campaign)
    elsewhere = promotion_factory(other_campaign)
    _row(db_session, failed, store, campaign, status=PublicationStatus.ERROR)
    _row(db_session, yesterday, store, campaign, published_at=utc_now() - timedelta(days=1, hours=1))
    _row(db_session, elsewhere, store, other_campaign)
    assert distributed_promotion_ids(db_session, campaign.id, utc_today()) == set()


def test_day_window_excludes_next_midnight(db_session, campaign_factory, store_factory, promotion_factory):
    campaign = campaign_factory()
    store = store_factory(campaign.organization)
    promo = promotion_factory(campaign)
    day = date(2025, 1, 10)
    _row(db_session, promo, store, campaign, published_at=datetime(2025, 1, 11, 0, 0, tzinfo=timezone.utc))
    assert distributed_promotion_ids(db_session, campaign.id, day) == set()
    _row(db_session, promo, store, campaign, published_at=datetime(2025, 1, 10, 23, 59, 59, 500000, tzinfo=timezone.utc))
    assert distributed_promotion_ids(db_session, campaign.id, day) == {promo.id}


def test_record_success_and_error_append_rows(db_session, campaign_factory, store_factory, promotion_factory):
    campaign = campaign_factory()
    store = store_factory(campaign.organization)
    promo = promotion_factory(campaign)
    ok_row = record_success(
        db_session, promotion_id=promo.id, store_id=store.id, platform=SocialPlatform.INSTAGRAM,
        post_id="ig-77", campaign_id=campaign.id,
    )
    err_row = record_error(
        db_session, promotion_id=promo.id, store_id=store.id, platform=SocialPlatform.FACEBOOK,
        error_message="token expired", campaign_id=campaign.id,
    )
    assert ok_row.id != err_row.id
    rows = db_session.query(PublicationHistory).all()
    assert len(rows) == 2
    assert ok_row.status == PublicationStatus.SUCCESS and ok_row.post_id == "ig-77" and ok_row.error_message is None
    assert err_row.status == PublicationStatus.ERROR and err_row.error_message == "token expired" and err_row.post_id is None


def test_list_history_filters_and_orders_newest_first(db_session, campaign_factory, store_factory, promotion_factory):
    campaign = campaign_factory()
    s1 = store_factory(campaign.organization)
    s2 = store_factory(campaign.organization)
    promo = promotion_factory(campaign)
    now = utc_now()
    old = _row(db_session, promo, s1, campaign, published_at=now - timedelta(hours=2))
    new = _row(db_session, promo, s1, campaign, published_at=now - timedelta(minutes=5), status=PublicationStatus.ERROR)
    _row(db_session, promo, s2, campaign, published_at=now - timedelta(hours=1))

    rows, total = list_history(db_session, {"store_id": s1.id})
    assert total == 2
    assert [r.id for r in rows] == [new.id, old.id]

    rows, total = list_history(db_session, {"status": PublicationStatus.ERROR})
    assert total == 1 and rows[0].id == new.id

    rows, total = list_history(db_session, None, limit=1, offset=1)
    assert total == 3 and len(rows) == 1
