import os
import secrets
import sys
from datetime import date, timedelta
from pathlib import Path
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Ensure project root on sys.path so 'promojour' resolves without an install
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from promojour.main import app  # type: ignore
from promojour.database import Base  # type: ignore
from promojour.api import deps  # type: ignore
from promojour import config  # type: ignore
"""Pytest fixtures, factories and scripted fakes for outbound HTTP.

All model modules must be imported before Base.metadata.create_all() so every
table and relationship target exists.
"""
from promojour.models.db import (
    Organization, Store, StoreSettings, Campaign, Promotion,
    SocialConnection, PublicationHistory, GoogleMerchantAccount,
)
from promojour.models.db.enums import CampaignStatus, PromotionStatus, SocialPlatform
from fakes import FakeGraphClient
from promojour.utils.campaign_lock import GLOBAL_CAMPAIGN_LOCKS
from promojour.utils.time import utc_today

SERVICE_ROLE_KEY = "test-service-role-key"

# File-based SQLite so the worker thread and the test thread share data
SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///./test_promojour.db"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

import promojour.database as _promojour_database  # noqa: E402
_promojour_database.SessionLocal = TestingSessionLocal  # type: ignore


@pytest.fixture(scope="session", autouse=True)
def create_test_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    try:
        os.remove("test_promojour.db")
    except OSError:
        pass


@pytest.fixture(autouse=True)
def _isolate_test_state(create_test_db, monkeypatch):
    """Per-test isolation: empty tables, released campaign locks, fast polling, known service key."""
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    GLOBAL_CAMPAIGN_LOCKS._locks.clear()  # type: ignore[attr-defined]
    monkeypatch.setattr(config, "SERVICE_ROLE_KEY", SERVICE_ROLE_KEY)
    monkeypatch.setattr(config, "INSTAGRAM_POLL_SETTINGS", {"interval_seconds": 0, "max_attempts": 30})
    yield


@pytest.fixture()
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# Override dependency
def _override_get_db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

app.dependency_overrides[deps.get_db] = _override_get_db


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    return {"Authorization": f"Bearer {SERVICE_ROLE_KEY}"}


# ---------- Scripted outbound HTTP ----------

@pytest.fixture()
def fake_graph():
    return FakeGraphClient()


@pytest.fixture()
def override_graph_client(fake_graph):
    async def _override():
        yield fake_graph
    app.dependency_overrides[deps.get_graph_client] = _override
    yield fake_graph
    app.dependency_overrides.pop(deps.get_graph_client, None)


# ---------- Data factory helpers ----------

@pytest.fixture()
def organization_factory(db_session):
    def _create(name: str | None = None, email: str | None = "owner@example.com"):
        org = Organization(name=name or f"Org {secrets.token_hex(2)}", email=email)
        db_session.add(org)
        db_session.commit()
        db_session.refresh(org)
        return org
    return _create


@pytest.fixture()
def store_factory(db_session, organization_factory):
    def _create(
        organization: Organization | None = None,
        *,
        name: str | None = None,
        is_active: bool = True,
        email: str | None = None,
        auto_facebook: bool | None = None,
        auto_instagram: bool | None = None,
        alert_email_enabled: bool = False,
        min_active: int | None = None,
        min_upcoming: int | None = None,
    ):
        organization = organization or organization_factory()
        store = Store(
            organization_id=organization.id,
            name=name or f"Store {secrets.token_hex(2)}",
            email=email,
            is_active=is_active,
        )
        db_session.add(store)
        db_session.flush()
        if auto_facebook is not None or auto_instagram is not None or alert_email_enabled:
            db_session.add(StoreSettings(
                store_id=store.id,
                auto_publish_facebook=bool(auto_facebook),
                auto_publish_instagram=bool(auto_instagram),
                alert_email_enabled=alert_email_enabled,
                min_active_promotions=min_active,
                min_upcoming_promotions=min_upcoming,
            ))
        db_session.commit()
        db_session.refresh(store)
        return store
    return _create


@pytest.fixture()
def campaign_factory(db_session, organization_factory):
    def _create(
        organization: Organization | None = None,
        *,
        store: Store | None = None,
        status: CampaignStatus = CampaignStatus.ACTIVE,
        daily_promotion_count: int = 1,
        random_order: bool = False,
        start_date: date | None = None,
        end_date: date | None = None,
    ):
        today = utc_today()
        organization = organization or (store.organization if store else organization_factory())
        campaign = Campaign(
            organization_id=organization.id,
            store_id=store.id if store else None,
            name=f"Campaign {secrets.token_hex(2)}",
            start_date=start_date or today - timedelta(days=1),
            end_date=end_date or today + timedelta(days=7),
            status=status,
            daily_promotion_count=daily_promotion_count,
            random_order=random_order,
        )
        db_session.add(campaign)
        db_session.commit()
        db_session.refresh(campaign)
        return campaign
    return _create


@pytest.fixture()
def promotion_factory(db_session):
    def _create(
        campaign: Campaign | None = None,
        *,
        organization: Organization | None = None,
        store: Store | None = None,
        title: str | None = None,
        status: PromotionStatus = PromotionStatus.ACTIVE,
        video_url: str | None = "https://cdn.example.com/promo.mp4",
        image_url: str | None = "https://cdn.example.com/promo.jpg",
        **fields,
    ):
        organization_id = organization.id if organization else campaign.organization_id
        promotion = Promotion(
            organization_id=organization_id,
            store_id=store.id if store else None,
            campaign_id=campaign.id if campaign else None,
            title=title or f"Promo {secrets.token_hex(2)}",
            description="Une super offre",
            status=status,
            video_url=video_url,
            image_url=image_url,
            **fields,
        )
        db_session.add(promotion)
        db_session.commit()
        db_session.refresh(promotion)
        return promotion
    return _create


@pytest.fixture()
def connection_factory(db_session):
    def _create(
        store: Store,
        platform: SocialPlatform,
        *,
        account_id: str | None = None,
        access_token: str | None = "token-123",
        is_connected: bool = True,
    ):
        default_account = "page-1" if platform == SocialPlatform.FACEBOOK else "ig-1"
        conn = SocialConnection(
            store_id=store.id,
            platform=platform,
            account_id=account_id or default_account,
            access_token=access_token,
            is_connected=is_connected,
        )
        db_session.add(conn)
        db_session.commit()
        db_session.refresh(conn)
        return conn
    return _create
