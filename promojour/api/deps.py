"""
Dependencies for service-role authorization, database sessions and outbound clients.
"""
import hmac
from typing import AsyncGenerator, Generator
from fastapi import HTTPException, status, Request
from sqlalchemy.orm import Session
from promojour import config
from promojour.database import SessionLocal
from promojour.integrations import BrevoClient, GoogleMerchantClient, GraphAPIClient
from promojour.utils import get_logger

logger = get_logger(__name__)


def get_db() -> Generator[Session, None, None]:
    """One session per request; rolled back if the handler raises."""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("Request failed with an open session, rolling back", error=str(e), exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()


def require_service_role(request: Request) -> None:
    """
    Only callers presenting ``Authorization: Bearer <SERVICE_ROLE_KEY>`` verbatim
    may trigger jobs or publish.

    Raises:
        ConfigurationError: SERVICE_ROLE_KEY is not set (surfaced as 500)
        HTTPException: 401 for any other caller
    """
    expected = config.require_setting("SERVICE_ROLE_KEY")
    auth_header = request.headers.get("Authorization", "")
    if not hmac.compare_digest(auth_header.encode(), f"Bearer {expected}".encode()):
        logger.warning(
            "Service role authorization failed",
            has_header=bool(auth_header),
            path=request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_graph_client() -> AsyncGenerator[GraphAPIClient, None]:
    """Meta Graph API client scoped to one request."""
    client = GraphAPIClient()
    try:
        yield client
    finally:
        await client.close()


async def get_merchant_client() -> AsyncGenerator[GoogleMerchantClient, None]:
    client = GoogleMerchantClient()
    try:
        yield client
    finally:
        await client.close()


async def get_brevo_client() -> AsyncGenerator[BrevoClient, None]:
    client = BrevoClient()
    try:
        yield client
    finally:
        await client.close()
