"""
Publication history reads for reporting.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from promojour.api.deps import get_db, require_service_role
from promojour.models.db.enums import SocialPlatform, PublicationStatus
from promojour.models.schemas.publication_history import PublicationHistoryPage, PublicationHistoryRead
from promojour.services.publication_ledger import list_history
from promojour.utils import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get(
    "",
    response_model=PublicationHistoryPage,
    dependencies=[Depends(require_service_role)],
    summary="List publication attempts"
)
async def get_publication_history(
    request: Request,
    store_id: Optional[str] = Query(None),
    promotion_id: Optional[str] = Query(None),
    campaign_id: Optional[str] = Query(None),
    platform: Optional[SocialPlatform] = Query(None),
    status_filter: Optional[PublicationStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
) -> PublicationHistoryPage:
    """Newest attempts first."""
    filters = {
        "store_id": store_id,
        "promotion_id": promotion_id,
        "campaign_id": campaign_id,
        "platform": platform,
        "status": status_filter,
    }
    logger.info(
        "Publication history requested",
        limit=limit,
        offset=offset,
        request_id=request.headers.get("X-Request-ID", "unknown"),
        **{k: getattr(v, "value", v) for k, v in filters.items()}
    )
    rows, total = list_history(db, filters, limit=limit, offset=offset)
    return PublicationHistoryPage(
        items=[PublicationHistoryRead.model_validate(r) for r in rows],
        total=total,
        limit=limit,
        offset=offset,
    )
