"""
Promotion maintenance endpoints.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from promojour.api.deps import get_db, require_service_role
from promojour.models.schemas.alerts import ArchiveResponse
from promojour.services.promotion_archival import archive_expired_promotions
from promojour.utils import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/archive-expired",
    response_model=ArchiveResponse,
    dependencies=[Depends(require_service_role)],
    summary="Archive promotions past their end date"
)
async def archive_expired(request: Request, db: Session = Depends(get_db)) -> ArchiveResponse:
    archived = archive_expired_promotions(db)
    logger.info(
        "Expired promotions archived",
        archived_count=len(archived),
        request_id=request.headers.get("X-Request-ID", "unknown")
    )
    return ArchiveResponse(archived_count=len(archived), promotion_ids=archived)
