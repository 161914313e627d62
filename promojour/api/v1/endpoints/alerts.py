"""
Promotion stock alert check (called by a scheduled job).
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from promojour.api.deps import get_brevo_client, get_db, require_service_role
from promojour.integrations import BrevoClient
from promojour.models.schemas.alerts import AlertCheckResponse
from promojour.services.promotion_alerts import check_promotion_alerts
from promojour.utils import get_logger, log_business_event

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/promotions/check",
    response_model=AlertCheckResponse,
    dependencies=[Depends(require_service_role)],
    summary="Email stores running low on promotions"
)
async def check_alerts(
    request: Request,
    db: Session = Depends(get_db),
    client: BrevoClient = Depends(get_brevo_client),
) -> AlertCheckResponse:
    request_id = request.headers.get("X-Request-ID", "unknown")
    outcome = await check_promotion_alerts(db, client)
    log_business_event(
        event_type="promotion_alerts_checked",
        details={"stores_checked": outcome["stores_checked"], "alerts_sent": outcome["alerts_sent"]},
        request_id=request_id
    )
    return AlertCheckResponse(**outcome)
