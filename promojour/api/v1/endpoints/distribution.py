"""
Campaign distribution trigger (called by the external cron).
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import time
from promojour.api.deps import get_db, get_graph_client, require_service_role
from promojour.integrations import GraphAPIClient
from promojour.models.schemas.base import ErrorResponse
from promojour.models.schemas.distribution import DistributionRunResponse, DistributionSummaryRead
from promojour.services.distribution import run_distribution
from promojour.utils import get_logger, log_business_event, log_performance

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/run",
    response_model=DistributionRunResponse,
    responses={500: {"model": ErrorResponse}},
    dependencies=[Depends(require_service_role)],
    summary="Run one campaign distribution pass"
)
async def run_campaign_distribution(
    request: Request,
    db: Session = Depends(get_db),
    client: GraphAPIClient = Depends(get_graph_client),
):
    """
    Distribute today's promotions for every eligible campaign.

    Returns 200 once the pass has run, even when individual publish attempts
    failed; those are counted in ``summary`` and recorded in the publication
    history. Returns 500 only when the pass itself could not run.
    """
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info("Campaign distribution triggered", request_id=request_id)

    try:
        summary = await run_distribution(db, client)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "Campaign distribution failed",
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Campaign distribution failed", "details": str(e)},
        )

    duration_ms = (time.time() - start_time) * 1000
    log_performance(
        operation="trigger_distribution",
        duration_ms=duration_ms,
        additional_data={"campaigns_processed": summary.campaigns_processed}
    )
    log_business_event(
        event_type="distribution_triggered",
        details={
            "campaigns_considered": summary.campaigns_considered,
            "publish_successes": summary.publish_successes,
            "publish_errors": summary.publish_errors,
        },
        request_id=request_id
    )

    return DistributionRunResponse(
        success=True,
        message="Campaign distribution completed",
        summary=DistributionSummaryRead(**summary.to_dict()),
    )
