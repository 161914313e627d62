"""
Manual publishing of a single promotion to a store's social accounts.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
import time
from promojour.api.deps import get_db, get_graph_client, require_service_role
from promojour.integrations import GraphAPIClient, PublisherRegistry
from promojour.models.db import Campaign, Promotion, Store
from promojour.models.db.enums import MediaKind
from promojour.models.schemas.publishing import PlatformResult, PublishRequest, PublishResponse
from promojour.services.social_publisher import (
    MissingMediaError,
    NoActiveConnectionError,
    promotion_url,
    publish_to_store,
)
from promojour.utils import get_logger, log_performance

router = APIRouter(dependencies=[Depends(require_service_role)])
logger = get_logger(__name__)


async def _publish(
    payload: PublishRequest,
    kind: MediaKind,
    request: Request,
    db: Session,
    client: GraphAPIClient,
) -> PublishResponse:
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "Manual publish requested",
        promotion_id=payload.promotion_id,
        store_id=payload.store_id,
        platforms=[p.value for p in payload.platforms],
        media=kind.value,
        request_id=request_id
    )

    promotion = db.get(Promotion, payload.promotion_id)
    if promotion is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Promotion not found")
    if db.get(Store, payload.store_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")
    # The ledger row references the campaign; check it before anything goes live
    if payload.campaign_id is not None:
        if db.get(Campaign, payload.campaign_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Campaign not found")
        if promotion.campaign_id != payload.campaign_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Promotion does not belong to this campaign",
            )

    try:
        outcomes = await publish_to_store(
            db,
            PublisherRegistry(client),
            promotion,
            payload.store_id,
            payload.platforms,
            kind=kind,
            campaign_id=payload.campaign_id,
        )
    except (MissingMediaError, NoActiveConnectionError) as e:
        logger.warning(
            "Manual publish rejected",
            promotion_id=payload.promotion_id,
            store_id=payload.store_id,
            error=str(e),
            request_id=request_id
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    log_performance(
        operation=f"manual_publish_{kind.value}",
        duration_ms=duration_ms,
        additional_data={"platforms": len(outcomes)}
    )

    return PublishResponse(
        success=any(o.success for o in outcomes),
        results=[PlatformResult(**o.to_dict()) for o in outcomes],
        promotion_url=promotion_url(payload.store_id, promotion.id),
    )


@router.post("/reel", response_model=PublishResponse, summary="Publish a promotion video as a Reel")
async def publish_reel(
    payload: PublishRequest,
    request: Request,
    db: Session = Depends(get_db),
    client: GraphAPIClient = Depends(get_graph_client),
) -> PublishResponse:
    return await _publish(payload, MediaKind.VIDEO, request, db, client)


@router.post("/post", response_model=PublishResponse, summary="Publish a promotion image as a post")
async def publish_post(
    payload: PublishRequest,
    request: Request,
    db: Session = Depends(get_db),
    client: GraphAPIClient = Depends(get_graph_client),
) -> PublishResponse:
    return await _publish(payload, MediaKind.IMAGE, request, db, client)
