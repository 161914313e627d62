"""
Google Merchant Center: product sync, account and product listing.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
import time
from promojour.api.deps import get_db, get_merchant_client, require_service_role
from promojour.integrations import GoogleMerchantClient, GoogleMerchantError
from promojour.models.schemas.merchant import (
    MerchantAccountRead,
    MerchantAccountsResponse,
    MerchantProductRead,
    MerchantProductsResponse,
    MerchantSyncRequest,
    MerchantSyncResponse,
    ProductSyncResult,
)
from promojour.services.merchant_sync import (
    MerchantNotConnectedError,
    list_merchant_accounts,
    list_store_products,
    sync_store_promotions,
)
from promojour.utils import get_logger, log_performance

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/sync",
    response_model=MerchantSyncResponse,
    dependencies=[Depends(require_service_role)],
    summary="Push a store's active promotions to Merchant Center"
)
async def sync_google_merchant(
    payload: MerchantSyncRequest,
    request: Request,
    db: Session = Depends(get_db),
    client: GoogleMerchantClient = Depends(get_merchant_client),
) -> MerchantSyncResponse:
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")
    logger.info("Merchant sync requested", store_id=payload.store_id, request_id=request_id)

    try:
        result = await sync_store_promotions(db, client, payload.store_id)
    except MerchantNotConnectedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GoogleMerchantError as e:
        logger.error("Merchant sync failed", store_id=payload.store_id, error=str(e), request_id=request_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    log_performance(
        operation="merchant_sync",
        duration_ms=(time.time() - start_time) * 1000,
        additional_data={"products": len(result.results)}
    )
    return MerchantSyncResponse(
        message=result.message,
        count=result.synced,
        results=[ProductSyncResult(**r) for r in result.results],
    )


@router.post(
    "/accounts",
    response_model=MerchantAccountsResponse,
    dependencies=[Depends(require_service_role)],
    summary="List Merchant Center accounts reachable with the store's Google link"
)
async def list_google_merchant_accounts(
    payload: MerchantSyncRequest,
    request: Request,
    db: Session = Depends(get_db),
    client: GoogleMerchantClient = Depends(get_merchant_client),
) -> MerchantAccountsResponse:
    request_id = request.headers.get("X-Request-ID", "unknown")
    try:
        accounts = await list_merchant_accounts(db, client, payload.store_id)
    except MerchantNotConnectedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GoogleMerchantError as e:
        logger.error("Merchant account listing failed", store_id=payload.store_id, error=str(e), request_id=request_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if accounts:
        message = f"Found {len(accounts)} account(s)"
    else:
        message = "No Merchant Center accounts found. Please create one in Google Merchant Center."
    return MerchantAccountsResponse(
        accounts=[MerchantAccountRead(**a) for a in accounts],
        message=message,
    )


@router.post(
    "/products",
    response_model=MerchantProductsResponse,
    dependencies=[Depends(require_service_role)],
    summary="List the products in the store's Merchant Center account"
)
async def list_google_merchant_products(
    payload: MerchantSyncRequest,
    request: Request,
    db: Session = Depends(get_db),
    client: GoogleMerchantClient = Depends(get_merchant_client),
) -> MerchantProductsResponse:
    request_id = request.headers.get("X-Request-ID", "unknown")
    try:
        merchant_id, products = await list_store_products(db, client, payload.store_id)
    except MerchantNotConnectedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GoogleMerchantError as e:
        logger.error("Merchant product listing failed", store_id=payload.store_id, error=str(e), request_id=request_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return MerchantProductsResponse(
        merchant_id=merchant_id,
        count=len(products),
        products=[MerchantProductRead(**p) for p in products],
    )
