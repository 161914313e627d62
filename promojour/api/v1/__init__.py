"""
API v1 router initialization and setup.
"""
from fastapi import APIRouter
from .endpoints import distribution, publishing, publication_history, merchant, alerts, promotions

api_router = APIRouter()

api_router.include_router(
    distribution.router,
    prefix="/distribution",
    tags=["distribution"]
)

api_router.include_router(
    publishing.router,
    prefix="/publishing",
    tags=["publishing"]
)

api_router.include_router(
    publication_history.router,
    prefix="/publication-history",
    tags=["publication-history"]
)

api_router.include_router(
    merchant.router,
    prefix="/google-merchant",
    tags=["google-merchant"]
)

api_router.include_router(
    alerts.router,
    prefix="/alerts",
    tags=["alerts"]
)

api_router.include_router(
    promotions.router,
    prefix="/promotions",
    tags=["promotions"]
)
