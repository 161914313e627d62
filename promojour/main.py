"""
FastAPI application for the PromoJour distribution backend.

Internal API: the cron-triggered campaign distribution pass, manual
publishing, Merchant Center sync and promotion maintenance. Every request gets
an ``X-Request-ID`` and start/finish log lines; errors are JSON (see
``promojour.api.errors``).
"""
import asyncio
import time
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from promojour import config
from promojour.api import health
from promojour.api.errors import register_exception_handlers
from promojour.api.v1 import api_router
from promojour.database import Base, engine
from promojour.jobs.distribution_worker import DistributionWorker
from promojour.utils import setup_logging, get_logger

setup_logging(log_level=config.LOG_LEVEL, log_file=config.LOG_FILE, enable_console=True)
logger = get_logger(__name__)

API_DESCRIPTION = """
Internal backend for PromoJour promotional campaigns.

* **Campaign distribution**: daily promotion selection per campaign, fanned out to stores
* **Social publishing**: Facebook / Instagram Reels and image posts through the Graph API
* **Publication history**: append-only ledger of every publish attempt
* **Google Merchant Center**: active promotions pushed as products
* **Stock alerts**: Brevo emails when a store runs low on promotions

Every `/api/v1` endpoint requires `Authorization: Bearer <SERVICE_ROLE_KEY>`.
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, optionally start the in-process distribution worker."""
    logger.info("Application startup initiated")
    Base.metadata.create_all(bind=engine)

    worker: DistributionWorker | None = None
    if config.DISTRIBUTION_WORKER["enabled"]:
        worker = DistributionWorker()
        worker.start()
    else:
        logger.info("Distribution worker not enabled; relying on external cron")
    app.state.distribution_worker = worker  # type: ignore[attr-defined]
    logger.info("Application startup completed")
    try:
        yield
    finally:
        if worker is not None:
            # Waits for a pass in flight, up to the shutdown timeout
            await asyncio.to_thread(worker.stop)
        logger.info("Application shutdown completed")


app = FastAPI(
    title="PromoJour Distribution API",
    description=API_DESCRIPTION,
    version=health.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag the request with an id, time it and log both ends."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    started = time.perf_counter()
    log = logger.bind(request_id=request_id, method=request.method, path=request.url.path)
    log.info("Request started", remote_addr=request.client.host if request.client else "unknown")

    response = await call_next(request)

    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = str(elapsed_ms)
    response.headers["X-Content-Type-Options"] = "nosniff"
    log.info("Request completed", status_code=response.status_code, process_time_ms=elapsed_ms)
    return response


register_exception_handlers(app)
app.include_router(health.router)
app.include_router(api_router, prefix="/api/v1")


@app.get("/", tags=["root"])
async def root():
    return {
        "message": "PromoJour Distribution API",
        "version": health.VERSION,
        "documentation": "/docs",
        "health_check": "/health",
        "api_base": "/api/v1",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "promojour.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["promojour"],
        log_level=config.LOG_LEVEL.lower(),
    )
