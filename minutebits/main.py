from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from minutebits.api.router import api_router
from minutebits.core.config import settings
from minutebits.core.logger import configure_logging, get_logger
from minutebits.exceptions import (
    InvalidExpression,
    InvalidGranularity,
    InvalidIdentifier,
    StoreUnavailable,
)
from minutebits.services.tracker import EventTracker
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from shared.utils.retry import retry

# Configure logging once and get service logger
configure_logging()
logger = get_logger("minutebits.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("minutebits_starting")
    app.state.tracker = _init_tracker_with_retry()
    app.state.ready = True
    try:
        yield
    finally:
        logger.info("minutebits_stopping")
        app.state.ready = False


app = FastAPI(title="minutebits", version="0.1.0", lifespan=lifespan)
app.include_router(api_router)


def _init_tracker_with_retry() -> EventTracker:
    tracker = EventTracker.from_settings(settings)

    def _on_retry(attempt: int, exc: BaseException, sleep_for: float):
        logger.warning(
            "redis_connect_retry",
            extra={
                "attempt": attempt,
                "error": str(exc),
                "sleep_for": round(sleep_for, 2),
            },
        )

    retry(
        tracker.store.ping,
        retries=settings.redis_connect_retries,
        base_delay=0.5,
        max_delay=8.0,
        jitter=0.2,
        retry_on=(StoreUnavailable,),
        on_retry=_on_retry,
    )
    logger.info(
        "redis_connected",
        extra={"time_spans": [g.value for g in tracker.time_spans]},
    )
    return tracker


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.error("store_unavailable", extra={"path": request.url.path})
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(InvalidGranularity)
async def invalid_granularity_handler(
    request: Request, exc: InvalidGranularity
):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidIdentifier)
async def invalid_identifier_handler(
    request: Request, exc: InvalidIdentifier
):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(InvalidExpression)
async def invalid_expression_handler(
    request: Request, exc: InvalidExpression
):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
