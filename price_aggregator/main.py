"""
Main FastAPI application for Crypto Price Aggregator Service.
Includes lifespan management for provider HTTP clients.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import time

from price_aggregator.core.config import settings
from price_aggregator.core.logging_config import setup_logging, create_logger
from price_aggregator.api.endpoints import router as api_router
from price_aggregator.services.price_aggregator import aggregator_service
from price_aggregator.api.schemas import ErrorResponse

setup_logging()
logger = create_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Keep provider HTTP clients open for the lifetime of the app."""
    logger.info("Starting price aggregator", extra={
        "version": settings.app_version,
        "providers": aggregator_service.provider_names(),
        "source_timeout": aggregator_service.source_timeout
    })

    await aggregator_service.initialize()
    try:
        yield
    finally:
        await aggregator_service.shutdown()


app = FastAPI(
    title=settings.app_name,
    description="Concurrent cryptocurrency price aggregation across Binance, CoinGecko, Kraken and Coinbase",
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan
)

# Read-only public API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


def error_response(status_code: int, error: str, error_code: str, details=None) -> JSONResponse:
    """Build a structured JSON error response."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(ErrorResponse(
            error=error,
            error_code=error_code,
            details=details
        ))
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request once with its outcome and duration."""
    start_time = time.perf_counter()
    log_context = {"method": request.method, "path": request.url.path}

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error("Request failed", extra={
            **log_context,
            "error": str(e),
            "process_time": round(time.perf_counter() - start_time, 4)
        }, exc_info=True)
        return error_response(500, "Internal server error", "INTERNAL_ERROR")

    process_time = time.perf_counter() - start_time
    logger.info("Request completed", extra={
        **log_context,
        "status_code": response.status_code,
        "process_time": round(process_time, 4)
    })
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render routing and validation errors as ErrorResponse bodies."""
    if exc.status_code == 404:
        return error_response(404, "Endpoint not found", "NOT_FOUND", {
            "path": request.url.path,
            "method": request.method
        })

    return error_response(
        exc.status_code,
        str(exc.detail),
        f"HTTP_{exc.status_code}",
        {"status_code": exc.status_code}
    )


app.include_router(api_router, tags=["Price API"])


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint with service information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs_url": "/docs" if settings.debug else "disabled",
        "timestamp": datetime.utcnow()
    }


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "price_aggregator.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    run()
