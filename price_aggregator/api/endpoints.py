"""
FastAPI endpoints for Crypto Price Aggregator Service.
"""

from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends

from ..api.schemas import PriceReport, HealthResponse
from ..core.config import settings
from ..core.logging_config import create_logger
from ..services.price_aggregator import PriceAggregatorService, aggregator_service

logger = create_logger(__name__)

# Create API router
router = APIRouter()

# Application startup time for uptime calculation
app_start_time = datetime.utcnow()


def get_aggregator() -> PriceAggregatorService:
    """Dependency providing the price aggregator service."""
    return aggregator_service


@router.get("/health", response_model=HealthResponse)
async def health_check(aggregator: PriceAggregatorService = Depends(get_aggregator)):
    """
    Health check endpoint.
    Reports service version, uptime and the registered price sources.
    """
    uptime_seconds = (datetime.utcnow() - app_start_time).total_seconds()
    providers = aggregator.provider_names()

    return HealthResponse(
        status="healthy" if providers else "unhealthy",
        version=settings.app_version,
        uptime_seconds=uptime_seconds,
        providers=providers,
        source_timeout=aggregator.source_timeout
    )


@router.get("/price", include_in_schema=False)
@router.get("/price/", include_in_schema=False)
async def get_prices_without_symbol():
    """Reject requests that omit the symbol."""
    raise HTTPException(
        status_code=400,
        detail="Symbol is required"
    )


@router.get("/price/{symbol}", response_model=PriceReport)
async def get_prices(symbol: str, aggregator: PriceAggregatorService = Depends(get_aggregator)):
    """
    Get the current price of a symbol from every exchange.

    Args:
        symbol: Ticker symbol (e.g., "BTC", "eth")

    Returns:
        One entry per exchange in fixed order. A source that failed reports
        an error message as its price; the response is still 200.
    """
    symbol = symbol.strip().upper()

    if not symbol:
        raise HTTPException(
            status_code=400,
            detail="Symbol is required"
        )

    logger.info("Price request received", extra={"symbol": symbol})

    return await aggregator.aggregate(symbol)
