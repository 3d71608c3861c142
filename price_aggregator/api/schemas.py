"""
Pydantic schemas for Crypto Price Aggregator Service.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Dict, Any, Literal
from pydantic import BaseModel, Field


class Exchange(str, Enum):
    """Supported price sources, valued by their display name."""
    BINANCE = "Binance"
    COINGECKO = "CoinGecko"
    KRAKEN = "Kraken"
    COINBASE = "Coinbase"


class PriceEntry(BaseModel):
    """Price reported by a single source."""
    source: str = Field(..., description="Source label, e.g. 'Binance (BTC)'")
    price: str = Field(..., description="Price as reported by the source, or an error message")


class PriceReport(BaseModel):
    """Prices from all registered sources, in registration order."""
    prices: List[PriceEntry] = Field(default_factory=list, description="One entry per registered source")


class HealthResponse(BaseModel):
    """Model for health check response."""
    status: Literal["healthy", "unhealthy"] = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")
    version: str = Field(..., description="Service version")
    uptime_seconds: float = Field(..., description="Service uptime in seconds")
    providers: List[str] = Field(default_factory=list, description="Registered price sources in order")
    source_timeout: Optional[float] = Field(None, description="Per-source timeout in seconds")


class ErrorResponse(BaseModel):
    """Model for error responses."""
    error: str = Field(..., description="Error message")
    error_code: str = Field(..., description="Error code")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
