"""
Price aggregator service for Crypto Price Aggregator.
Fans a symbol out to every registered provider concurrently and collects
one entry per provider, in registration order.
"""

import asyncio
import time
from typing import List, Optional

from ..api.schemas import PriceEntry, PriceReport
from ..core.config import settings
from ..core.logging_config import create_logger
from ..providers.base import BasePriceProvider, ProviderError
from ..providers.binance_provider import BinanceProvider
from ..providers.coingecko_provider import CoinGeckoProvider
from ..providers.kraken_provider import KrakenProvider
from ..providers.coinbase_provider import CoinbaseProvider

logger = create_logger(__name__)

ERROR_PLACEHOLDER = "Error fetching price"


def default_providers() -> List[BasePriceProvider]:
    """Build the standard provider registry. The order is the report order."""
    return [
        BinanceProvider(),
        CoinGeckoProvider(),
        KrakenProvider(),
        CoinbaseProvider()
    ]


class PriceAggregatorService:
    """Service that queries all price providers concurrently for one symbol."""

    def __init__(
        self,
        providers: Optional[List[BasePriceProvider]] = None,
        source_timeout: Optional[float] = None,
        expose_errors: Optional[bool] = None
    ):
        """
        Args:
            providers: Providers in report order; defaults to the four exchanges
            source_timeout: Seconds allowed per provider; None uses settings, <= 0 disables
            expose_errors: Append error details to the placeholder; None uses settings
        """
        self._providers: List[BasePriceProvider] = list(providers) if providers is not None else default_providers()
        self._source_timeout = source_timeout
        self._expose_errors = expose_errors

    @property
    def providers(self) -> List[BasePriceProvider]:
        return list(self._providers)

    @property
    def source_timeout(self) -> Optional[float]:
        """Effective per-provider timeout in seconds, None when unbounded."""
        if self._source_timeout is None:
            return settings.get_source_timeout()
        return self._source_timeout if self._source_timeout > 0 else None

    @property
    def expose_errors(self) -> bool:
        if self._expose_errors is None:
            return settings.expose_source_errors
        return self._expose_errors

    def provider_names(self) -> List[str]:
        """Get registered provider names in report order."""
        return [provider.name for provider in self._providers]

    async def initialize(self) -> None:
        """Open HTTP clients for all providers."""
        logger.info("Initializing price aggregator service")

        for provider in self._providers:
            try:
                await provider.connect()
                logger.info("Initialized provider", extra={"provider": provider.name})

            except Exception as e:
                # Providers connect lazily on first request as well
                logger.error("Failed to initialize provider", extra={
                    "provider": provider.name,
                    "error": str(e)
                })
                continue

        logger.info("Price aggregator service initialized", extra={
            "providers": self.provider_names(),
            "source_timeout": self.source_timeout
        })

    async def shutdown(self) -> None:
        """Close HTTP clients for all providers."""
        logger.info("Shutting down price aggregator service")

        for provider in self._providers:
            try:
                await provider.disconnect()
            except Exception as e:
                logger.warning("Error disconnecting provider", extra={
                    "provider": provider.name,
                    "error": str(e)
                })

        logger.info("Price aggregator service shutdown complete")

    async def aggregate(self, symbol: str) -> PriceReport:
        """
        Get the price of a symbol from every provider.

        Never raises for provider failures: a failed provider keeps its slot
        and reports an error message as its price.

        Args:
            symbol: Ticker symbol, any case

        Returns:
            PriceReport with one entry per provider, in registration order
        """
        symbol = symbol.strip().upper()
        start_time = time.perf_counter()

        # gather keeps submission order, so entry i always belongs to provider i
        entries = await asyncio.gather(
            *(self._fetch_entry(provider, symbol) for provider in self._providers)
        )

        logger.info("Price aggregation completed", extra={
            "symbol": symbol,
            "providers": len(entries),
            "failed": sum(1 for entry in entries if entry.price.startswith(ERROR_PLACEHOLDER)),
            "duration_seconds": round(time.perf_counter() - start_time, 4)
        })

        return PriceReport(prices=list(entries))

    async def _fetch_entry(self, provider: BasePriceProvider, symbol: str) -> PriceEntry:
        """Fetch one provider's price and turn any failure into a placeholder entry."""
        label = provider.label(symbol)
        timeout = self.source_timeout

        try:
            price = await asyncio.wait_for(provider.fetch_price(symbol), timeout=timeout)

        except asyncio.TimeoutError:
            logger.warning("Provider timed out while fetching price", extra={
                "provider": provider.name,
                "symbol": symbol,
                "timeout": timeout
            })
            return PriceEntry(source=label, price=self._placeholder(f"timed out after {timeout}s"))

        except ProviderError as e:
            logger.warning("Provider error while fetching price", extra={
                "provider": provider.name,
                "symbol": symbol,
                "error_type": type(e).__name__,
                "error": str(e)
            })
            return PriceEntry(source=label, price=self._placeholder(str(e)))

        except Exception as e:
            logger.error("Unexpected error fetching price", extra={
                "provider": provider.name,
                "symbol": symbol,
                "error": str(e)
            }, exc_info=True)
            return PriceEntry(source=label, price=self._placeholder(str(e)))

        logger.debug("Fetched price from provider", extra={
            "provider": provider.name,
            "symbol": symbol,
            "price": price
        })
        return PriceEntry(source=label, price=price)

    def _placeholder(self, detail: str) -> str:
        if self.expose_errors and detail:
            return f"{ERROR_PLACEHOLDER}: {detail}"
        return ERROR_PLACEHOLDER


# Global aggregator service instance
aggregator_service = PriceAggregatorService()
