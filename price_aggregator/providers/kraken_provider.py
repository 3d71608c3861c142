"""
Kraken price provider implementation.
Reads the last trade closed price from the public ticker endpoint.
"""

from typing import Any, Optional, Tuple
import httpx

from .base import BasePriceProvider, PriceNotFoundError, RemoteError
from .symbols import KRAKEN_PAIRS
from ..api.schemas import Exchange
from ..core.config import settings


class KrakenProvider(BasePriceProvider):
    """Kraken public ticker provider."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        super().__init__(
            exchange=Exchange.KRAKEN,
            base_url=settings.kraken_api_url,
            client=client
        )

    def _parse_error_body(self, body: Any) -> Tuple[Optional[str], Optional[str]]:
        """Kraken errors come as a list of strings, e.g. ["EQuery:Unknown asset pair"]."""
        if isinstance(body, dict):
            errors = body.get('error')
            if isinstance(errors, list) and errors:
                return None, "; ".join(str(e) for e in errors)
        return None, None

    async def fetch_price(self, symbol: str) -> str:
        """Get the last trade closed price for the USD pair."""
        pair = self._translate_symbol(KRAKEN_PAIRS, symbol)

        data = await self._get_json(
            f"{self.base_url}/public/Ticker",
            symbol,
            params={'pair': pair}
        )
        data = self._require_object(data, symbol)

        # Kraken answers 200 with a populated error list on failure
        _, message = self._parse_error_body(data)
        if message:
            raise RemoteError(f"{self.name} returned error: {message}", self.name, symbol)

        result = data.get('result')
        ticker = result.get(pair) if isinstance(result, dict) else None
        closed = ticker.get('c') if isinstance(ticker, dict) else None

        if not isinstance(closed, list) or not closed:
            raise PriceNotFoundError(f"Price not found for {symbol} on {self.name}", self.name, symbol)

        # "c" is [price, lot volume]
        return self._price_to_string(closed[0], symbol)
