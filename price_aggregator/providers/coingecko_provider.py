"""
CoinGecko price provider implementation.
Provides cryptocurrency prices using the CoinGecko simple-price API.
"""

from typing import Any, Optional, Tuple
import httpx

from .base import BasePriceProvider, DecodeError, PriceNotFoundError
from .symbols import COINGECKO_IDS
from ..api.schemas import Exchange
from ..core.config import settings


class CoinGeckoProvider(BasePriceProvider):
    """CoinGecko price provider for cryptocurrency data."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        super().__init__(
            exchange=Exchange.COINGECKO,
            base_url=settings.coingecko_api_url,
            client=client
        )

    def _parse_error_body(self, body: Any) -> Tuple[Optional[str], Optional[str]]:
        """
        CoinGecko reports errors either as
        {"status": {"error_code": 429, "error_message": "..."}} or {"error": "..."}.
        """
        if not isinstance(body, dict):
            return None, None

        status = body.get('status')
        if isinstance(status, dict) and 'error_message' in status:
            code = status.get('error_code')
            return (str(code) if code is not None else None), str(status['error_message'])

        if 'error' in body:
            return None, str(body['error'])

        return None, None

    async def fetch_price(self, symbol: str) -> str:
        """Get the USD price, formatted to two decimal places."""
        coin_id = self._translate_symbol(COINGECKO_IDS, symbol)

        data = await self._get_json(
            f"{self.base_url}/simple/price",
            symbol,
            params={
                'ids': coin_id,
                'vs_currencies': 'usd'
            }
        )
        data = self._require_object(data, symbol)

        coin_data = data.get(coin_id)
        if not isinstance(coin_data, dict) or coin_data.get('usd') is None:
            raise PriceNotFoundError(f"Price not found for {symbol} on {self.name}", self.name, symbol)

        price = coin_data['usd']
        # CoinGecko returns a JSON number rather than a decimal string
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise DecodeError(
                f"Unexpected price type from {self.name}: {type(price).__name__}",
                self.name,
                symbol
            )

        return f"{price:.2f}"
