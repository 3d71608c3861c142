"""
Binance price provider implementation.
Reads the latest USDT price from the public ticker endpoint.
"""

from typing import Any, Optional, Tuple
import httpx

from .base import BasePriceProvider
from ..api.schemas import Exchange
from ..core.config import settings


class BinanceProvider(BasePriceProvider):
    """Binance spot ticker provider."""

    quote_asset = "USDT"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        super().__init__(
            exchange=Exchange.BINANCE,
            base_url=settings.binance_api_url,
            client=client
        )

    def _parse_error_body(self, body: Any) -> Tuple[Optional[str], Optional[str]]:
        """Binance errors look like {"code": -1121, "msg": "Invalid symbol."}."""
        if isinstance(body, dict) and 'msg' in body:
            code = body.get('code')
            return (str(code) if code is not None else None), str(body['msg'])
        return None, None

    async def fetch_price(self, symbol: str) -> str:
        """Get the latest trade price against USDT."""
        pair = f"{self._normalize_symbol(symbol)}{self.quote_asset}"

        data = await self._get_json(
            f"{self.base_url}/ticker/price",
            symbol,
            params={'symbol': pair}
        )
        data = self._require_object(data, symbol)

        return self._price_to_string(data.get('price'), symbol)
