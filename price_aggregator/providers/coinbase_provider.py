"""
Coinbase price provider implementation.
Reads the USD spot price from the Coinbase v2 prices API.
"""

from typing import Any, Optional, Tuple
from urllib.parse import quote
import httpx

from .base import BasePriceProvider
from ..api.schemas import Exchange
from ..core.config import settings


class CoinbaseProvider(BasePriceProvider):
    """Coinbase spot price provider."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        super().__init__(
            exchange=Exchange.COINBASE,
            base_url=settings.coinbase_api_url,
            client=client
        )

    def _parse_error_body(self, body: Any) -> Tuple[Optional[str], Optional[str]]:
        """Coinbase errors look like {"errors": [{"id": "not_found", "message": "..."}]}."""
        if isinstance(body, dict):
            errors = body.get('errors')
            if isinstance(errors, list) and errors and isinstance(errors[0], dict):
                first = errors[0]
                code = first.get('id')
                message = first.get('message')
                if message:
                    return (str(code) if code is not None else None), str(message)
        return None, None

    async def fetch_price(self, symbol: str) -> str:
        """Get the USD spot price."""
        # Single path segment; "?" or "#" in a symbol must not alter the resource
        pair = quote(f"{self._normalize_symbol(symbol)}-USD", safe="")

        data = await self._get_json(f"{self.base_url}/prices/{pair}/spot", symbol)
        data = self._require_object(data, symbol)

        payload = data.get('data')
        amount = payload.get('amount') if isinstance(payload, dict) else None

        return self._price_to_string(amount, symbol)
