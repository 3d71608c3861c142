"""
Abstract base class for price providers in Crypto Price Aggregator.
Defines the interface that all exchange adapters must implement.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple
import httpx

from ..api.schemas import Exchange
from ..core.logging_config import create_logger

logger = create_logger(__name__)


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider: str, symbol: Optional[str] = None):
        self.message = message
        self.provider = provider
        self.symbol = symbol
        super().__init__(self.message)


class UnsupportedSymbolError(ProviderError):
    """Exception raised when a symbol has no mapping for the provider."""
    pass


class RemoteError(ProviderError):
    """Exception raised when the provider answers with an error."""

    def __init__(
        self,
        message: str,
        provider: str,
        symbol: Optional[str] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None
    ):
        self.status_code = status_code
        self.code = code
        super().__init__(message, provider, symbol)


class DecodeError(ProviderError):
    """Exception raised when a response body does not have the expected shape."""
    pass


class PriceNotFoundError(ProviderError):
    """Exception raised when a well-formed response carries no price."""
    pass


class TransportError(ProviderError):
    """Exception raised when the provider cannot be reached."""
    pass


class BasePriceProvider(ABC):
    """Abstract base class for exchange price providers."""

    def __init__(self, exchange: Exchange, base_url: str, client: Optional[httpx.AsyncClient] = None):
        self.exchange = exchange
        self.name = exchange.value
        self.base_url = base_url
        self.client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()

    async def connect(self) -> None:
        """Initialize HTTP client connection."""
        if self.client is None:
            timeout = httpx.Timeout(30.0, connect=10.0)  # 30s total, 10s connect
            limits = httpx.Limits(max_keepalive_connections=10, max_connections=20)

            self.client = httpx.AsyncClient(
                timeout=timeout,
                limits=limits,
                headers=self._get_default_headers(),
                follow_redirects=True
            )
            self._owns_client = True

            logger.debug("Connected to provider", extra={"provider": self.name})

    async def disconnect(self) -> None:
        """Close HTTP client connection."""
        if self.client and self._owns_client:
            await self.client.aclose()
            self.client = None
            logger.debug("Disconnected from provider", extra={"provider": self.name})

    def _get_default_headers(self) -> Dict[str, str]:
        """Get default HTTP headers for requests."""
        return {
            'User-Agent': 'Crypto-Price-Aggregator/1.0.0',
            'Accept': 'application/json'
        }

    async def _get_json(self, url: str, symbol: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform a single GET request and decode its JSON body.

        Raises:
            TransportError: If the provider cannot be reached
            RemoteError: If the provider answers with a non-success status
            DecodeError: If the body is not valid JSON
        """
        if not self.client:
            await self.connect()

        logger.debug("Making request to provider", extra={
            "provider": self.name,
            "url": url,
            "params": params
        })

        try:
            response = await self.client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timeout for {self.name}", self.name, symbol) from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error for {self.name}: {str(e)}", self.name, symbol) from e

        if not response.is_success:
            raise self._build_remote_error(response, symbol)

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON response from {self.name}: {str(e)}", self.name, symbol) from e

        logger.debug("Received response from provider", extra={
            "provider": self.name,
            "status_code": response.status_code,
            "response_size": len(response.content)
        })
        return data

    def _build_remote_error(self, response: httpx.Response, symbol: str) -> RemoteError:
        """Build a RemoteError, surfacing the provider's own diagnostic when it sends one."""
        try:
            body = response.json()
        except ValueError:
            body = None

        code, message = self._parse_error_body(body) if body is not None else (None, None)

        if message:
            text = f"{self.name} returned status {response.status_code}: {message}"
            if code is not None:
                text = f"{text} (code {code})"
        else:
            text = f"{self.name} returned status {response.status_code}"

        return RemoteError(text, self.name, symbol, status_code=response.status_code, code=code)

    def _parse_error_body(self, body: Any) -> Tuple[Optional[str], Optional[str]]:
        """
        Extract (code, message) from a provider error body.
        Providers with a structured error format override this.
        """
        return None, None

    def _normalize_symbol(self, symbol: str) -> str:
        """Normalize a canonical symbol for this provider."""
        return symbol.upper().strip()

    def _translate_symbol(self, table: Mapping[str, str], symbol: str) -> str:
        """Look up the provider-specific identifier for a canonical symbol."""
        identifier = table.get(self._normalize_symbol(symbol))
        if identifier is None:
            raise UnsupportedSymbolError(f"Unknown symbol for {self.name}: {symbol}", self.name, symbol)
        return identifier

    def _require_object(self, data: Any, symbol: str) -> Dict[str, Any]:
        """Ensure a decoded body is a JSON object."""
        if not isinstance(data, dict):
            raise DecodeError(
                f"Unexpected response shape from {self.name}: expected object, got {type(data).__name__}",
                self.name,
                symbol
            )
        return data

    def _price_to_string(self, value: Any, symbol: str) -> str:
        """Return a provider-native price string, rejecting missing or malformed values."""
        if value is None or value == "":
            raise PriceNotFoundError(f"Price not found for {symbol} on {self.name}", self.name, symbol)
        if not isinstance(value, str):
            raise DecodeError(
                f"Unexpected price type from {self.name}: {type(value).__name__}",
                self.name,
                symbol
            )
        return value

    def label(self, symbol: str) -> str:
        """Get the report label for a canonical symbol."""
        return f"{self.name} ({symbol})"

    @abstractmethod
    async def fetch_price(self, symbol: str) -> str:
        """
        Get the current USD price for a canonical symbol.

        Args:
            symbol: Canonical uppercase ticker, e.g. "BTC"

        Returns:
            The price as reported by the exchange

        Raises:
            ProviderError: If unable to fetch the price
        """
        pass
