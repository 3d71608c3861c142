"""Shared test doubles for providers and HTTP transports."""

import asyncio
from typing import Callable, List, Optional

import httpx

from price_aggregator.api.schemas import Exchange
from price_aggregator.providers.base import BasePriceProvider

EXCHANGE_ORDER = (Exchange.BINANCE, Exchange.COINGECKO, Exchange.KRAKEN, Exchange.COINBASE)


class StubProvider(BasePriceProvider):
    """Provider returning a canned price or raising a canned error."""

    def __init__(
        self,
        exchange: Exchange,
        price: str = "100.00",
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        super().__init__(exchange=exchange, base_url="http://stub.invalid")
        self.price = price
        self.error = error
        self.delay = delay
        self.calls: List[str] = []

    async def fetch_price(self, symbol: str) -> str:
        self.calls.append(symbol)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.price


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)
