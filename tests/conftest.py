"""Test configuration and fixtures for the entire test suite."""

from typing import Callable, List

import httpx
import pytest

from helpers import EXCHANGE_ORDER, RecordingTransport, StubProvider


@pytest.fixture
def make_stubs() -> Callable[..., List[StubProvider]]:
    """Build one stub per exchange in report order, with per-exchange overrides."""

    def _make(**overrides) -> List[StubProvider]:
        return [
            StubProvider(exchange, **overrides.get(exchange.name.lower(), {}))
            for exchange in EXCHANGE_ORDER
        ]

    return _make


@pytest.fixture
def mock_http() -> Callable:
    """Build an AsyncClient backed by a recording mock transport."""

    def _make(handler):
        transport = RecordingTransport(handler)
        return httpx.AsyncClient(transport=transport), transport

    return _make
