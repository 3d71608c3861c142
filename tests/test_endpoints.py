"""
Tests for the HTTP surface.

The aggregator dependency is overridden with stub providers; the app lifespan
is not entered, so no real HTTP clients are opened.
"""

import pytest
from fastapi.testclient import TestClient

from price_aggregator.api.endpoints import get_aggregator
from price_aggregator.main import app
from price_aggregator.providers.base import UnsupportedSymbolError
from price_aggregator.services.price_aggregator import ERROR_PLACEHOLDER, PriceAggregatorService


@pytest.fixture
def stubs(make_stubs):
    return make_stubs(
        binance={"price": "64000.12000000"},
        coingecko={"price": "64001.50"},
        kraken={"price": "64000.10000"},
        coinbase={"price": "64000.01"},
    )


@pytest.fixture
def client(stubs):
    service = PriceAggregatorService(providers=stubs, source_timeout=5, expose_errors=False)
    app.dependency_overrides[get_aggregator] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestPriceEndpoint:
    """Test GET /price/{symbol}."""

    def test_returns_all_sources_in_order(self, client):
        response = client.get("/price/btc")

        assert response.status_code == 200
        assert response.json() == {
            "prices": [
                {"source": "Binance (BTC)", "price": "64000.12000000"},
                {"source": "CoinGecko (BTC)", "price": "64001.50"},
                {"source": "Kraken (BTC)", "price": "64000.10000"},
                {"source": "Coinbase (BTC)", "price": "64000.01"},
            ]
        }

    def test_partial_failure_is_still_ok(self, client, stubs):
        """Test a failing source does not change the HTTP status."""
        stubs[1].error = UnsupportedSymbolError("Unknown symbol for CoinGecko: XRP", "CoinGecko", "XRP")

        response = client.get("/price/XRP")

        assert response.status_code == 200
        prices = response.json()["prices"]
        assert len(prices) == 4
        assert prices[1] == {"source": "CoinGecko (XRP)", "price": ERROR_PLACEHOLDER}
        assert [p["price"] for p in prices if p["price"] == ERROR_PLACEHOLDER] == [ERROR_PLACEHOLDER]

    @pytest.mark.parametrize("path", ["/price", "/price/", "/price/%20%20"])
    def test_missing_symbol_is_bad_request(self, client, stubs, path):
        """Test an empty symbol is rejected before any source is queried."""
        response = client.get(path)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Symbol is required"
        assert body["error_code"] == "HTTP_400"
        assert all(stub.calls == [] for stub in stubs)

    def test_process_time_header(self, client):
        response = client.get("/price/eth")

        assert response.status_code == 200
        assert "X-Process-Time" in response.headers


class FailingAggregator:
    """Aggregator whose aggregate() breaks outside the provider error handling."""

    async def aggregate(self, symbol: str):
        raise RuntimeError("aggregator crashed")


class TestServiceEndpoints:
    """Test root, health and error handling."""

    def test_unhandled_error_is_structured_500(self):
        """Test an unexpected exception becomes an INTERNAL_ERROR response."""
        app.dependency_overrides[get_aggregator] = lambda: FailingAggregator()
        try:
            response = TestClient(app).get("/price/btc")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal server error"
        assert body["error_code"] == "INTERNAL_ERROR"
        assert "aggregator crashed" not in response.text

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["providers"] == ["Binance", "CoinGecko", "Kraken", "Coinbase"]
        assert body["source_timeout"] == 5

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_unknown_route_is_structured_404(self, client):
        response = client.get("/prices/btc")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "NOT_FOUND"
        assert body["details"]["path"] == "/prices/btc"
