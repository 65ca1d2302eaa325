"""
E2E tests against the mock NRB forex server.

The mock app is mounted in-process through httpx's ASGI transport, so the real
client code (URL building, query params, payload parsing, caching) runs end to end
without network access. To exercise it over HTTP instead:
    uvicorn mocks.nrb_server.main:app --port 8001
"""

import httpx
import pytest
from datetime import date
from mocks.nrb_server.main import app as nrb_app
from homefin.infrastructure.clients.exchange_rate import (
    ExchangeRateCache,
    NRBRateClient,
    get_usd_to_npr_rate,
)
from homefin.domain.remittance import build_remittance_quote


@pytest.fixture
def nrb_client() -> NRBRateClient:
    return NRBRateClient(base_url="http://nrb.mock", transport=httpx.ASGITransport(app=nrb_app))


@pytest.mark.integration
async def test_usd_rate_from_mock_server(nrb_client: NRBRateClient):
    data = await nrb_client.get_usd_rate(today=date(2025, 3, 14))

    assert data.usd.currency == "USD"
    assert data.usd.buy == 133.45
    assert data.usd.sell == 134.05
    assert data.usd.date == "2025-03-14"
    assert data.is_fallback is False


@pytest.mark.integration
async def test_cached_lookup_against_mock_server(nrb_client: NRBRateClient):
    cache = ExchangeRateCache(ttl_seconds=3600)

    first = await get_usd_to_npr_rate(nrb_client, cache)
    second = await get_usd_to_npr_rate(nrb_client, cache)

    assert second is first
    assert first.is_fallback is False


@pytest.mark.integration
async def test_unreachable_server_falls_back():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = NRBRateClient(base_url="http://nrb.down", transport=httpx.MockTransport(refuse))

    data = await get_usd_to_npr_rate(client, ExchangeRateCache(ttl_seconds=3600))

    assert data.is_fallback is True
    assert data.usd.sell == 133.1


@pytest.mark.integration
async def test_quote_with_mock_server_rate(nrb_client: NRBRateClient):
    """Test a full quote priced at the mock server's sell rate"""
    data = await get_usd_to_npr_rate(nrb_client, ExchangeRateCache(ttl_seconds=3600))

    quote = build_remittance_quote(500, "moneygram", data.usd.sell)

    assert quote.transfer_fee == 14.0
    assert quote.total_cost == 514.0
    assert quote.local_amount == 67025.0
