"""Nepal Rastra Bank forex client and the cached USD/NPR rate lookup"""

import asyncio
import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional
import httpx
from homefin.config import settings
from homefin.domain.exceptions import ExchangeRateFetchError
from homefin.domain.models import ExchangeRate, ExchangeRateData
from homefin.infrastructure.observability.logging import log_rate_fallback
from homefin.infrastructure.observability.metrics import (
    exchange_rate_fetch_counter,
    exchange_rate_latency_histogram,
)


class NRBRateClient:
    """Client for the Nepal Rastra Bank published forex rates API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.nrb_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_usd_rate(self, today: date | None = None) -> ExchangeRateData:
        """
        Fetch the latest published USD buy/sell rate.

        Queries yesterday..today and reads data.payload[0].rates[] for iso3 == "USD".

        Raises:
            ExchangeRateFetchError: On timeout, HTTP errors, malformed body or missing USD rate
        """
        today = today or date.today()
        yesterday = today - timedelta(days=1)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with exchange_rate_latency_histogram.time():
                    response = await client.get(
                        f"{self.base_url}/api/forex/v1/rates",
                        params={
                            "from": yesterday.isoformat(),
                            "to": today.isoformat(),
                            "per_page": 10,
                            "page": 1,
                        },
                    )
                response.raise_for_status()
                data = response.json()

                latest = data["data"]["payload"][0]
                usd = next((r for r in latest["rates"] if r["currency"]["iso3"] == "USD"), None)
                if usd is None:
                    raise ExchangeRateFetchError("USD rate missing from forex payload")

                return ExchangeRateData(
                    usd=ExchangeRate(
                        currency="USD",
                        buy=float(usd["buy"]),
                        sell=float(usd["sell"]),
                        date=latest["date"],
                    ),
                    last_updated=datetime.now(),
                )

            except httpx.TimeoutException as e:
                raise ExchangeRateFetchError(f"Forex API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise ExchangeRateFetchError(f"Forex API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise ExchangeRateFetchError(f"Forex API unreachable: {e}") from e
            except (KeyError, IndexError, ValueError, TypeError) as e:
                raise ExchangeRateFetchError(f"Invalid forex data: {e!r}") from e


@dataclass
class _CacheEntry:
    data: ExchangeRateData
    fetched_at: float


class ExchangeRateCache:
    """
    Time-bounded holder for the last rate served.

    The lock makes refreshes single-flight: concurrent lookups on an expired
    entry wait for one fetch instead of each calling the API.
    """

    def __init__(self, ttl_seconds: float | None = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.exchange_rate_cache_ttl_seconds
        self._clock = clock
        self._entry: Optional[_CacheEntry] = None
        self.lock = asyncio.Lock()

    def get(self) -> Optional[ExchangeRateData]:
        if self._entry and self._clock() - self._entry.fetched_at < self.ttl_seconds:
            return self._entry.data
        return None

    def put(self, data: ExchangeRateData) -> None:
        self._entry = _CacheEntry(data=data, fetched_at=self._clock())

    def clear(self) -> None:
        self._entry = None


def fallback_rate(today: date | None = None) -> ExchangeRateData:
    return ExchangeRateData(
        usd=ExchangeRate(
            currency="USD",
            buy=settings.fallback_usd_buy_rate,
            sell=settings.fallback_usd_sell_rate,
            date=(today or date.today()).isoformat(),
        ),
        last_updated=datetime.now(),
        is_fallback=True,
    )


async def get_usd_to_npr_rate(client: NRBRateClient, cache: ExchangeRateCache) -> ExchangeRateData:
    """
    Return the USD/NPR rate, fetching at most once per cache TTL.

    Never raises: any fetch failure is logged and counted, and the fallback rate is
    returned and cached for the rest of the TTL.
    """
    cached = cache.get()
    if cached:
        exchange_rate_fetch_counter.labels(outcome="cached").inc()
        return cached

    async with cache.lock:
        # Another waiter may have refreshed while we queued for the lock
        cached = cache.get()
        if cached:
            exchange_rate_fetch_counter.labels(outcome="cached").inc()
            return cached

        try:
            data = await client.get_usd_rate()
            exchange_rate_fetch_counter.labels(outcome="live").inc()
        except ExchangeRateFetchError as e:
            data = fallback_rate()
            exchange_rate_fetch_counter.labels(outcome="fallback").inc()
            log_rate_fallback(str(e), data.usd.sell)

        cache.put(data)
        return data


# Process-wide cache shared by API requests
rate_cache = ExchangeRateCache()
