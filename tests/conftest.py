"""Pytest fixtures for testing"""

import pytest
import httpx
from datetime import datetime, timedelta
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from homefin.api.main import create_app
from homefin.api.dependencies import get_rate_cache, get_rate_client
from homefin.infrastructure.clients.exchange_rate import ExchangeRateCache, NRBRateClient
from homefin.infrastructure.database.models import Base
from homefin.infrastructure.database.session import get_db
from homefin.domain.models import Expense


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def nrb_payload(usd_buy: str = "133.45", usd_sell: str = "134.05", day: str = "2025-03-14") -> dict:
    """Forex API body in the shape NRB publishes"""
    return {
        "data": {
            "payload": [
                {
                    "date": day,
                    "rates": [
                        {"currency": {"iso3": "INR"}, "buy": "160.00", "sell": "160.15"},
                        {"currency": {"iso3": "USD"}, "buy": usd_buy, "sell": usd_sell},
                    ],
                }
            ]
        }
    }


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def forex_calls() -> list[httpx.Request]:
    return []


@pytest.fixture
def forex_transport(forex_calls: list[httpx.Request]) -> httpx.MockTransport:
    """Forex API stub returning a healthy USD rate and recording each request"""

    def handler(request: httpx.Request) -> httpx.Response:
        forex_calls.append(request)
        return httpx.Response(200, json=nrb_payload())

    return httpx.MockTransport(handler)


@pytest.fixture
def client(db: Session, forex_transport: httpx.MockTransport) -> TestClient:
    """Create FastAPI test client with test database and stubbed forex API"""
    app = create_app()
    cache = ExchangeRateCache(ttl_seconds=3600)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_client] = lambda: NRBRateClient(
        base_url="https://nrb.test", transport=forex_transport
    )
    app.dependency_overrides[get_rate_cache] = lambda: cache
    return TestClient(app)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time, mid-month so month arithmetic is unambiguous"""
    return datetime(2025, 3, 15, 12, 0)


def make_expense(
    amount: float,
    category: str = "Food",
    description: str = "Groceries",
    date: datetime | None = None,
    **kwargs,
) -> Expense:
    return Expense(
        amount=amount,
        category=category,
        description=description,
        date=date or datetime(2025, 3, 15, 12, 0) - timedelta(days=60),
        **kwargs,
    )


@pytest.fixture
def expense_factory():
    return make_expense


@pytest.fixture
def forex_body():
    """Builder for forex API response bodies"""
    return nrb_payload


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
