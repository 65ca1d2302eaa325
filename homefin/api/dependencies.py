"""Dependency injection for FastAPI endpoints"""

import uuid
from fastapi import HTTPException, Request
from homefin.infrastructure.clients.exchange_rate import ExchangeRateCache, NRBRateClient, rate_cache


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def parse_record_id(record_id: str, label: str = "record") -> uuid.UUID:
    """Parse a path ID, answering 400 when it is not a UUID"""
    try:
        return uuid.UUID(record_id)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")


def get_rate_client() -> NRBRateClient:
    """Provide NRB forex API client instance"""
    return NRBRateClient()


def get_rate_cache() -> ExchangeRateCache:
    """Provide the process-wide exchange rate cache"""
    return rate_cache
