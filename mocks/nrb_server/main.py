from datetime import date
from fastapi import FastAPI, Query

app = FastAPI(title="Mock NRB Forex Server", version="1.0.0")

# Subset of the published table; buy/sell are strings as in the real API
RATES = [
    {"currency": {"iso3": "INR", "name": "Indian Rupee", "unit": 100}, "buy": "160.00", "sell": "160.15"},
    {"currency": {"iso3": "USD", "name": "U.S. Dollar", "unit": 1}, "buy": "133.45", "sell": "134.05"},
    {"currency": {"iso3": "EUR", "name": "European Euro", "unit": 1}, "buy": "144.20", "sell": "144.85"},
]


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/forex/v1/rates")
def get_rates(
    from_: date = Query(..., alias="from"),
    to: date = Query(...),
    per_page: int = 10,
    page: int = 1,
):
    return {
        "status": {"code": 200},
        "data": {"payload": [{"date": to.isoformat(), "published_on": to.isoformat(), "rates": RATES}]},
        "pagination": {"page": page, "per_page": per_page, "total": 1},
    }
