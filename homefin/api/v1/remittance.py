"""/v1/remittance - USD/NPR rates, transfer quotes, recipients and sent remittances"""

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from homefin.api.v1.schemas import (
    ExchangeRateResponse,
    RecipientCreate,
    RecipientListResponse,
    RecipientSchema,
    RemittanceCreate,
    RemittanceListResponse,
    RemittanceQuoteRequest,
    RemittanceQuoteResponse,
    RemittanceSchema,
)
from homefin.api.dependencies import get_rate_cache, get_rate_client, get_request_id, parse_record_id
from homefin.infrastructure.clients.exchange_rate import ExchangeRateCache, NRBRateClient, get_usd_to_npr_rate
from homefin.infrastructure.database.session import get_db
from homefin.infrastructure.database.repositories import RemittanceRepository
from homefin.domain.exceptions import RecordNotFoundError
from homefin.domain.models import FamilyRecipient, FamilyRemittance
from homefin.domain.remittance import build_remittance_quote, format_currency

router = APIRouter()


@router.get("/remittance/rate", response_model=ExchangeRateResponse)
async def get_rate(
    rate_client: NRBRateClient = Depends(get_rate_client),
    cache: ExchangeRateCache = Depends(get_rate_cache),
):
    """Current USD/NPR rate; served from cache for up to an hour, fallback when NRB is down"""
    data = await get_usd_to_npr_rate(rate_client, cache)
    return ExchangeRateResponse(
        currency=data.usd.currency,
        buy=data.usd.buy,
        sell=data.usd.sell,
        date=data.usd.date,
        last_updated=data.last_updated,
        is_fallback=data.is_fallback,
    )


@router.post("/remittance/quote", response_model=RemittanceQuoteResponse)
async def quote_remittance(
    request_body: RemittanceQuoteRequest,
    rate_client: NRBRateClient = Depends(get_rate_client),
    cache: ExchangeRateCache = Depends(get_rate_cache),
):
    """Fee, total cost, NPR amount and delivery estimate for a transfer"""
    data = await get_usd_to_npr_rate(rate_client, cache)
    # Sending money home converts at the sell rate
    quote = build_remittance_quote(request_body.amount, request_body.transfer_method, data.usd.sell)

    return RemittanceQuoteResponse(
        amount=quote.amount,
        exchange_rate=quote.exchange_rate,
        local_amount=quote.local_amount,
        transfer_method=quote.transfer_method,
        transfer_fee=quote.transfer_fee,
        total_cost=quote.total_cost,
        expected_delivery=quote.expected_delivery,
        formatted_local_amount=format_currency(quote.local_amount, "NPR"),
        formatted_total_cost=format_currency(quote.total_cost, "USD"),
    )


@router.post("/remittance/recipients", response_model=RecipientSchema, status_code=201)
def create_recipient(request_body: RecipientCreate, db: Session = Depends(get_db)):
    recipient = RemittanceRepository(db).create_recipient(
        request_body.user_id,
        FamilyRecipient(**request_body.model_dump(exclude={"user_id"})),
    )
    db.commit()
    return RecipientSchema.model_validate(recipient)


@router.get("/remittance/recipients", response_model=RecipientListResponse)
def list_recipients(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    recipients = RemittanceRepository(db).list_recipients(user_id)
    return RecipientListResponse(
        user_id=user_id,
        recipients=[RecipientSchema.model_validate(r) for r in recipients],
    )


@router.post("/remittances", response_model=RemittanceSchema, status_code=201)
async def create_remittance(
    request_body: RemittanceCreate,
    request: Request,
    db: Session = Depends(get_db),
    rate_client: NRBRateClient = Depends(get_rate_client),
    cache: ExchangeRateCache = Depends(get_rate_cache),
):
    """
    Record money sent to a family recipient.

    The exchange rate, fee and delivery estimate are locked in at the time of sending.
    """
    request_id = get_request_id(request)
    repo = RemittanceRepository(db)

    recipient_id = parse_record_id(request_body.recipient_id, "recipient")
    try:
        recipient = repo.get_recipient(request_body.user_id, recipient_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Recipient not found")

    data = await get_usd_to_npr_rate(rate_client, cache)
    now = datetime.now()
    quote = build_remittance_quote(request_body.amount, request_body.transfer_method, data.usd.sell, now)

    try:
        remittance = repo.create_remittance(
            request_body.user_id,
            FamilyRemittance(
                recipient_id=recipient.id,
                recipient_name=recipient.name,
                amount=quote.amount,
                exchange_rate=quote.exchange_rate,
                local_amount=quote.local_amount,
                transfer_method=quote.transfer_method,
                transfer_fee=quote.transfer_fee,
                total_cost=quote.total_cost,
                purpose=request_body.purpose,
                delivery_option=request_body.delivery_option,
                expected_delivery=quote.expected_delivery,
                transfer_reference=request_body.transfer_reference,
                notes=request_body.notes,
                date=now,
            ),
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return RemittanceSchema.model_validate(remittance)


@router.get("/remittances", response_model=RemittanceListResponse)
def list_remittances(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    remittances = RemittanceRepository(db).list_remittances(user_id)
    return RemittanceListResponse(
        user_id=user_id,
        remittances=[RemittanceSchema.model_validate(r) for r in remittances],
    )
