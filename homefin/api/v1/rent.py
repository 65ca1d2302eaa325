"""/v1/rent - rent period calculation, suggestion, validation and history insights"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from homefin.api.v1.schemas import (
    RentCalculateRequest,
    RentCalculateResponse,
    RentInsightsResponse,
    RentSuggestRequest,
    RentSuggestResponse,
    RentValidateRequest,
    RentValidationResponse,
)
from homefin.infrastructure.database.session import get_db
from homefin.infrastructure.database.repositories import ExpenseRepository, IncomeRepository
from homefin.domain.rent import (
    calculate_rent_amount,
    calculate_rent_period,
    format_rent_period,
    get_rent_insights,
    suggest_rent_period,
    validate_rent_data,
)
from homefin.utils.date_utils import month_start

router = APIRouter()

RENT_CATEGORY = "Housing"


@router.post("/rent/calculate", response_model=RentCalculateResponse)
def calculate_rent(request_body: RentCalculateRequest):
    """Day/week counts for a rent period, plus the amount when a weekly rate is given"""
    period = calculate_rent_period(request_body.payment_date, request_body.start_date, request_body.end_date)
    total_weeks = round(period.total_weeks, 2)

    amount = None
    if request_body.weekly_rate is not None:
        amount = calculate_rent_amount(request_body.weekly_rate, total_weeks)

    return RentCalculateResponse(
        total_days=period.total_days,
        total_weeks=total_weeks,
        is_extended=period.is_extended,
        amount=amount,
        formatted_period=format_rent_period(request_body.start_date, request_body.end_date),
    )


@router.post("/rent/suggest", response_model=RentSuggestResponse)
def suggest_rent(request_body: RentSuggestRequest, db: Session = Depends(get_db)):
    """Propose a period for a new payment, continuing from the last recorded one"""
    last_rent = ExpenseRepository(db).latest_rent_expense(request_body.user_id, RENT_CATEGORY)
    suggestion = suggest_rent_period(request_body.payment_date, last_rent)

    return RentSuggestResponse(
        start_date=suggestion.start_date,
        end_date=suggestion.end_date,
        is_sequential=suggestion.is_sequential,
        formatted_period=format_rent_period(suggestion.start_date, suggestion.end_date),
    )


@router.post("/rent/validate", response_model=RentValidationResponse)
def validate_rent(request_body: RentValidateRequest):
    validation = validate_rent_data(
        request_body.payment_date,
        request_body.start_date,
        request_body.end_date,
        request_body.weekly_rate,
        request_body.saved_rate,
    )
    return RentValidationResponse.model_validate(validation)


@router.get("/rent/insights", response_model=RentInsightsResponse)
def rent_insights(
    user_id: str = Query(..., description="User identifier"),
    monthly_income: Optional[float] = Query(None, ge=0, description="Defaults to last month's recorded income"),
    db: Session = Depends(get_db),
):
    # Housing also holds insurance and the like; keep rent payments only
    rent_expenses = [
        e
        for e in ExpenseRepository(db).list_expenses(user_id, RENT_CATEGORY)
        if e.payment_details is not None or e.subcategory == "Rent"
    ]

    if monthly_income is None:
        now = datetime.now()
        last_month_start, this_month_start = month_start(now, 1), month_start(now)
        monthly_income = sum(
            i.amount
            for i in IncomeRepository(db).list_income(user_id)
            if last_month_start <= i.date < this_month_start
        )

    return RentInsightsResponse.model_validate(get_rent_insights(rent_expenses, monthly_income))
