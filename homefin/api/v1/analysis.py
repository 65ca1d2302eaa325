"""GET /v1/insights, /v1/forecast, /v1/summary - analysis over a user's records"""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from homefin.api.v1.schemas import ForecastResponse, InsightSchema, InsightsResponse, SummaryResponse
from homefin.infrastructure.database.session import get_db
from homefin.infrastructure.database.repositories import BudgetRepository, ExpenseRepository, IncomeRepository
from homefin.domain.anomalies import predict_next_month_spending
from homefin.domain.insights import generate_smart_insights
from homefin.domain.reports import generate_financial_summary
from homefin.infrastructure.observability.metrics import record_insights
from homefin.utils.date_utils import to_naive_utc

router = APIRouter()


@router.get("/insights", response_model=InsightsResponse)
def get_insights(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Generate smart insights from the user's expenses, income and budgets.

    Returns:
        Insights ordered high, medium, low priority
    """
    insights = generate_smart_insights(
        ExpenseRepository(db).list_expenses(user_id),
        IncomeRepository(db).list_income(user_id),
        BudgetRepository(db).list_budgets(user_id),
    )
    record_insights(insights)

    return InsightsResponse(
        user_id=user_id,
        insights=[InsightSchema.model_validate(i) for i in insights],
    )


@router.get("/forecast", response_model=ForecastResponse)
def get_forecast(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Predict next month's spending from the last six full months"""
    forecast = predict_next_month_spending(ExpenseRepository(db).list_expenses(user_id))
    return ForecastResponse.model_validate(forecast)


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    user_id: str = Query(..., description="User identifier"),
    start: datetime = Query(..., description="Period start (inclusive)"),
    end: datetime = Query(..., description="Period end (inclusive)"),
    db: Session = Depends(get_db),
):
    # Stored times are naive UTC
    start, end = to_naive_utc(start), to_naive_utc(end)
    if end < start:
        raise HTTPException(status_code=400, detail="end must not precede start")

    summary = generate_financial_summary(
        ExpenseRepository(db).list_expenses(user_id),
        IncomeRepository(db).list_income(user_id),
        start,
        end,
    )
    return SummaryResponse.model_validate(summary)
