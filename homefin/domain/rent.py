"""Room rent calculations - inclusive rent periods, weekly-rate amounts, validation and history insights"""

from datetime import date
from typing import List, Optional
from homefin.domain.models import (
    Expense,
    RentInsights,
    RentPeriodCalculation,
    RentPeriodSuggestion,
    RentStats,
    RentValidation,
)
from homefin.utils.date_utils import add_days, inclusive_day_count, round_currency

EXTENDED_PERIOD_DAYS = 35
DEFAULT_PERIOD_DAYS = 30
RECOMMENDED_RENT_SHARE = 30.0


def calculate_rent_period(payment_date: date, start_date: date, end_date: date) -> RentPeriodCalculation:
    """
    Measure a rent period. Both ends are inclusive, so Jan 1 - Jan 7 is 7 days.

    total_weeks is left unrounded; callers round for display or storage.
    """
    total_days = inclusive_day_count(start_date, end_date)
    return RentPeriodCalculation(
        total_days=total_days,
        total_weeks=total_days / 7,
        is_extended=total_days > EXTENDED_PERIOD_DAYS,
    )


def calculate_rent_amount(weekly_rate: float, total_weeks: float) -> float:
    return round_currency(weekly_rate * total_weeks)


def suggest_rent_period(payment_date: date, last_rent_expense: Optional[Expense] = None) -> RentPeriodSuggestion:
    """
    Propose the period a new rent payment covers.

    Continues sequentially from the previous recorded period when there is one,
    otherwise falls back to the 30 days before the payment.
    """
    details = last_rent_expense.payment_details if last_rent_expense else None
    if details and details.rent_period:
        return RentPeriodSuggestion(
            start_date=add_days(details.rent_period.end_date, 1),
            end_date=add_days(payment_date, -1),
            is_sequential=True,
        )

    return RentPeriodSuggestion(
        start_date=add_days(payment_date, -DEFAULT_PERIOD_DAYS),
        end_date=add_days(payment_date, -1),
        is_sequential=False,
    )


def validate_rent_data(
    payment_date: date,
    start_date: date,
    end_date: date,
    weekly_rate: float,
    saved_rate: Optional[float] = None,
) -> RentValidation:
    """Collect blocking errors and informational warnings for a rent entry"""
    errors: List[str] = []
    warnings: List[str] = []

    if start_date >= payment_date:
        warnings.append("Payment date should typically be after the rent period")

    if end_date < start_date:
        errors.append("End date must be after start date")

    total_days = inclusive_day_count(start_date, end_date)
    if total_days > EXTENDED_PERIOD_DAYS:
        warnings.append(f"Extended rent period detected: {total_days} days")

    if total_days < 1:
        errors.append("Rent period must be at least 1 day")

    if weekly_rate <= 0:
        errors.append("Weekly rate must be greater than 0")

    if saved_rate and weekly_rate > saved_rate * 2:
        warnings.append(
            f"Rate increased from ${saved_rate:g} to ${weekly_rate:g}. "
            "This is more than double the previous rate."
        )

    return RentValidation(errors=errors, warnings=warnings)


def format_rent_period(start_date: date, end_date: date) -> str:
    """e.g. 'Jan 1 - Jan 7, 2025'"""
    return f"{start_date:%b} {start_date.day} - {end_date:%b} {end_date.day}, {end_date.year}"


def get_rent_insights(rent_expenses: List[Expense], monthly_income: float) -> RentInsights:
    """
    Summarize rent history: recent trend, weekly-rate consistency, share of income
    and payment cadence.
    """
    if not rent_expenses:
        return RentInsights(has_data=False, insights=[])

    insights: List[str] = []
    ordered = sorted(rent_expenses, key=lambda e: e.date, reverse=True)

    total_paid = sum(e.amount for e in rent_expenses)
    average_rent = total_paid / len(rent_expenses)

    # Trend vs previous payment
    if len(ordered) > 1 and ordered[1].amount > 0:
        last, previous = ordered[0], ordered[1]
        trend = (last.amount - previous.amount) / previous.amount * 100
        if trend > 5:
            insights.append(f"Your rent increased by {trend:.1f}% from the previous payment")
        elif trend < -5:
            insights.append(f"You saved {abs(trend):.1f}% on your last rent payment")
        else:
            insights.append("Your rent has remained stable")

    # Weekly rate consistency
    weekly_rates = [
        e.payment_details.weekly_rate
        for e in rent_expenses
        if e.payment_details and e.payment_details.weekly_rate
    ]
    if len(weekly_rates) >= 3:
        spread = max(weekly_rates) - min(weekly_rates)
        if spread < 5:
            insights.append("Your weekly rent rate has been very consistent")
        else:
            insights.append(f"Your weekly rate varies by up to ${spread:.2f}")

    # Housing share of income (30% rule)
    rent_to_income_ratio = average_rent / monthly_income * 100 if monthly_income > 0 else 0.0
    if monthly_income > 0:
        if rent_to_income_ratio <= RECOMMENDED_RENT_SHARE:
            insights.append(
                f"Your rent is {rent_to_income_ratio:.0f}% of income - within recommended 30% range"
            )
        else:
            insights.append(
                f"Your rent is {rent_to_income_ratio:.0f}% of income - consider ways to reduce housing costs"
            )

    # Payment cadence
    total_weeks = sum(
        e.payment_details.rent_period.total_weeks
        for e in rent_expenses
        if e.payment_details and e.payment_details.rent_period
    )
    avg_weeks_per_payment = total_weeks / len(rent_expenses)
    if avg_weeks_per_payment >= 4:
        insights.append("You typically pay rent monthly, which helps with budgeting")
    elif avg_weeks_per_payment <= 1.5:
        insights.append("You pay rent weekly - consider if monthly payments would simplify budgeting")

    return RentInsights(
        has_data=True,
        insights=insights,
        stats=RentStats(
            total_paid=total_paid,
            average_rent=average_rent,
            rent_to_income_ratio=rent_to_income_ratio,
            payments_count=len(rent_expenses),
        ),
    )
