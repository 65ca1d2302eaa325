"""Anomaly detection and spend forecasting - rule-based checks over expense history"""

import statistics
from datetime import datetime, timedelta
from typing import List
from homefin.domain.models import Anomaly, Expense, SpendingForecast
from homefin.utils.date_utils import month_start

MIN_COMPARABLE_EXPENSES = 3
NEW_MERCHANT_MIN_AMOUNT = 50.0
DUPLICATE_AMOUNT_TOLERANCE = 0.01
DUPLICATE_TIME_WINDOW = timedelta(hours=1)

FORECAST_MONTHS = 6
FORECAST_MIN_MONTHS_WITH_DATA = 3
FORECAST_CONFIDENCE = 0.7


def detect_anomalies(
    history: List[Expense],
    candidate: Expense,
    now: datetime | None = None,
) -> List[Anomaly]:
    """
    Flag a candidate expense against the user's prior expenses.

    Rules are independent; every rule that fires contributes one anomaly:
    - unusual-amount: amount above mean + 2 std-dev of same-category history (>= 3 entries)
    - frequency-spike: last-7-day category count over twice the 30-day weekly rate
    - new-merchant: first expense with this description, above $50
    - duplicate: same description and amount within an hour of a prior expense

    `history` must not contain the candidate itself.
    """
    if now is None:
        now = datetime.now()

    anomalies: List[Anomaly] = []
    category_history = [e for e in history if e.category == candidate.category]

    unusual = _check_unusual_amount(category_history, candidate)
    if unusual:
        anomalies.append(unusual)

    spike = _check_frequency_spike(category_history, candidate, now)
    if spike:
        anomalies.append(spike)

    # New merchant
    if not any(e.description == candidate.description for e in history) and candidate.amount > NEW_MERCHANT_MIN_AMOUNT:
        anomalies.append(
            Anomaly(
                type="new-merchant",
                severity="low",
                message=f"First transaction at {candidate.description}",
                expense=candidate,
                recommendation="Save this merchant for quick categorization in the future.",
            )
        )

    # Potential duplicate
    if any(_is_duplicate(e, candidate) for e in history):
        anomalies.append(
            Anomaly(
                type="duplicate",
                severity="high",
                message="Potential duplicate: Similar transaction detected within the past hour",
                expense=candidate,
                recommendation="Check if this is a duplicate entry and delete if necessary.",
            )
        )

    return anomalies


def _check_unusual_amount(category_history: List[Expense], candidate: Expense) -> Anomaly | None:
    if len(category_history) < MIN_COMPARABLE_EXPENSES:
        return None

    amounts = [e.amount for e in category_history]
    mean = statistics.fmean(amounts)
    std_dev = statistics.pstdev(amounts)

    # Strict comparison: an amount exactly at mean + 2σ is not unusual
    if candidate.amount <= mean + 2 * std_dev:
        return None

    severity = "high" if candidate.amount > mean + 3 * std_dev else "medium"
    if mean > 0:
        percent_above = (candidate.amount / mean - 1) * 100
        message = (
            f"This {candidate.category} expense of ${candidate.amount:.2f} is "
            f"{percent_above:.0f}% higher than your average of ${mean:.2f}"
        )
    else:
        # Every prior amount was zero; a percentage is meaningless
        message = (
            f"This {candidate.category} expense of ${candidate.amount:.2f} is well above "
            f"your average of ${mean:.2f}"
        )

    return Anomaly(
        type="unusual-amount",
        severity=severity,
        message=message,
        expense=candidate,
        recommendation="Verify this transaction is correct and consider if it's within your budget.",
    )


def _check_frequency_spike(category_history: List[Expense], candidate: Expense, now: datetime) -> Anomaly | None:
    last_7_days = sum(1 for e in category_history if now - e.date <= timedelta(days=7))
    last_30_days = sum(1 for e in category_history if now - e.date <= timedelta(days=30))

    # 30-day count scaled to a 7-day equivalent
    expected_7_days = last_30_days / 30 * 7
    if last_7_days <= 2 * expected_7_days:
        return None

    return Anomaly(
        type="frequency-spike",
        severity="medium",
        message=(
            f"You've had {last_7_days} {candidate.category} transactions in the past 7 days, "
            "which is unusually high"
        ),
        expense=candidate,
        recommendation="Review if this spending pattern aligns with your goals.",
    )


def _is_duplicate(previous: Expense, candidate: Expense) -> bool:
    return (
        previous.description == candidate.description
        and abs(previous.amount - candidate.amount) <= DUPLICATE_AMOUNT_TOLERANCE
        and abs(previous.date - candidate.date) < DUPLICATE_TIME_WINDOW
    )


def monthly_totals(expenses: List[Expense], now: datetime, months: int = FORECAST_MONTHS) -> List[tuple[float, int]]:
    """(total, expense count) for each full month before `now`, most recent first"""
    totals = []
    for i in range(months):
        start = month_start(now, i + 1)
        end = month_start(now, i)
        in_month = [e for e in expenses if start <= e.date < end]
        totals.append((sum(e.amount for e in in_month), len(in_month)))
    return totals


def predict_next_month_spending(expenses: List[Expense], now: datetime | None = None) -> SpendingForecast:
    """
    Project next month's spending from a trailing six-month moving average.

    The current month is excluded. Fewer than three months containing any expense
    yields an empty signal (0, 0, "stable"). Confidence is a fixed 0.7; trend compares
    the most recent full month against the oldest of the six.
    """
    if now is None:
        now = datetime.now()

    months = monthly_totals(expenses, now)
    months_with_data = sum(1 for _, count in months if count > 0)
    if months_with_data < FORECAST_MIN_MONTHS_WITH_DATA:
        return SpendingForecast(predicted=0.0, confidence=0.0, trend="stable")

    totals = [total for total, _ in months]
    most_recent, oldest = totals[0], totals[-1]

    if most_recent > oldest * 1.1:
        trend = "increasing"
    elif most_recent < oldest * 0.9:
        trend = "decreasing"
    else:
        trend = "stable"

    return SpendingForecast(
        predicted=statistics.fmean(totals),
        confidence=FORECAST_CONFIDENCE,
        trend=trend,
    )
