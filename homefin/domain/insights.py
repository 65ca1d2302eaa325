"""Smart insight generation - actionable recommendations from monthly aggregates"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, List
from homefin.domain.models import Budget, Expense, Income, Insight, InsightAction
from homefin.utils.date_utils import month_start

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}

SPENDING_CHANGE_THRESHOLD = 10.0
SPENDING_CHANGE_HIGH_THRESHOLD = 20.0
BUDGET_ALERT_THRESHOLD = 90.0
GOOD_SAVINGS_RATE = 20.0
LOW_SAVINGS_RATE = 10.0
SUBSCRIPTION_REVIEW_THRESHOLD = 100.0
TOP_CATEGORY_SHARE = 0.4


def sort_insights(insights: List[Insight]) -> List[Insight]:
    """Order by priority, high first; equal priorities keep their input order"""
    return sorted(insights, key=lambda i: PRIORITY_ORDER[i.priority], reverse=True)


def generate_smart_insights(
    expenses: List[Expense],
    income: List[Income],
    budgets: List[Budget],
    now: datetime | None = None,
) -> List[Insight]:
    """
    Evaluate every insight rule and return the triggered ones, highest priority first.

    Rules (non-exclusive):
    - Month-over-month spending change beyond ±10%
    - Budgets more than 90% used
    - Savings rate >= 20% (praise) or < 10% (tip); nothing in between
    - Recurring/entertainment spend over $100
    - A single category above 40% of this month's spending
    """
    if now is None:
        now = datetime.now()

    this_month_start = month_start(now)
    last_month_start = month_start(now, 1)

    this_month_expenses = [e for e in expenses if e.date >= this_month_start]
    last_month_expenses = [e for e in expenses if last_month_start <= e.date < this_month_start]

    this_month_total = sum(e.amount for e in this_month_expenses)
    last_month_total = sum(e.amount for e in last_month_expenses)
    this_month_income = sum(i.amount for i in income if i.date >= this_month_start)

    insights: List[Insight] = []

    # Spending comparison
    if last_month_total > 0:
        change = (this_month_total - last_month_total) / last_month_total * 100
        if abs(change) > SPENDING_CHANGE_THRESHOLD:
            increased = change > 0
            insights.append(
                Insight(
                    type="warning" if increased else "savings",
                    title="Spending Increased" if increased else "Great Progress!",
                    description=(
                        f"Your spending is {abs(change):.1f}% {'higher' if increased else 'lower'} than last month"
                    ),
                    priority="high" if abs(change) > SPENDING_CHANGE_HIGH_THRESHOLD else "medium",
                    actionable=True,
                    action=InsightAction(label="View Details", target="/expenses"),
                )
            )

    # Budget alerts
    for budget in budgets:
        used = budget.percentage
        if used > BUDGET_ALERT_THRESHOLD:
            insights.append(
                Insight(
                    type="warning",
                    title=f"{budget.category} Budget Alert",
                    description=f"You've used {used:.0f}% of your {budget.category} budget",
                    priority="high" if budget.is_over_budget else "medium",
                    actionable=True,
                    action=InsightAction(label="Adjust Budget", target="/budgets"),
                )
            )

    # Savings rate; 10-20% intentionally produces nothing
    if this_month_income > 0:
        savings_rate = (this_month_income - this_month_total) / this_month_income * 100
        if savings_rate >= GOOD_SAVINGS_RATE:
            insights.append(
                Insight(
                    type="savings",
                    title="Excellent Savings Rate",
                    description=f"You're saving {savings_rate:.1f}% of your income this month!",
                    priority="medium",
                    actionable=False,
                )
            )
        elif savings_rate < LOW_SAVINGS_RATE:
            insights.append(
                Insight(
                    type="tip",
                    title="Consider Increasing Savings",
                    description=(
                        f"Your current savings rate is {savings_rate:.1f}%. "
                        "Aim for at least 20% to build wealth."
                    ),
                    priority="medium",
                    actionable=True,
                    action=InsightAction(label="Create Savings Plan", target="/budgets"),
                )
            )

    # Recurring expense review
    subscription_total = sum(e.amount for e in expenses if e.recurring or e.category == "Entertainment")
    if subscription_total > SUBSCRIPTION_REVIEW_THRESHOLD:
        insights.append(
            Insight(
                type="tip",
                title="Review Subscriptions",
                description=(
                    f"You've spent ${subscription_total:.2f} on subscriptions and entertainment. "
                    "Cancel unused services to save money."
                ),
                priority="low",
                actionable=True,
                action=InsightAction(label="View Subscriptions", target="/expenses?category=Entertainment"),
            )
        )

    # Top spending category
    category_totals: Dict[str, float] = defaultdict(float)
    for e in this_month_expenses:
        category_totals[e.category] += e.amount

    if category_totals:
        top_category, top_total = max(category_totals.items(), key=lambda item: item[1])
        if top_total > this_month_total * TOP_CATEGORY_SHARE:
            insights.append(
                Insight(
                    type="spending",
                    title=f"{top_category} is Your Top Expense",
                    description=(
                        f"{top_category} accounts for {top_total / this_month_total * 100:.0f}% "
                        "of your spending this month"
                    ),
                    priority="low",
                    actionable=True,
                    action=InsightAction(label="See Breakdown", target=f"/expenses?category={top_category}"),
                )
            )

    return sort_insights(insights)
