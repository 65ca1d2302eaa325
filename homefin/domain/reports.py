"""CSV exports and period summaries"""

import csv
import io
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Dict, List, Sequence
from homefin.domain.models import Budget, Expense, FinancialSummary, Income, TopExpense

EXPENSE_HEADERS = ["date", "category", "subcategory", "description", "amount", "paymentMethod", "location", "tags"]
INCOME_HEADERS = ["date", "source", "type", "description", "amount", "recurring", "frequency"]
BUDGET_HEADERS = ["category", "amount", "spent", "remaining", "period", "rollover"]

TOP_EXPENSES_LIMIT = 10


def _csv_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def generate_csv(rows: Sequence[Dict[str, Any]], headers: List[str]) -> str:
    """
    Render rows as CSV with the given column order.

    Missing and None values become empty cells; values containing commas,
    quotes or newlines are quoted.
    """
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=headers, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({h: _csv_value(row.get(h)) for h in headers})
    return output.getvalue().rstrip("\n")


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def export_expenses_csv(expenses: List[Expense]) -> str:
    rows = [
        {
            "date": e.date.date().isoformat(),
            "category": e.category,
            "subcategory": e.subcategory or "",
            "description": e.description,
            "amount": e.amount,
            "paymentMethod": e.payment_method or "",
            "location": e.location or "",
            "tags": "; ".join(e.tags),
        }
        for e in expenses
    ]
    return generate_csv(rows, EXPENSE_HEADERS)


def export_income_csv(income: List[Income]) -> str:
    rows = [
        {
            "date": i.date.date().isoformat(),
            "source": i.source,
            "type": i.type,
            "description": i.description,
            "amount": i.amount,
            "recurring": _yes_no(i.recurring),
            "frequency": i.frequency or "",
        }
        for i in income
    ]
    return generate_csv(rows, INCOME_HEADERS)


def export_budgets_csv(budgets: List[Budget]) -> str:
    rows = [
        {
            "category": b.category,
            "amount": b.amount,
            "spent": b.spent,
            "remaining": b.remaining,
            "period": b.period,
            "rollover": _yes_no(b.rollover),
        }
        for b in budgets
    ]
    return generate_csv(rows, BUDGET_HEADERS)


def export_filename(kind: str, today: date | None = None) -> str:
    """e.g. expenses-2025-03-01.csv"""
    return f"{kind}-{(today or date.today()).isoformat()}.csv"


def generate_financial_summary(
    expenses: List[Expense],
    income: List[Income],
    start: datetime,
    end: datetime,
) -> FinancialSummary:
    """Totals, savings rate, category breakdown and largest expenses within [start, end]"""
    period_expenses = [e for e in expenses if start <= e.date <= end]
    period_income = [i for i in income if start <= i.date <= end]

    total_income = sum(i.amount for i in period_income)
    total_expenses = sum(e.amount for e in period_expenses)
    net_savings = total_income - total_expenses
    savings_rate = net_savings / total_income * 100 if total_income > 0 else 0.0

    by_category: Dict[str, float] = defaultdict(float)
    for e in period_expenses:
        by_category[e.category] += e.amount

    top_expenses = [
        TopExpense(description=e.description, amount=e.amount, date=e.date)
        for e in sorted(period_expenses, key=lambda e: e.amount, reverse=True)[:TOP_EXPENSES_LIMIT]
    ]

    return FinancialSummary(
        period=f"{start.date().isoformat()} - {end.date().isoformat()}",
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=net_savings,
        savings_rate=savings_rate,
        expenses_by_category=dict(by_category),
        top_expenses=top_expenses,
    )
