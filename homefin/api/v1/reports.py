"""GET /v1/reports/*.csv - CSV downloads of a user's records"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from homefin.infrastructure.database.session import get_db
from homefin.infrastructure.database.repositories import BudgetRepository, ExpenseRepository, IncomeRepository
from homefin.domain.reports import export_budgets_csv, export_expenses_csv, export_filename, export_income_csv

router = APIRouter()


def csv_response(content: str, kind: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(kind)}"'},
    )


@router.get("/reports/expenses.csv")
def expenses_csv(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    return csv_response(export_expenses_csv(ExpenseRepository(db).list_expenses(user_id)), "expenses")


@router.get("/reports/income.csv")
def income_csv(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    return csv_response(export_income_csv(IncomeRepository(db).list_income(user_id)), "income")


@router.get("/reports/budgets.csv")
def budgets_csv(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    return csv_response(export_budgets_csv(BudgetRepository(db).list_budgets(user_id)), "budgets")
