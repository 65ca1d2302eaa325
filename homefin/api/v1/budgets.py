"""/v1/budgets - envelope budgets"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from homefin.api.v1.schemas import BudgetCreate, BudgetListResponse, BudgetSchema, BudgetUpdate
from homefin.api.dependencies import get_request_id, parse_record_id
from homefin.infrastructure.database.session import get_db
from homefin.infrastructure.database.repositories import BudgetRepository
from homefin.domain.exceptions import RecordNotFoundError
from homefin.domain.models import Budget

router = APIRouter()


@router.post("/budgets", response_model=BudgetSchema, status_code=201)
def create_budget(request_body: BudgetCreate, db: Session = Depends(get_db)):
    budget = BudgetRepository(db).create_budget(
        request_body.user_id,
        Budget(**request_body.model_dump(exclude={"user_id"})),
    )
    db.commit()
    return BudgetSchema.model_validate(budget)


@router.get("/budgets", response_model=BudgetListResponse)
def list_budgets(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """List envelopes with usage percentage and over/warning flags"""
    budgets = BudgetRepository(db).list_budgets(user_id)
    return BudgetListResponse(user_id=user_id, budgets=[BudgetSchema.model_validate(b) for b in budgets])


@router.put("/budgets/{budget_id}", response_model=BudgetSchema)
def update_budget(
    budget_id: str,
    request_body: BudgetUpdate,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    record_id = parse_record_id(budget_id, "budget")
    changes = request_body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        budget = BudgetRepository(db).update_budget(user_id, record_id, changes)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Budget not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")
    return BudgetSchema.model_validate(budget)


@router.delete("/budgets/{budget_id}", status_code=204)
def delete_budget(
    budget_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    record_id = parse_record_id(budget_id, "budget")
    try:
        BudgetRepository(db).delete_budget(user_id, record_id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Budget not found")
    return Response(status_code=204)
