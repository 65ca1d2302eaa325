"""/v1/income - income logging"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from homefin.api.v1.schemas import IncomeCreate, IncomeListResponse, IncomeSchema
from homefin.api.dependencies import parse_record_id
from homefin.infrastructure.database.session import get_db
from homefin.infrastructure.database.repositories import IncomeRepository
from homefin.domain.exceptions import RecordNotFoundError
from homefin.domain.models import Income

router = APIRouter()


@router.post("/income", response_model=IncomeSchema, status_code=201)
def create_income(request_body: IncomeCreate, db: Session = Depends(get_db)):
    income = IncomeRepository(db).create_income(
        request_body.user_id,
        Income(**request_body.model_dump(exclude={"user_id"})),
    )
    db.commit()
    return IncomeSchema.model_validate(income)


@router.get("/income", response_model=IncomeListResponse)
def list_income(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    income = IncomeRepository(db).list_income(user_id)
    return IncomeListResponse(user_id=user_id, income=[IncomeSchema.model_validate(i) for i in income])


@router.delete("/income/{income_id}", status_code=204)
def delete_income(
    income_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    record_id = parse_record_id(income_id, "income")
    try:
        IncomeRepository(db).delete_income(user_id, record_id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Income not found")
    return Response(status_code=204)
