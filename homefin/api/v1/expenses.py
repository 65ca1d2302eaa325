"""/v1/expenses - expense logging with anomaly checks and auto-categorization"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from homefin.api.v1.schemas import (
    AnomalyCheckResponse,
    AnomalySchema,
    CategorizeRequest,
    CategoryCorrectionRequest,
    CategorySuggestionSchema,
    ExpenseCreate,
    ExpenseCreateResponse,
    ExpenseListResponse,
    ExpenseSchema,
    ExpenseUpdate,
    RentPaymentDetailsInput,
)
from homefin.api.dependencies import get_request_id, parse_record_id
from homefin.infrastructure.database.session import get_db
from homefin.infrastructure.database.repositories import ExpenseRepository
from homefin.domain.anomalies import detect_anomalies
from homefin.domain.categorization import auto_categorize_expense, learn_from_user_correction
from homefin.domain.exceptions import InvalidRentDataError, RecordNotFoundError
from homefin.domain.models import Expense, RentPaymentDetails, RentPeriod
from homefin.domain.rent import calculate_rent_amount, calculate_rent_period, validate_rent_data
from homefin.infrastructure.observability.logging import log_anomaly_check
from homefin.infrastructure.observability.metrics import record_anomalies

router = APIRouter()


def build_payment_details(
    details: RentPaymentDetailsInput,
    previous_rent: Optional[Expense],
) -> tuple[RentPaymentDetails, list[str]]:
    """
    Turn submitted rent details into domain details with derived period and amount.

    Raises:
        InvalidRentDataError: When the period or rate fails validation
    """
    if details.rent_period is None:
        return (
            RentPaymentDetails(
                payment_date=details.payment_date,
                status=details.status,
                weekly_rate=details.weekly_rate,
                landlord_name=details.landlord_name,
                room_details=details.room_details,
            ),
            [],
        )

    saved_rate = None
    if previous_rent and previous_rent.payment_details:
        saved_rate = previous_rent.payment_details.weekly_rate

    weekly_rate = details.weekly_rate or 0.0
    start, end = details.rent_period.start_date, details.rent_period.end_date
    validation = validate_rent_data(details.payment_date, start, end, weekly_rate, saved_rate)
    if not validation.is_valid:
        raise InvalidRentDataError(validation.errors)

    period = calculate_rent_period(details.payment_date, start, end)
    total_weeks = round(period.total_weeks, 2)

    return (
        RentPaymentDetails(
            payment_date=details.payment_date,
            status=details.status,
            rent_period=RentPeriod(
                start_date=start,
                end_date=end,
                total_days=period.total_days,
                total_weeks=total_weeks,
            ),
            weekly_rate=weekly_rate,
            calculated_amount=calculate_rent_amount(weekly_rate, total_weeks),
            landlord_name=details.landlord_name,
            room_details=details.room_details,
        ),
        validation.warnings,
    )


@router.post("/expenses", response_model=ExpenseCreateResponse, status_code=201)
def create_expense(
    request_body: ExpenseCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Log an expense.

    Flow:
    1. Auto-categorize when no category was given
    2. Validate rent details and derive the rent period/amount
    3. Check the expense against the user's existing history for anomalies
    4. Persist and return the expense with any anomalies
    """
    request_id = get_request_id(request)
    repo = ExpenseRepository(db)

    try:
        history = repo.list_expenses(request_body.user_id)

        suggestion = None
        category = request_body.category
        subcategory = request_body.subcategory
        if not category:
            suggestion = auto_categorize_expense(request_body.description, request_body.amount)
            category = suggestion.category
            subcategory = subcategory or suggestion.subcategory

        payment_details, rent_warnings = None, []
        if request_body.payment_details:
            payment_details, rent_warnings = build_payment_details(
                request_body.payment_details,
                repo.latest_rent_expense(request_body.user_id, category),
            )

        candidate = Expense(
            user_id=request_body.user_id,
            amount=request_body.amount,
            category=category,
            subcategory=subcategory,
            description=request_body.description,
            date=request_body.date,
            payment_method=request_body.payment_method,
            location=request_body.location,
            recurring=request_body.recurring,
            tags=request_body.tags,
            payment_details=payment_details,
        )

        # History excludes the candidate, so it cannot flag itself as a duplicate
        anomalies = detect_anomalies(history, candidate)

        saved = repo.create_expense(request_body.user_id, candidate)
        db.commit()

    except InvalidRentDataError as e:
        db.rollback()
        logging.warning(f"Invalid rent data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=e.errors)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_anomalies(anomalies)
    log_anomaly_check(request_id, request_body.user_id, anomalies)

    return ExpenseCreateResponse(
        expense=ExpenseSchema.model_validate(saved),
        anomalies=[AnomalySchema.model_validate(a) for a in anomalies],
        category_suggestion=CategorySuggestionSchema.model_validate(suggestion) if suggestion else None,
        rent_warnings=rent_warnings,
    )


@router.get("/expenses", response_model=ExpenseListResponse)
def list_expenses(
    user_id: str = Query(..., description="User identifier"),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List a user's expenses, newest first"""
    expenses = ExpenseRepository(db).list_expenses(user_id, category)
    return ExpenseListResponse(
        user_id=user_id,
        expenses=[ExpenseSchema.model_validate(e) for e in expenses],
    )


@router.post("/expenses/categorize", response_model=CategorySuggestionSchema)
def categorize_expense(request_body: CategorizeRequest):
    """Suggest a category for a description without saving anything"""
    return CategorySuggestionSchema.model_validate(
        auto_categorize_expense(request_body.description, request_body.amount)
    )


@router.post("/expenses/categorize/correction", status_code=204)
def record_category_correction(request_body: CategoryCorrectionRequest):
    learn_from_user_correction(
        request_body.description,
        request_body.original_category,
        request_body.corrected_category,
        request_body.corrected_subcategory,
    )
    return Response(status_code=204)


@router.get("/expenses/{expense_id}", response_model=ExpenseSchema)
def get_expense(
    expense_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    record_id = parse_record_id(expense_id, "expense")
    try:
        expense = ExpenseRepository(db).get_expense(user_id, record_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")
    return ExpenseSchema.model_validate(expense)


@router.get("/expenses/{expense_id}/anomalies", response_model=AnomalyCheckResponse)
def check_expense_anomalies(
    expense_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Re-run anomaly detection for a saved expense against the rest of the user's history"""
    record_id = parse_record_id(expense_id, "expense")
    repo = ExpenseRepository(db)
    try:
        expense = repo.get_expense(user_id, record_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")

    history = [e for e in repo.list_expenses(user_id) if e.id != expense.id]
    anomalies = detect_anomalies(history, expense)

    return AnomalyCheckResponse(
        expense_id=expense.id,
        anomalies=[AnomalySchema.model_validate(a) for a in anomalies],
    )


@router.put("/expenses/{expense_id}", response_model=ExpenseSchema)
def update_expense(
    expense_id: str,
    request_body: ExpenseUpdate,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    record_id = parse_record_id(expense_id, "expense")
    changes = request_body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        expense = ExpenseRepository(db).update_expense(user_id, record_id, changes)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Expense not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    return ExpenseSchema.model_validate(expense)


@router.delete("/expenses/{expense_id}", status_code=204)
def delete_expense(
    expense_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    record_id = parse_record_id(expense_id, "expense")
    try:
        ExpenseRepository(db).delete_expense(user_id, record_id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Expense not found")
    return Response(status_code=204)
