"""Data access layer for finance records"""

import uuid
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from homefin.domain.exceptions import RecordNotFoundError
from homefin.domain.models import (
    Budget,
    Expense,
    FamilyRecipient,
    FamilyRemittance,
    Income,
    RentPaymentDetails,
    RentPeriod,
)
from homefin.domain.rent import calculate_rent_period
from homefin.infrastructure.database.models import (
    BudgetRecord,
    ExpenseRecord,
    FamilyRecipientRecord,
    FamilyRemittanceRecord,
    IncomeRecord,
)


def _payment_details_columns(details: Optional[RentPaymentDetails]) -> Dict[str, Any]:
    if details is None:
        return {
            "payment_date": None,
            "payment_status": None,
            "rent_start_date": None,
            "rent_end_date": None,
            "weekly_rate": None,
            "calculated_amount": None,
            "landlord_name": None,
            "room_details": None,
        }
    period = details.rent_period
    return {
        "payment_date": details.payment_date,
        "payment_status": details.status,
        "rent_start_date": period.start_date if period else None,
        "rent_end_date": period.end_date if period else None,
        "weekly_rate": details.weekly_rate,
        "calculated_amount": details.calculated_amount,
        "landlord_name": details.landlord_name,
        "room_details": details.room_details,
    }


def expense_to_domain(row: ExpenseRecord) -> Expense:
    details = None
    if row.payment_status is not None:
        period = None
        if row.rent_start_date and row.rent_end_date:
            # Day/week counts are derived, not stored
            calc = calculate_rent_period(row.payment_date, row.rent_start_date, row.rent_end_date)
            period = RentPeriod(
                start_date=row.rent_start_date,
                end_date=row.rent_end_date,
                total_days=calc.total_days,
                total_weeks=round(calc.total_weeks, 2),
            )
        details = RentPaymentDetails(
            payment_date=row.payment_date,
            status=row.payment_status,
            rent_period=period,
            weekly_rate=row.weekly_rate,
            calculated_amount=row.calculated_amount,
            landlord_name=row.landlord_name,
            room_details=row.room_details,
        )

    return Expense(
        id=str(row.id),
        user_id=row.user_id,
        amount=row.amount,
        category=row.category,
        subcategory=row.subcategory,
        description=row.description,
        date=row.date,
        payment_method=row.payment_method,
        location=row.location,
        recurring=row.recurring,
        tags=list(row.tags or []),
        payment_details=details,
    )


def income_to_domain(row: IncomeRecord) -> Income:
    return Income(
        id=str(row.id),
        user_id=row.user_id,
        amount=row.amount,
        source=row.source,
        type=row.type,
        description=row.description,
        date=row.date,
        recurring=row.recurring,
        frequency=row.frequency,
    )


def budget_to_domain(row: BudgetRecord) -> Budget:
    return Budget(
        id=str(row.id),
        user_id=row.user_id,
        category=row.category,
        amount=row.amount,
        spent=row.spent,
        period=row.period,
        rollover=row.rollover,
    )


def recipient_to_domain(row: FamilyRecipientRecord) -> FamilyRecipient:
    return FamilyRecipient(
        id=str(row.id),
        user_id=row.user_id,
        name=row.name,
        relationship=row.relationship,
        country=row.country,
        phone=row.phone,
        email=row.email,
        preferred_method=row.preferred_method,
        notes=row.notes,
    )


def remittance_to_domain(row: FamilyRemittanceRecord) -> FamilyRemittance:
    return FamilyRemittance(
        id=str(row.id),
        user_id=row.user_id,
        recipient_id=row.recipient_id,
        recipient_name=row.recipient_name,
        amount=row.amount,
        currency=row.currency,
        exchange_rate=row.exchange_rate,
        local_amount=row.local_amount,
        local_currency=row.local_currency,
        transfer_method=row.transfer_method,
        transfer_fee=row.transfer_fee,
        total_cost=row.total_cost,
        purpose=row.purpose,
        delivery_option=row.delivery_option,
        status=row.status,
        transfer_reference=row.transfer_reference,
        expected_delivery=row.expected_delivery,
        notes=row.notes,
        date=row.date,
    )


class ExpenseRepository:
    """Repository for expenses"""

    def __init__(self, db: Session):
        self.db = db

    def create_expense(self, user_id: str, expense: Expense) -> Expense:
        row = ExpenseRecord(
            user_id=user_id,
            amount=expense.amount,
            category=expense.category,
            subcategory=expense.subcategory,
            description=expense.description,
            date=expense.date,
            payment_method=expense.payment_method,
            location=expense.location,
            recurring=expense.recurring,
            tags=list(expense.tags),
            **_payment_details_columns(expense.payment_details),
        )
        self.db.add(row)
        self.db.flush()  # Get ID without committing
        return expense_to_domain(row)

    def _get_row(self, user_id: str, expense_id: uuid.UUID) -> ExpenseRecord:
        row = (
            self.db.query(ExpenseRecord)
            .filter(ExpenseRecord.id == expense_id, ExpenseRecord.user_id == user_id)
            .first()
        )
        if row is None:
            raise RecordNotFoundError(f"Expense {expense_id} not found")
        return row

    def get_expense(self, user_id: str, expense_id: uuid.UUID) -> Expense:
        return expense_to_domain(self._get_row(user_id, expense_id))

    def list_expenses(self, user_id: str, category: Optional[str] = None) -> List[Expense]:
        """All of a user's expenses, newest first"""
        query = self.db.query(ExpenseRecord).filter(ExpenseRecord.user_id == user_id)
        if category:
            query = query.filter(ExpenseRecord.category == category)
        return [expense_to_domain(row) for row in query.order_by(ExpenseRecord.date.desc()).all()]

    def latest_rent_expense(self, user_id: str, category: str = "Housing") -> Optional[Expense]:
        """Most recent expense of the category that recorded a rent period"""
        row = (
            self.db.query(ExpenseRecord)
            .filter(
                ExpenseRecord.user_id == user_id,
                ExpenseRecord.category == category,
                ExpenseRecord.rent_end_date.isnot(None),
            )
            .order_by(ExpenseRecord.date.desc())
            .first()
        )
        return expense_to_domain(row) if row else None

    def update_expense(self, user_id: str, expense_id: uuid.UUID, changes: Dict[str, Any]) -> Expense:
        row = self._get_row(user_id, expense_id)
        for field_name, value in changes.items():
            setattr(row, field_name, value)
        self.db.flush()
        return expense_to_domain(row)

    def delete_expense(self, user_id: str, expense_id: uuid.UUID) -> None:
        self.db.delete(self._get_row(user_id, expense_id))
        self.db.flush()


class IncomeRepository:
    """Repository for income records"""

    def __init__(self, db: Session):
        self.db = db

    def create_income(self, user_id: str, income: Income) -> Income:
        row = IncomeRecord(
            user_id=user_id,
            amount=income.amount,
            source=income.source,
            type=income.type,
            description=income.description,
            date=income.date,
            recurring=income.recurring,
            frequency=income.frequency,
        )
        self.db.add(row)
        self.db.flush()
        return income_to_domain(row)

    def list_income(self, user_id: str) -> List[Income]:
        rows = (
            self.db.query(IncomeRecord)
            .filter(IncomeRecord.user_id == user_id)
            .order_by(IncomeRecord.date.desc())
            .all()
        )
        return [income_to_domain(row) for row in rows]

    def delete_income(self, user_id: str, income_id: uuid.UUID) -> None:
        row = (
            self.db.query(IncomeRecord)
            .filter(IncomeRecord.id == income_id, IncomeRecord.user_id == user_id)
            .first()
        )
        if row is None:
            raise RecordNotFoundError(f"Income {income_id} not found")
        self.db.delete(row)
        self.db.flush()


class BudgetRepository:
    """Repository for budget envelopes"""

    def __init__(self, db: Session):
        self.db = db

    def create_budget(self, user_id: str, budget: Budget) -> Budget:
        row = BudgetRecord(
            user_id=user_id,
            category=budget.category,
            amount=budget.amount,
            spent=budget.spent,
            period=budget.period,
            rollover=budget.rollover,
        )
        self.db.add(row)
        self.db.flush()
        return budget_to_domain(row)

    def list_budgets(self, user_id: str) -> List[Budget]:
        rows = (
            self.db.query(BudgetRecord)
            .filter(BudgetRecord.user_id == user_id)
            .order_by(BudgetRecord.category)
            .all()
        )
        return [budget_to_domain(row) for row in rows]

    def _get_row(self, user_id: str, budget_id: uuid.UUID) -> BudgetRecord:
        row = (
            self.db.query(BudgetRecord)
            .filter(BudgetRecord.id == budget_id, BudgetRecord.user_id == user_id)
            .first()
        )
        if row is None:
            raise RecordNotFoundError(f"Budget {budget_id} not found")
        return row

    def update_budget(self, user_id: str, budget_id: uuid.UUID, changes: Dict[str, Any]) -> Budget:
        row = self._get_row(user_id, budget_id)
        for field_name, value in changes.items():
            setattr(row, field_name, value)
        self.db.flush()
        return budget_to_domain(row)

    def delete_budget(self, user_id: str, budget_id: uuid.UUID) -> None:
        self.db.delete(self._get_row(user_id, budget_id))
        self.db.flush()


class RemittanceRepository:
    """Repository for family recipients and the remittances sent to them"""

    def __init__(self, db: Session):
        self.db = db

    def create_recipient(self, user_id: str, recipient: FamilyRecipient) -> FamilyRecipient:
        row = FamilyRecipientRecord(
            user_id=user_id,
            name=recipient.name,
            relationship=recipient.relationship,
            country=recipient.country,
            phone=recipient.phone,
            email=recipient.email,
            preferred_method=recipient.preferred_method,
            notes=recipient.notes,
        )
        self.db.add(row)
        self.db.flush()
        return recipient_to_domain(row)

    def get_recipient(self, user_id: str, recipient_id: uuid.UUID) -> FamilyRecipient:
        row = (
            self.db.query(FamilyRecipientRecord)
            .filter(FamilyRecipientRecord.id == recipient_id, FamilyRecipientRecord.user_id == user_id)
            .first()
        )
        if row is None:
            raise RecordNotFoundError(f"Recipient {recipient_id} not found")
        return recipient_to_domain(row)

    def list_recipients(self, user_id: str) -> List[FamilyRecipient]:
        rows = (
            self.db.query(FamilyRecipientRecord)
            .filter(FamilyRecipientRecord.user_id == user_id)
            .order_by(FamilyRecipientRecord.name)
            .all()
        )
        return [recipient_to_domain(row) for row in rows]

    def create_remittance(self, user_id: str, remittance: FamilyRemittance) -> FamilyRemittance:
        row = FamilyRemittanceRecord(
            user_id=user_id,
            recipient_id=remittance.recipient_id,
            recipient_name=remittance.recipient_name,
            amount=remittance.amount,
            currency=remittance.currency,
            exchange_rate=remittance.exchange_rate,
            local_amount=remittance.local_amount,
            local_currency=remittance.local_currency,
            transfer_method=remittance.transfer_method,
            transfer_fee=remittance.transfer_fee,
            total_cost=remittance.total_cost,
            purpose=remittance.purpose,
            delivery_option=remittance.delivery_option,
            status=remittance.status,
            transfer_reference=remittance.transfer_reference,
            expected_delivery=remittance.expected_delivery,
            notes=remittance.notes,
            date=remittance.date,
        )
        self.db.add(row)
        self.db.flush()
        return remittance_to_domain(row)

    def list_remittances(self, user_id: str) -> List[FamilyRemittance]:
        rows = (
            self.db.query(FamilyRemittanceRecord)
            .filter(FamilyRemittanceRecord.user_id == user_id)
            .order_by(FamilyRemittanceRecord.date.desc())
            .all()
        )
        return [remittance_to_domain(row) for row in rows]
