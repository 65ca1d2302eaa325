"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from typing import Dict, List, Literal, Optional
from homefin.utils.date_utils import to_naive_utc

PaymentStatus = Literal["paid", "unpaid", "partial", "overdue"]
IncomeFrequency = Literal["weekly", "bi-weekly", "monthly", "quarterly", "annual"]
BudgetPeriod = Literal["weekly", "monthly", "annual"]
TransferMethod = Literal["western-union", "moneygram", "bank-transfer", "crypto", "other"]
RemittancePurpose = Literal["medical", "education", "living", "emergency", "gift", "other"]
DeliveryOption = Literal["cash-pickup", "bank-deposit", "mobile-wallet", "home-delivery"]


class DomainSchema(BaseModel):
    """Response schema populated from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# Expenses


class RentPeriodInput(BaseModel):
    start_date: date
    end_date: date


class RentPaymentDetailsInput(BaseModel):
    """Room rent details; the weekly rate is required whenever a period is given"""

    payment_date: date
    status: PaymentStatus = "paid"
    rent_period: Optional[RentPeriodInput] = None
    weekly_rate: Optional[float] = None
    landlord_name: Optional[str] = None
    room_details: Optional[str] = None


class ExpenseCreate(BaseModel):
    """Request body for POST /v1/expenses; category is auto-detected when omitted"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    amount: float = Field(..., ge=0)
    category: Optional[str] = None
    subcategory: Optional[str] = None
    description: str = Field(..., min_length=1)
    date: datetime
    payment_method: Optional[str] = None
    location: Optional[str] = None
    recurring: bool = False
    tags: List[str] = Field(default_factory=list)
    payment_details: Optional[RentPaymentDetailsInput] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class ExpenseUpdate(BaseModel):
    amount: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    subcategory: Optional[str] = None
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    payment_method: Optional[str] = None
    location: Optional[str] = None
    recurring: Optional[bool] = None
    tags: Optional[List[str]] = None

    @field_validator("amount", "category", "description", "date", "recurring", "tags")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value else value


class RentPeriodSchema(DomainSchema):
    start_date: date
    end_date: date
    total_days: int
    total_weeks: float


class RentPaymentDetailsSchema(DomainSchema):
    payment_date: Optional[date] = None
    status: str
    rent_period: Optional[RentPeriodSchema] = None
    weekly_rate: Optional[float] = None
    calculated_amount: Optional[float] = None
    landlord_name: Optional[str] = None
    room_details: Optional[str] = None


class ExpenseSchema(DomainSchema):
    id: str
    user_id: str
    amount: float
    category: str
    subcategory: Optional[str] = None
    description: str
    date: datetime
    payment_method: Optional[str] = None
    location: Optional[str] = None
    recurring: bool
    tags: List[str]
    payment_details: Optional[RentPaymentDetailsSchema] = None


class AnomalySchema(DomainSchema):
    type: str
    severity: str
    message: str
    recommendation: str


class CategorySuggestionSchema(DomainSchema):
    category: str
    subcategory: Optional[str] = None
    confidence: float


class ExpenseCreateResponse(BaseModel):
    """Response for POST /v1/expenses"""

    expense: ExpenseSchema
    anomalies: List[AnomalySchema]
    category_suggestion: Optional[CategorySuggestionSchema] = None
    rent_warnings: List[str] = Field(default_factory=list)


class ExpenseListResponse(BaseModel):
    user_id: str
    expenses: List[ExpenseSchema]


class AnomalyCheckResponse(BaseModel):
    expense_id: str
    anomalies: List[AnomalySchema]


class CategorizeRequest(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float = Field(0.0, ge=0)


class CategoryCorrectionRequest(BaseModel):
    description: str = Field(..., min_length=1)
    original_category: str
    corrected_category: str
    corrected_subcategory: Optional[str] = None


# Income & budgets


class IncomeCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    source: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    description: str = ""
    date: datetime
    recurring: bool = False
    frequency: Optional[IncomeFrequency] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class IncomeSchema(DomainSchema):
    id: str
    user_id: str
    amount: float
    source: str
    type: str
    description: str
    date: datetime
    recurring: bool
    frequency: Optional[str] = None


class IncomeListResponse(BaseModel):
    user_id: str
    income: List[IncomeSchema]


class BudgetCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    spent: float = Field(0.0, ge=0)
    period: BudgetPeriod = "monthly"
    rollover: bool = False


class BudgetUpdate(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    spent: Optional[float] = Field(None, ge=0)
    period: Optional[BudgetPeriod] = None
    rollover: Optional[bool] = None

    @field_validator("amount", "spent", "period", "rollover")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class BudgetSchema(DomainSchema):
    id: str
    user_id: str
    category: str
    amount: float
    spent: float
    period: str
    rollover: bool
    percentage: float
    remaining: float
    is_over_budget: bool
    is_warning: bool


class BudgetListResponse(BaseModel):
    user_id: str
    budgets: List[BudgetSchema]


# Analysis


class InsightActionSchema(DomainSchema):
    label: str
    target: str


class InsightSchema(DomainSchema):
    type: str
    title: str
    description: str
    priority: str
    actionable: bool
    action: Optional[InsightActionSchema] = None


class InsightsResponse(BaseModel):
    user_id: str
    insights: List[InsightSchema]


class ForecastResponse(DomainSchema):
    predicted: float
    confidence: float
    trend: str


class TopExpenseSchema(DomainSchema):
    description: str
    amount: float
    date: datetime


class SummaryResponse(DomainSchema):
    period: str
    total_income: float
    total_expenses: float
    net_savings: float
    savings_rate: float
    expenses_by_category: Dict[str, float]
    top_expenses: List[TopExpenseSchema]


# Rent


class RentCalculateRequest(BaseModel):
    payment_date: date
    start_date: date
    end_date: date
    weekly_rate: Optional[float] = Field(None, gt=0)


class RentCalculateResponse(BaseModel):
    total_days: int
    total_weeks: float
    is_extended: bool
    amount: Optional[float] = None
    formatted_period: str


class RentSuggestRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    payment_date: date


class RentSuggestResponse(BaseModel):
    start_date: date
    end_date: date
    is_sequential: bool
    formatted_period: str


class RentValidateRequest(BaseModel):
    payment_date: date
    start_date: date
    end_date: date
    weekly_rate: float
    saved_rate: Optional[float] = None


class RentValidationResponse(DomainSchema):
    errors: List[str]
    warnings: List[str]
    is_valid: bool


class RentStatsSchema(DomainSchema):
    total_paid: float
    average_rent: float
    rent_to_income_ratio: float
    payments_count: int


class RentInsightsResponse(DomainSchema):
    has_data: bool
    insights: List[str]
    stats: Optional[RentStatsSchema] = None


# Remittance


class ExchangeRateResponse(BaseModel):
    currency: str
    buy: float
    sell: float
    date: str
    last_updated: datetime
    is_fallback: bool


class RemittanceQuoteRequest(BaseModel):
    amount: float = Field(..., gt=0, description="Amount to send in USD")
    transfer_method: TransferMethod


class RemittanceQuoteResponse(DomainSchema):
    amount: float
    exchange_rate: float
    local_amount: float
    transfer_method: str
    transfer_fee: float
    total_cost: float
    expected_delivery: datetime
    formatted_local_amount: str
    formatted_total_cost: str


class RecipientCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    relationship: str = Field(..., min_length=1)
    country: str = "Nepal"
    phone: Optional[str] = None
    email: Optional[str] = None
    preferred_method: Optional[TransferMethod] = None
    notes: Optional[str] = None


class RecipientSchema(DomainSchema):
    id: str
    user_id: str
    name: str
    relationship: str
    country: str
    phone: Optional[str] = None
    email: Optional[str] = None
    preferred_method: Optional[str] = None
    notes: Optional[str] = None


class RecipientListResponse(BaseModel):
    user_id: str
    recipients: List[RecipientSchema]


class RemittanceCreate(BaseModel):
    """Request body for POST /v1/remittances; rate and fee are filled in server-side"""

    user_id: str = Field(..., min_length=1)
    recipient_id: str
    amount: float = Field(..., gt=0)
    transfer_method: TransferMethod
    purpose: RemittancePurpose = "living"
    delivery_option: DeliveryOption = "bank-deposit"
    transfer_reference: Optional[str] = None
    notes: Optional[str] = None


class RemittanceSchema(DomainSchema):
    id: str
    user_id: str
    recipient_id: str
    recipient_name: str
    amount: float
    currency: str
    exchange_rate: float
    local_amount: float
    local_currency: str
    transfer_method: str
    transfer_fee: float
    total_cost: float
    purpose: str
    delivery_option: str
    status: str
    transfer_reference: Optional[str] = None
    expected_delivery: Optional[datetime] = None
    notes: Optional[str] = None
    date: datetime


class RemittanceListResponse(BaseModel):
    user_id: str
    remittances: List[RemittanceSchema]
