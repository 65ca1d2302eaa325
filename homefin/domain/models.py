"""Domain models - pure Python dataclasses representing finance records and engine results"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional


@dataclass
class RentPeriod:
    """Inclusive date range a rent payment covers"""

    start_date: date
    end_date: date
    total_days: int
    total_weeks: float


@dataclass
class RentPaymentDetails:
    """Room-rent specific payment metadata attached to an expense"""

    payment_date: Optional[date] = None
    status: str = "paid"  # paid | unpaid | partial | overdue
    rent_period: Optional[RentPeriod] = None
    weekly_rate: Optional[float] = None
    calculated_amount: Optional[float] = None
    landlord_name: Optional[str] = None
    room_details: Optional[str] = None


@dataclass
class Expense:
    """Single spending record"""

    amount: float
    category: str
    description: str
    date: datetime
    subcategory: Optional[str] = None
    payment_method: Optional[str] = None
    location: Optional[str] = None
    recurring: bool = False
    tags: List[str] = field(default_factory=list)
    payment_details: Optional[RentPaymentDetails] = None
    id: Optional[str] = None
    user_id: Optional[str] = None


@dataclass
class Income:
    """Single income record"""

    amount: float
    source: str
    type: str
    date: datetime
    description: str = ""
    recurring: bool = False
    frequency: Optional[str] = None  # weekly | bi-weekly | monthly | quarterly | annual
    id: Optional[str] = None
    user_id: Optional[str] = None


@dataclass
class Budget:
    """Spending envelope for one category"""

    category: str
    amount: float
    spent: float = 0.0
    period: str = "monthly"  # weekly | monthly | annual
    rollover: bool = False
    id: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def percentage(self) -> float:
        return self.spent / self.amount * 100 if self.amount > 0 else 0.0

    @property
    def remaining(self) -> float:
        return self.amount - self.spent

    @property
    def is_over_budget(self) -> bool:
        return self.percentage > 100

    @property
    def is_warning(self) -> bool:
        return 80 < self.percentage <= 100


@dataclass
class Anomaly:
    """Rule-triggered flag on a single expense"""

    type: str  # unusual-amount | frequency-spike | new-merchant | duplicate | location-change
    severity: str  # low | medium | high
    message: str
    expense: Expense
    recommendation: str


@dataclass
class InsightAction:
    label: str
    target: str


@dataclass
class Insight:
    """Human-readable recommendation derived from aggregate data"""

    type: str  # savings | spending | budget | goal | warning | tip
    title: str
    description: str
    priority: str  # low | medium | high
    actionable: bool
    action: Optional[InsightAction] = None


@dataclass
class SpendingForecast:
    predicted: float
    confidence: float
    trend: str  # increasing | decreasing | stable


@dataclass
class RentPeriodCalculation:
    total_days: int
    total_weeks: float
    is_extended: bool


@dataclass
class RentPeriodSuggestion:
    start_date: date
    end_date: date
    is_sequential: bool


@dataclass
class RentValidation:
    """Outcome of rent form validation; errors block saving, warnings do not"""

    errors: List[str]
    warnings: List[str]

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class RentStats:
    total_paid: float
    average_rent: float
    rent_to_income_ratio: float
    payments_count: int


@dataclass
class RentInsights:
    has_data: bool
    insights: List[str]
    stats: Optional[RentStats] = None


@dataclass
class CategorySuggestion:
    category: str
    confidence: float
    subcategory: Optional[str] = None


@dataclass
class ExchangeRate:
    """Published buy/sell rate for one currency against NPR"""

    currency: str
    buy: float
    sell: float
    date: str  # YYYY-MM-DD as published


@dataclass
class ExchangeRateData:
    usd: ExchangeRate
    last_updated: datetime
    is_fallback: bool = False


@dataclass
class FamilyRecipient:
    name: str
    relationship: str
    country: str = "Nepal"
    phone: Optional[str] = None
    email: Optional[str] = None
    preferred_method: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[str] = None
    user_id: Optional[str] = None


@dataclass
class RemittanceQuote:
    """Cost breakdown for sending USD to Nepal with a given provider"""

    amount: float
    exchange_rate: float
    local_amount: float
    transfer_method: str
    transfer_fee: float
    total_cost: float
    expected_delivery: datetime


@dataclass
class FamilyRemittance:
    recipient_id: str
    recipient_name: str
    amount: float
    exchange_rate: float
    local_amount: float
    transfer_method: str  # western-union | moneygram | bank-transfer | crypto | other
    transfer_fee: float
    total_cost: float
    purpose: str  # medical | education | living | emergency | gift | other
    delivery_option: str  # cash-pickup | bank-deposit | mobile-wallet | home-delivery
    date: datetime
    status: str = "pending"  # pending | in-transit | completed | failed | cancelled
    currency: str = "USD"
    local_currency: str = "NPR"
    expected_delivery: Optional[datetime] = None
    transfer_reference: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[str] = None
    user_id: Optional[str] = None


@dataclass
class TopExpense:
    description: str
    amount: float
    date: datetime


@dataclass
class FinancialSummary:
    period: str
    total_income: float
    total_expenses: float
    net_savings: float
    savings_rate: float
    expenses_by_category: Dict[str, float]
    top_expenses: List[TopExpense]
