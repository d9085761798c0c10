"""
Pydantic schemas for API request/response validation.

These schemas provide:
- Input validation for API requests
- Response serialization in the camelCase record format
- OpenAPI documentation generation

Python field names are snake_case; every field with a multi-word name
carries its camelCase wire alias.
"""

import datetime as dt
from enum import Enum
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, Field, ConfigDict, field_validator

from finsight.core.constants import INVESTMENT_TYPES, DEBT_TYPES, TABS


# ======================
# Enums
# ======================


class TransactionType(str, Enum):
    """Transaction direction."""

    INCOME = "income"
    EXPENSE = "expense"


class View(str, Enum):
    """Dashboard period granularity."""

    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Language(str, Enum):
    """Advisor reply language."""

    ENGLISH = "en"
    HINDI = "hi"


# ======================
# Base Schemas
# ======================


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        use_enum_values=True,
        populate_by_name=True,
    )

    def to_payload(self) -> Dict[str, Any]:
        """Submitted fields in record (camelCase, JSON) form."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


def _check_choice(value: Optional[str], choices, label: str) -> Optional[str]:
    if value is not None and value not in choices:
        raise ValueError(f"{label} must be one of: {', '.join(choices)}")
    return value


# ======================
# Transaction Schemas
# ======================


class TransactionBase(BaseSchema):
    """Base transaction schema with common fields."""

    type: TransactionType = TransactionType.EXPENSE
    category: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    date: Optional[dt.date] = Field(None, description="Defaults to today")
    note: str = Field(default="", max_length=500)


class TransactionCreate(TransactionBase):
    """Schema for creating a new transaction."""

    pass


class TransactionUpdate(BaseSchema):
    """Schema for updating a transaction (all fields optional)."""

    type: Optional[TransactionType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    date: Optional[dt.date] = None
    note: Optional[str] = Field(None, max_length=500)


class TransactionResponse(BaseSchema):
    """Schema for transaction responses."""

    id: str
    type: str
    category: str
    amount: float
    date: str
    note: str = ""


# ======================
# Investment Schemas
# ======================


class InvestmentBase(BaseSchema):
    """Base investment schema with common fields."""

    name: str = Field(..., min_length=1, max_length=100)
    type: str = Field(..., description="One of the investment types")
    shares: float = Field(..., ge=0, allow_inf_nan=False)
    purchase_price: float = Field(..., alias="purchasePrice", ge=0, allow_inf_nan=False)
    current_price: float = Field(..., alias="currentPrice", ge=0, allow_inf_nan=False)
    purchase_date: Optional[dt.date] = Field(None, alias="purchaseDate")
    note: str = Field(default="", max_length=500)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_choice(v, INVESTMENT_TYPES, "type")


class InvestmentCreate(InvestmentBase):
    """Schema for creating a new investment."""

    pass


class InvestmentUpdate(BaseSchema):
    """Schema for updating an investment (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = None
    shares: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    purchase_price: Optional[float] = Field(None, alias="purchasePrice", ge=0, allow_inf_nan=False)
    current_price: Optional[float] = Field(None, alias="currentPrice", ge=0, allow_inf_nan=False)
    purchase_date: Optional[dt.date] = Field(None, alias="purchaseDate")
    note: Optional[str] = Field(None, max_length=500)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_choice(v, INVESTMENT_TYPES, "type")


class InvestmentResponse(BaseSchema):
    """Schema for investment responses."""

    id: str
    name: str
    type: str
    shares: float
    purchase_price: float = Field(..., alias="purchasePrice")
    current_price: float = Field(..., alias="currentPrice")
    purchase_date: Optional[str] = Field(None, alias="purchaseDate")
    note: str = ""


# ======================
# Debt Schemas
# ======================


class DebtBase(BaseSchema):
    """Base debt schema with common fields."""

    name: str = Field(..., min_length=1, max_length=100)
    type: str = Field(..., description="One of the debt types")
    balance: float = Field(..., ge=0, allow_inf_nan=False)
    interest_rate: float = Field(..., alias="interestRate", ge=0, le=100, description="Annual percentage rate")
    minimum_payment: float = Field(default=0, alias="minimumPayment", ge=0, allow_inf_nan=False)
    credit_limit: Optional[float] = Field(None, alias="creditLimit", ge=0, allow_inf_nan=False)
    due_date: Optional[dt.date] = Field(None, alias="dueDate")
    note: str = Field(default="", max_length=500)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_choice(v, DEBT_TYPES, "type")


class DebtCreate(DebtBase):
    """Schema for creating a new debt."""

    pass


class DebtUpdate(BaseSchema):
    """Schema for updating a debt (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = None
    balance: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    interest_rate: Optional[float] = Field(None, alias="interestRate", ge=0, le=100)
    minimum_payment: Optional[float] = Field(None, alias="minimumPayment", ge=0, allow_inf_nan=False)
    credit_limit: Optional[float] = Field(None, alias="creditLimit", ge=0, allow_inf_nan=False)
    due_date: Optional[dt.date] = Field(None, alias="dueDate")
    note: Optional[str] = Field(None, max_length=500)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_choice(v, DEBT_TYPES, "type")


class DebtResponse(BaseSchema):
    """Schema for debt responses."""

    id: str
    name: str
    type: str
    balance: float
    interest_rate: float = Field(..., alias="interestRate")
    minimum_payment: float = Field(..., alias="minimumPayment")
    credit_limit: Optional[float] = Field(None, alias="creditLimit")
    due_date: Optional[str] = Field(None, alias="dueDate")
    note: str = ""


# ======================
# Settings Schemas
# ======================


class SettingsUpdate(BaseSchema):
    """Schema for changing view settings and the selected period."""

    view: Optional[View] = None
    active_tab: Optional[str] = Field(None, alias="activeTab")
    selected_date: Optional[dt.date] = Field(None, alias="selectedDate")
    selected_month: Optional[str] = Field(None, alias="selectedMonth", pattern=r"^\d{4}-\d{2}$")
    selected_year: Optional[str] = Field(None, alias="selectedYear", pattern=r"^\d{4}$")

    @field_validator("active_tab")
    @classmethod
    def validate_tab(cls, v):
        return _check_choice(v, TABS, "activeTab")


class SettingsResponse(BaseSchema):
    """Schema for settings responses."""

    view: str
    active_tab: str = Field(..., alias="activeTab")
    selected_date: str = Field(..., alias="selectedDate")
    selected_month: str = Field(..., alias="selectedMonth")
    selected_year: str = Field(..., alias="selectedYear")
    reference: str
    sync_status: str = Field(..., alias="syncStatus")


# ======================
# Metrics Schemas
# ======================


class PeriodStatsResponse(BaseSchema):
    """Income and expense totals of a period."""

    income: float
    expense: float
    net: float
    count: int


class PortfolioStatsResponse(BaseSchema):
    """Portfolio totals."""

    total_value: float = Field(..., alias="totalValue")
    total_cost: float = Field(..., alias="totalCost")
    total_gain: float = Field(..., alias="totalGain")
    gain_pct: float = Field(..., alias="gainPct")


class DebtStatsResponse(BaseSchema):
    """Debt totals."""

    total_debt: float = Field(..., alias="totalDebt")
    total_min_payment: float = Field(..., alias="totalMinPayment")
    avg_rate: float = Field(..., alias="avgRate")
    total_credit_limit: float = Field(..., alias="totalCreditLimit")
    credit_used: float = Field(..., alias="creditUsed")


class PayoffResponse(BaseSchema):
    """Payoff estimate of one debt; months is null when it never pays off."""

    months: Optional[int] = None
    never: bool
    label: str
    total_interest: float = Field(..., alias="totalInterest")
    severity: str
    bar_pct: float = Field(..., alias="barPct")


class DebtDetailResponse(BaseSchema):
    """Per-debt utilization and payoff."""

    id: str
    name: str
    type: str
    balance: float
    utilization: Optional[float] = None
    payoff: PayoffResponse


class DebtMetricsResponse(BaseSchema):
    """Schema for the debts metrics endpoint."""

    stats: DebtStatsResponse
    debts: List[DebtDetailResponse]


class PortfolioMetricsResponse(BaseSchema):
    """Schema for the portfolio metrics endpoint."""

    stats: PortfolioStatsResponse
    holdings: List[Dict[str, Any]]
    allocation: List[Dict[str, Any]]


class ScheduleRowResponse(BaseSchema):
    """One month of a payoff schedule."""

    month: int
    payment: float
    interest: float
    principal: float
    balance: float
    total_interest: float = Field(..., alias="totalInterest")


class PayoffScheduleResponse(BaseSchema):
    """Schema for a debt's month-by-month payoff schedule."""

    debt_id: str = Field(..., alias="debtId")
    payoff: PayoffResponse
    schedule: List[ScheduleRowResponse]
    required_payment: Optional[float] = Field(None, alias="requiredPayment")


class SyncStatusResponse(BaseSchema):
    """Write-through status of the user's session."""

    status: str
    pending: List[str] = Field(default_factory=list)
    last_error: Optional[str] = Field(None, alias="lastError")
    loaded: bool = True


# ======================
# Data Schemas
# ======================


class ExportResponse(BaseSchema):
    """Backup file content."""

    transactions: List[TransactionResponse] = Field(default_factory=list)
    investments: List[InvestmentResponse] = Field(default_factory=list)
    debts: List[DebtResponse] = Field(default_factory=list)


class ImportResponse(BaseSchema):
    """Result of a backup import."""

    imported: List[str]
    counts: Dict[str, int]


class DataResetResponse(BaseSchema):
    """Result of clearing or resetting the user's data."""

    status: str = "ok"
    counts: Dict[str, int]


# ======================
# Advisor Schemas
# ======================


class ChatMessage(BaseSchema):
    """One message of a chat transcript."""

    role: str = Field(..., description="'user' for the user, anything else for the advisor")
    content: str = Field(..., min_length=1)


class ChatRequest(BaseSchema):
    """Schema for advisor chat requests."""

    messages: List[ChatMessage] = Field(..., min_length=1)
    lang: Language = Language.ENGLISH
    currency: str = Field(default="USD", max_length=8)


class ChatResponse(BaseSchema):
    """Schema for advisor chat replies."""

    reply: str


class QuickPrompt(BaseSchema):
    """Canned advisor question."""

    label: str
    prompt: str


