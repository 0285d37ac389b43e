"""
Core Data Models for the Expense Ledger

These models define the schemas for every value the ledger stores,
filters, aggregates and exports. They are designed to:
1. Reject malformed records at the boundary
2. Be serializable to the persisted JSON layout
3. Keep amounts exact

DESIGN DECISION: Amounts are Decimal everywhere inside the ledger.
Category sums and the overall total are both exact, so a breakdown
always adds up to the total it was derived from.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# Formats the ledger accepts for stored timestamps besides ISO-8601.
# Older ledgers stored the browser's locale date only.
LEGACY_DATE_FORMATS = ("%m/%d/%Y", "%d/%m/%Y")


def as_local_naive(moment: datetime) -> datetime:
    """Convert an aware datetime to local wall-clock time without tzinfo."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Lookup by value is case-insensitive and ignores surrounding
    whitespace, so ``ExpenseCategory(" food ")`` is ``FOOD``.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    BILLS = "Bills"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value: object) -> Optional["ExpenseCategory"]:
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class WindowKind(str, Enum):
    """Named time windows used to narrow the visible expenses."""
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def _missing_(cls, value: object) -> Optional["WindowKind"]:
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value == wanted:
                    return member
        return None


class BudgetTier(str, Enum):
    """How close spending is to the budget."""
    ON_TRACK = "on_track"        # below 80%
    APPROACHING = "approaching"  # 80% up to 100%
    EXCEEDED = "exceeded"        # 100% and above


# =============================================================================
# EXPENSE MODELS
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    A validated proposal for an expense.

    This is what the validator hands to the ledger. It carries only the
    fields a caller may choose; id and timestamp are assigned by the
    ledger.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount spent, strictly positive"
    )
    category: ExpenseCategory = Field(
        default=ExpenseCategory.OTHER,
        description="Expense category"
    )

    @field_validator("amount", mode="before")
    @classmethod
    def reject_booleans(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("Amount must be a number")
        return v

    @field_validator("amount")
    @classmethod
    def require_storable_precision(cls, v: Decimal) -> Decimal:
        """Fractional amounts are persisted as JSON floats and must reload unchanged."""
        if v != v.to_integral_value() and Decimal(repr(float(v))) != v:
            raise ValueError(
                "Amount has more precision than can be stored "
                "(at most 15 significant digits)"
            )
        return v

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, v: Any) -> Any:
        """Absent category means Other; anything else must be a known name."""
        if v is None:
            return ExpenseCategory.OTHER
        if isinstance(v, str):
            try:
                return ExpenseCategory(v)
            except ValueError:
                allowed = ", ".join(c.value for c in ExpenseCategory)
                raise ValueError(f"Unknown category '{v}'. Allowed: {allowed}")
        return v


class Expense(BaseModel):
    """
    A single recorded expense.

    ``created_at`` is persisted under the key ``date``. Both names are
    accepted when building a model.
    """
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    id: int = Field(
        ...,
        description="Ledger-issued identifier, unique within the ledger"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount spent"
    )
    category: ExpenseCategory
    created_at: datetime = Field(
        ...,
        alias="date",
        description="When the expense was recorded (local time)"
    )

    @field_validator("id", mode="before")
    @classmethod
    def reject_boolean_id(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("Expense id must be an integer")
        return v

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_legacy_date(cls, v: Any) -> Any:
        if isinstance(v, str) and "/" in v:
            for fmt in LEGACY_DATE_FORMATS:
                try:
                    return datetime.strptime(v.strip(), fmt)
                except ValueError:
                    continue
        return v

    @field_validator("created_at")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return as_local_naive(v)

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> Union[int, float]:
        """Persist amounts as JSON numbers, integral ones without a fraction."""
        if amount == amount.to_integral_value():
            return int(amount)
        return float(amount)


# =============================================================================
# ANALYTICS MODELS
# =============================================================================

class BudgetStatus(BaseModel):
    """Spend measured against the budget."""

    percentage: float = Field(
        ...,
        description="Spend as a percentage of the budget (never NaN or infinite)"
    )
    tier: BudgetTier
    total: Decimal = Field(
        ...,
        description="Amount spent"
    )
    budget: Decimal = Field(
        ...,
        description="Budget the total was measured against"
    )

    @property
    def remaining(self) -> Decimal:
        """Budget left; negative once the budget is exceeded."""
        return self.budget - self.total


class TrendPoint(BaseModel):
    """Total spend for one calendar month."""

    year: int
    month: int = Field(..., ge=1, le=12)
    month_label: str = Field(
        ...,
        description="Short label such as 'Jan 2025'"
    )
    amount: Decimal

    @property
    def month_start(self) -> date:
        return date(self.year, self.month, 1)


class ExportRow(BaseModel):
    """One row of the tabular export."""

    date: str
    description: str
    category: str
    amount: Decimal

    def to_sheets_row(self) -> list:
        """Cells in export column order."""
        return [
            self.date,
            self.description,
            self.category,
            float(self.amount),
        ]


class LedgerSummary(BaseModel):
    """Everything a dashboard shows for one time window."""

    window: WindowKind
    expense_count: int = Field(ge=0)
    total: Decimal
    category_totals: dict[ExpenseCategory, Decimal] = Field(default_factory=dict)
    budget_status: BudgetStatus
    trend: list[TrendPoint] = Field(
        default_factory=list,
        description="Monthly totals over the full history, oldest first"
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in a proposed expense."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'greater_than', 'value_error')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
