# backend/modules/sellers/schemas/expense_schemas.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..constants import MIN_EXPENSE_AMOUNT
from ..models.marketplace_models import ExpenseCategory, ExpenseType
from ..services.time_windows import to_naive_utc
from .seller_report_schemas import Money, ReportModel


class ExpenseCreate(BaseModel):
    """Request schema for recording a seller expense"""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    amount: Decimal = Field(..., description="Positive amount, at least 0.01")
    category: ExpenseCategory = ExpenseCategory.MISCELLANEOUS
    type: ExpenseType = ExpenseType.VARIABLE
    date: datetime = Field(..., description="When the expense was incurred")

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Expense title is required")
        return v

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal) -> Decimal:
        if v < MIN_EXPENSE_AMOUNT:
            raise ValueError("Amount must be positive")
        return v

    @field_validator("date")
    @classmethod
    def naive_utc(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class ExpenseResponse(ReportModel):
    """Recorded expense; ``incurred_at`` goes out as ``date``, matching the request"""

    id: int
    title: str
    description: Optional[str] = None
    amount: Money
    category: ExpenseCategory
    type: ExpenseType
    incurred_at: datetime = Field(alias="date")
    created_at: datetime
