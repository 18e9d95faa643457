import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


# =========================
# Base
# =========================
class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# =========================
# Create
# =========================
class ExpenseDraft(CamelModel):
    # Required-ness and length limits are checked by the service so that
    # every violation is reported together.
    expense: Optional[str] = None
    expense_type: Optional[str] = None
    expense_amount: Optional[str] = None
    payment_method: Optional[str] = None
    date: Optional[datetime.date] = None

    # Accepted and ignored; the owner is always the caller
    user_id: Optional[int] = None

    @field_validator("expense_amount", mode="before")
    @classmethod
    def amount_as_text(cls, v):
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v


# =========================
# Update
# =========================
class ExpenseUpdate(ExpenseDraft):
    id: Optional[int] = None


# =========================
# Output
# =========================
class ExpenseOut(CamelModel):
    id: int
    expense: str
    expense_type: str
    expense_amount: str
    payment_method: Optional[str] = None
    date: datetime.date
