"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from app.models.expense import ExpenseStatus


class ExpenseCreate(BaseModel):
    """Schema for expense submission."""
    spend_date: date
    category: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, max_digits=15, decimal_places=2)
    currency: str = Field(min_length=3, max_length=3)
    remarks: Optional[str] = None


class TimelineEventResponse(BaseModel):
    """One entry of an expense timeline."""
    at: datetime
    decision: str
    by_user_id: Optional[int] = None
    comment: str = ""

    model_config = {"from_attributes": True}


class ExpenseListItem(BaseModel):
    """Row shape for expense tables."""
    id: int
    spend_date: date
    description: str
    category: str
    amount: Decimal
    currency: str
    amount_company_ccy: Decimal
    company_currency: str
    status: ExpenseStatus

    model_config = {"from_attributes": True}


class ExpenseResponse(ExpenseListItem):
    """Schema for expense detail response."""
    employee_id: int
    employee_name: str
    remarks: Optional[str] = None
    timeline: List[TimelineEventResponse] = []
    created_at: datetime
    updated_at: datetime


class OCRReceiptPreview(BaseModel):
    """Best-effort fields scraped from a receipt image."""
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    spend_date: Optional[date] = None
    description: Optional[str] = None
