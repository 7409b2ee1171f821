"""
Expense routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.schemas.expense import ExpenseCreate, ExpenseListItem, ExpenseResponse
from app.schemas.user import CurrentUser
from app.api.dependencies import get_current_user
from app.services import expense_service

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseListItem])
async def list_expenses(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Own expenses for employees; all expenses for managers and admins."""
    return expense_service.list_expenses(current_user, db)


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return expense_service.get_expense(current_user, expense_id, db)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Submit a new expense for approval."""
    return expense_service.submit_expense(
        employee_id=current_user.id,
        spend_date=expense_data.spend_date,
        category=expense_data.category,
        description=expense_data.description,
        amount=expense_data.amount,
        currency=expense_data.currency,
        remarks=expense_data.remarks,
        db=db
    )
