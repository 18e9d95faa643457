from typing import List

from fastapi import APIRouter, Depends, Path
from fastapi.responses import PlainTextResponse
from loguru import logger
from sqlalchemy.orm import Session

from expense_tracker.config import Settings, get_settings
from expense_tracker.database import get_db
from expense_tracker.expenses import schemas, service
from expense_tracker.users.auth import get_current_user
from expense_tracker.users.models import User

router = APIRouter()


@router.get("/test-auth", response_class=PlainTextResponse)
def test_auth(current_user: User = Depends(get_current_user)):
    logger.info(f"Test auth endpoint called - authentication successful for {current_user.username}")
    return "Authentication successful"


@router.get("/all", response_model=List[schemas.ExpenseOut])
def list_expenses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    logger.info(f"Fetching all expenses for user: {current_user.username}")
    return service.list_all(db, current_user, enforce_ownership=settings.OWNERSHIP_ENFORCED)


@router.get("/by-month/{year_month}", response_model=List[schemas.ExpenseOut])
def list_expenses_by_month(
    year_month: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    logger.info(f"Fetching expenses for month {year_month} for user: {current_user.username}")
    return service.list_by_month(
        db, current_user, year_month, enforce_ownership=settings.OWNERSHIP_ENFORCED
    )


@router.post("/add", response_model=schemas.ExpenseOut)
def create_expense(
    expense: schemas.ExpenseDraft,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    saved = service.create_expense(db, current_user, expense)
    logger.info(f"Successfully added expense with ID: {saved.id} for user: {current_user.username}")
    return saved


@router.put("/updateExpense", response_model=schemas.ExpenseOut)
def update_expense(
    expense: schemas.ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    updated = service.update_expense(
        db, current_user, expense, enforce_ownership=settings.OWNERSHIP_ENFORCED
    )
    logger.info(f"Successfully updated expense with ID: {updated.id} for user: {current_user.username}")
    return updated


@router.delete("/delete/{id}", response_class=PlainTextResponse)
def delete_expense(
    expense_id: int = Path(alias="id"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    message = service.delete_expense(
        db, current_user, expense_id, enforce_ownership=settings.OWNERSHIP_ENFORCED
    )
    logger.info(f"Deleted expense with ID: {expense_id} for user: {current_user.username}")
    return message
