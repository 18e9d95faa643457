from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from expense_tracker.expenses.models import Expense


def _ordered(query):
    return query.order_by(Expense.date.desc(), Expense.id.desc())


def get_expense(db: Session, expense_id: int, for_update: bool = False) -> Optional[Expense]:
    query = db.query(Expense).filter(Expense.id == expense_id)
    if for_update:
        # Row lock on backends that support it; ignored by SQLite
        query = query.with_for_update()
    return query.first()


def list_all(db: Session) -> List[Expense]:
    return _ordered(db.query(Expense)).all()


def list_by_owner(db: Session, user_id: int) -> List[Expense]:
    return _ordered(db.query(Expense).filter(Expense.user_id == user_id)).all()


def list_between(db: Session, start: date, end: date, user_id: Optional[int] = None) -> List[Expense]:
    query = db.query(Expense).filter(Expense.date >= start, Expense.date <= end)
    if user_id is not None:
        query = query.filter(Expense.user_id == user_id)
    return _ordered(query).all()


def save(db: Session, expense: Expense) -> Expense:
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def delete(db: Session, expense: Expense):
    db.delete(expense)
    db.commit()


def assign_orphans(db: Session, user_id: int) -> int:
    updated = (
        db.query(Expense)
        .filter(Expense.user_id.is_(None))
        .update({Expense.user_id: user_id}, synchronize_session=False)
    )
    db.commit()
    return updated
