import calendar
import re
from contextlib import contextmanager
from datetime import date
from typing import Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from expense_tracker.errors import ExpenseValidationError, Forbidden, InternalError, InvalidArgument, NotFound
from expense_tracker.expenses import crud, models, schemas
from expense_tracker.users import crud as user_crud
from expense_tracker.users.models import User

YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")

# (wire name, attribute, label, max length)
REQUIRED_FIELDS = (
    ("expense", "expense", "Expense name", 100),
    ("expenseType", "expense_type", "Expense type", 50),
    ("expenseAmount", "expense_amount", "Expense amount", 20),
)


# =========================
# Helper: field validation
# =========================
def validate_expense(draft: schemas.ExpenseDraft) -> Dict[str, List[str]]:
    """Collect every field violation rather than stopping at the first."""
    errors: Dict[str, List[str]] = {}

    for wire_name, attr, label, max_length in REQUIRED_FIELDS:
        value = getattr(draft, attr)
        if value is None or not value.strip():
            errors.setdefault(wire_name, []).append(f"{label} is required")
        elif len(value) > max_length:
            errors.setdefault(wire_name, []).append(f"{label} must be at most {max_length} characters")

    return errors


# =========================
# Helper: year-month token
# =========================
def parse_year_month(year_month: str) -> Tuple[date, date]:
    """Return the first and last day of a ``YYYY-MM`` month."""
    match = YEAR_MONTH_PATTERN.match(year_month or "")
    if not match:
        raise InvalidArgument(f"Invalid year-month '{year_month}', expected YYYY-MM")

    year, month = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= month <= 12:
        raise InvalidArgument(f"Invalid year-month '{year_month}', expected YYYY-MM")

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


# =========================
# Helper: ownership
# =========================
def is_owned_by(expense: Optional[models.Expense], caller: User) -> bool:
    # Absent expense or missing owner on either side fails closed
    if expense is None or expense.user_id is None or caller is None or caller.id is None:
        return False
    return expense.user_id == caller.id


@contextmanager
def _store_errors(db: Session, action: str, caller: User):
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.opt(exception=exc).error(f"Failed to {action} for user: {caller.username}")
        raise InternalError(f"Failed to {action}. Please try again.") from exc


def _load_for_mutation(db: Session, caller: User, expense_id: int, verb: str,
                       enforce_ownership: bool) -> models.Expense:
    existing = crud.get_expense(db, expense_id, for_update=True)

    if enforce_ownership:
        if not is_owned_by(existing, caller):
            logger.warning(
                f"User {caller.username} attempted to {verb} expense {expense_id} owned by another user"
            )
            raise Forbidden(f"You can only {verb} your own expenses")
    elif existing is None:
        raise NotFound(f"Expense {expense_id} not found")

    return existing


# =========================
# Queries
# =========================
def get_by_id(db: Session, expense_id: int) -> Optional[models.Expense]:
    logger.debug(f"Retrieving expense with ID: {expense_id}")
    return crud.get_expense(db, expense_id)


def list_all(db: Session, caller: User, enforce_ownership: bool = True) -> List[models.Expense]:
    if not enforce_ownership:
        expenses = crud.list_all(db)
    else:
        expenses = crud.list_by_owner(db, caller.id)
    logger.debug(f"Found {len(expenses)} expenses for user: {caller.username}")
    return expenses


def list_by_month(db: Session, caller: User, year_month: str,
                  enforce_ownership: bool = True) -> List[models.Expense]:
    start, end = parse_year_month(year_month)
    logger.debug(f"Fetching expenses for user {caller.username} between {start} and {end}")
    owner_id = caller.id if enforce_ownership else None
    return crud.list_between(db, start, end, user_id=owner_id)


# =========================
# Mutations
# =========================
def create_expense(db: Session, caller: User, draft: schemas.ExpenseDraft) -> models.Expense:
    errors = validate_expense(draft)
    if errors:
        raise ExpenseValidationError(errors)

    new_expense = models.Expense(
        expense=draft.expense,
        expense_type=draft.expense_type,
        expense_amount=draft.expense_amount,
        payment_method=draft.payment_method,
        date=draft.date or date.today(),
        user_id=caller.id,
    )

    with _store_errors(db, "save expense", caller):
        saved = crud.save(db, new_expense)

    logger.debug(f"Successfully saved expense with ID: {saved.id}")
    return saved


def update_expense(db: Session, caller: User, expense_in: schemas.ExpenseUpdate,
                   enforce_ownership: bool = True) -> models.Expense:
    errors = validate_expense(expense_in)
    if expense_in.id is None:
        errors.setdefault("id", []).append("Expense id is required")
    if errors:
        raise ExpenseValidationError(errors)

    expense = _load_for_mutation(db, caller, expense_in.id, "update", enforce_ownership)

    expense.expense = expense_in.expense
    expense.expense_type = expense_in.expense_type
    expense.expense_amount = expense_in.expense_amount
    expense.payment_method = expense_in.payment_method
    if expense_in.date is not None:
        expense.date = expense_in.date

    # Whatever owner the payload named, the caller keeps the record
    expense.user_id = caller.id

    with _store_errors(db, "update expense", caller):
        saved = crud.save(db, expense)

    logger.debug(f"Successfully updated expense with ID: {saved.id}")
    return saved


def delete_expense(db: Session, caller: User, expense_id: int,
                   enforce_ownership: bool = True) -> str:
    expense = _load_for_mutation(db, caller, expense_id, "delete", enforce_ownership)

    with _store_errors(db, "delete expense", caller):
        crud.delete(db, expense)

    logger.debug(f"Successfully deleted expense with ID: {expense_id}")
    return f"Expense with ID {expense_id} deleted successfully"


# =========================
# Startup migration
# =========================
def assign_orphaned_expenses(db: Session) -> int:
    """Give expenses that predate ownership to the first registered user."""
    first_user = user_crud.get_first_user(db)
    if first_user is None:
        logger.warning("No users found in database. Orphaned expenses left unassigned.")
        return 0

    updated = crud.assign_orphans(db, first_user.id)
    if updated:
        logger.info(f"Migration completed! Updated {updated} expenses to belong to user: {first_user.username}")
    else:
        logger.info("No migration needed - all expenses already have user assignments.")
    return updated
