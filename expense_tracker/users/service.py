from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from expense_tracker.errors import Conflict, InternalError
from expense_tracker.security.passwords import hash_password
from expense_tracker.users import crud as user_crud
from expense_tracker.users import schemas
from expense_tracker.users.models import User

DEFAULT_ROLE = "USER"

DEFAULT_ACCOUNTS = (
    ("admin", "admin", "ADMIN"),
    ("test", "test", "USER"),
)


def register(db: Session, candidate: schemas.UserSchema) -> User:
    """Create a user with a hashed password.

    The username pre-check gives the common case a clean ``Conflict``; the
    unique constraint on ``users.username`` catches the race where two
    registrations for the same name pass the pre-check together.
    """
    if user_crud.get_user_by_username(db, candidate.username):
        logger.warning(f"Registration failed - username already exists: {candidate.username}")
        raise Conflict("Username already exists")

    role = candidate.role.strip() if candidate.role and candidate.role.strip() else DEFAULT_ROLE

    try:
        user = user_crud.create_user(db, candidate.username, hash_password(candidate.password), role)
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Registration lost a race for username: {candidate.username} ({exc.orig})")
        raise Conflict("Username already exists") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.opt(exception=exc).error(f"Registration failed for username: {candidate.username}")
        raise InternalError("Registration failed") from exc

    logger.info(f"User registered successfully: {user.username}")
    return user


def seed_default_users(db: Session) -> int:
    created = 0
    for username, password, role in DEFAULT_ACCOUNTS:
        if user_crud.get_user_by_username(db, username):
            continue
        user_crud.create_user(db, username, hash_password(password), role)
        logger.info(f"Created default user: {username} ({role})")
        created += 1
    return created
