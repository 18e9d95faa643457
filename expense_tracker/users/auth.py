import base64
import binascii
from typing import Optional, Tuple

from fastapi import Depends
from fastapi.security import APIKeyHeader
from loguru import logger
from sqlalchemy.orm import Session

from expense_tracker.database import get_db
from expense_tracker.errors import Unauthorized
from expense_tracker.security.passwords import verify_password
from expense_tracker.users import crud as user_crud
from expense_tracker.users.models import User

# Read the raw header so credentials are decoded as UTF-8 and every
# malformed header gets our JSON 401 body
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def parse_basic_credentials(authorization: Optional[str]) -> Tuple[str, str]:
    if not authorization:
        raise Unauthorized()

    scheme, _, param = authorization.strip().partition(" ")
    if scheme.lower() != "basic" or not param.strip():
        raise Unauthorized()

    try:
        decoded = base64.b64decode(param.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise Unauthorized()

    username, separator, password = decoded.partition(":")
    if not separator:
        raise Unauthorized()
    return username, password


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = user_crud.get_user_by_username(db, username)
    if not user:
        return None
    if not verify_password(password, user.password):
        return None
    return user


def get_current_user(
    authorization: Optional[str] = Depends(authorization_header),
    db: Session = Depends(get_db),
) -> User:
    username, password = parse_basic_credentials(authorization)

    user = authenticate_user(db, username, password)
    if not user:
        logger.warning(f"Authentication denied for username: {username}")
        raise Unauthorized()
    return user
