from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.orm import Session

from expense_tracker.database import get_db
from expense_tracker.users import schemas, service
from expense_tracker.users.auth import get_current_user
from expense_tracker.users.models import User

router = APIRouter()


@router.post("/register", response_model=schemas.UserDisplaySchema)
def register(user: schemas.UserSchema, db: Session = Depends(get_db)):
    logger.info(f"Registration attempt for username: {user.username}")
    return service.register(db, user)


@router.post("/login", response_model=schemas.UserDisplaySchema)
def login(current_user: User = Depends(get_current_user)):
    # Credentials are checked by the dependency; nothing is issued
    logger.info(f"User authenticated: {current_user.username}")
    return current_user
