from typing import Optional

from sqlalchemy.orm import Session

from expense_tracker.users.models import User


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_first_user(db: Session) -> Optional[User]:
    return db.query(User).order_by(User.id).first()


def create_user(db: Session, username: str, hashed_password: str, role: str) -> User:
    new_user = User(
        username=username,
        password=hashed_password,
        role=role,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user
