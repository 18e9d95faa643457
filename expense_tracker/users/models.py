from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from expense_tracker.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    role = Column(String(50), nullable=False, default="USER")

    expenses = relationship("Expense", back_populates="user")
