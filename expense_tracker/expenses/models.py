from datetime import date

from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship

from expense_tracker.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    expense = Column(String(100), nullable=False)
    expense_type = Column(String(50), nullable=False)
    expense_amount = Column(String(20), nullable=False)
    payment_method = Column(String(255), nullable=True)
    date = Column(Date, nullable=False, default=date.today, index=True)

    # Nullable only for rows written before ownership was enforced
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    user = relationship("User", back_populates="expenses")

    def __repr__(self):
        return f"<Expense id={self.id} expense={self.expense!r} date={self.date}>"
