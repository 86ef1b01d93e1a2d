# app/models/savings.py
import uuid
from sqlalchemy import Column, Numeric, Date, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.account import Account

class Savings(Base):
    __tablename__ = "savings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    # Plain reference: ledger entries outlive their milestone and vice versa
    milestone_id = Column(Uuid, nullable=False, index=True)

    owner = relationship(Account, lazy="joined")

    def __repr__(self):
        return f"<Savings amount={self.amount} date={self.date} milestone_id={self.milestone_id}>"
