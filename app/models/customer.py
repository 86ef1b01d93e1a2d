# app/models/customer.py
import uuid
from sqlalchemy import Column, ForeignKey, Uuid
from app.core.database import Base
from app.models.account import Account

class Customer(Base):
    """Links a guardian (parent) account to a dependent (child) account."""
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    parent_id = Column(Uuid, ForeignKey(Account.id, ondelete="CASCADE"), nullable=False)
    child_id = Column(Uuid, ForeignKey(Account.id, ondelete="CASCADE"), nullable=False)

    def __repr__(self):
        return f"<Customer parent_id={self.parent_id} child_id={self.child_id}>"
