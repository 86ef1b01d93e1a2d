# app/models/account.py
import uuid
import enum
from sqlalchemy import Column, String, Date, Enum, Uuid
from app.core.database import Base

class AccountRole(str, enum.Enum):
    CHILD = "CHILD"
    PARENT = "PARENT"
    ADMIN = "ADMIN"

class Account(Base):
    __tablename__ = "accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(length=100), nullable=False)
    last_name = Column(String(length=100), nullable=False)
    email = Column(String(length=255), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(AccountRole, name="account_role"), nullable=False, default=AccountRole.CHILD)
    # Set on parent accounts that were registered together with a child
    child_id = Column(Uuid, nullable=True)
    dob = Column(Date, nullable=False)

    created_at = Column(Date, nullable=False)

    def __repr__(self):
        return f"<Account email={self.email} role={self.role}>"
