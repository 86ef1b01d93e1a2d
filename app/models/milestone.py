# app/models/milestone.py
import uuid
import enum
from decimal import Decimal
from sqlalchemy import Column, String, Numeric, Date, Enum, ForeignKey, Integer, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.account import Account

class MilestoneStatus(str, enum.Enum):
    active = "active"
    completed = "completed"

class Milestone(Base):
    __tablename__ = "milestones"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False, index=True)
    target_amount = Column(Numeric(10, 2), nullable=False)
    # Only the contribution engine moves this forward
    saved_amount = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    start_date = Column(Date, nullable=False, index=True)
    completion_date = Column(Date, nullable=True, index=True)
    status = Column(
        Enum(MilestoneStatus, name="milestone_status"),
        nullable=False,
        default=MilestoneStatus.active,
        index=True,
    )
    # Row version, bumped on every UPDATE; a stale version fails the flush
    version = Column(Integer, nullable=False)

    owner = relationship(Account, lazy="joined")

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_completed(self) -> bool:
        return self.status == MilestoneStatus.completed

    def __repr__(self):
        return f"<Milestone name={self.name} saved={self.saved_amount}/{self.target_amount} status={self.status}>"
