# app/schemas/savings.py
from typing import Optional
from pydantic import BaseModel, Field
import datetime
from decimal import Decimal
import uuid

class SavingsCreate(BaseModel):
    user_id: Optional[uuid.UUID] = None
    amount: Optional[Decimal] = Field(None, description="Contribution amount")
    milestone_id: Optional[str] = Field(None, description="Milestone the contribution belongs to")
    date: Optional[datetime.date] = None

class SavingsRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: Decimal
    date: datetime.date
    milestone_id: uuid.UUID

    class Config:
        from_attributes = True
