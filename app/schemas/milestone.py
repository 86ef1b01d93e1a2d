# app/schemas/milestone.py
from typing import Optional
from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
import uuid
from app.models.milestone import MilestoneStatus

class MilestoneCreate(BaseModel):
    # Everything is optional here so the engine can report which rule failed
    user_id: Optional[uuid.UUID] = Field(None, description="Owning account")
    name: Optional[str] = Field(None, description="Milestone name, e.g. New Bike")
    target_amount: Optional[Decimal] = Field(None, description="Amount to reach")
    start_date: Optional[date] = None
    saved_amount: Optional[Decimal] = Field(None, description="Initial saved amount, defaults to 0")

class ContributionRequest(BaseModel):
    added_amount: Optional[Decimal] = Field(None, description="Amount to add to the saved total")

class MilestoneRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    target_amount: Decimal
    saved_amount: Decimal
    start_date: date
    completion_date: Optional[date] = None
    status: MilestoneStatus

    class Config:
        from_attributes = True

class MilestoneProgress(BaseModel):
    milestone_id: uuid.UUID
    target_amount: Decimal
    saved_amount: Decimal
    remaining_amount: Decimal
    progress_percentage: Decimal
    status: MilestoneStatus
