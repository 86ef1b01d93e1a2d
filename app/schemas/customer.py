# app/schemas/customer.py
from typing import Optional
from pydantic import BaseModel
import uuid

class CustomerCreate(BaseModel):
    parent_id: Optional[uuid.UUID] = None
    child_id: Optional[uuid.UUID] = None

class CustomerRead(BaseModel):
    id: uuid.UUID
    parent_id: uuid.UUID
    child_id: uuid.UUID

    class Config:
        from_attributes = True
