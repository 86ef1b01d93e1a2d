# app/schemas/account.py
from typing import Optional
from datetime import date
from pydantic import BaseModel
import uuid
from app.models.account import AccountRole

# Fields accepted on POST /accounts
class AccountCreate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: AccountRole = AccountRole.CHILD
    child_id: Optional[uuid.UUID] = None
    dob: Optional[date] = None

# Fields accepted on PATCH /accounts/{id}
class AccountUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    child_id: Optional[uuid.UUID] = None

class AccountRead(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    role: AccountRole
    child_id: Optional[uuid.UUID] = None
    dob: date
    created_at: date

    class Config:
        from_attributes = True

class LoginRequest(BaseModel):
    email: str
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str
    expires_in: int
    account: AccountRead
