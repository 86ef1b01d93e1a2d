# app/api/v1/routes/accounts.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.account import AccountCreate, AccountRead, AccountUpdate, LoginRequest, Token
from app.utils import accounts as directory
from app.core.database import get_async_session
from app.api.deps import get_current_account
from app.models.account import Account

router = APIRouter(prefix="/accounts", tags=["accounts"])

@router.post("", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
async def create_account(account_in: AccountCreate, db: AsyncSession = Depends(get_async_session)):
    """Register an account. Parents may pass **child_id** to link an existing child account."""
    return await directory.create_account(account_in, db)

@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_async_session)):
    return await directory.authenticate(credentials.email, credentials.password, db)

@router.get("/me", response_model=AccountRead)
async def read_own_account(account: Account = Depends(get_current_account)):
    """Get the account behind the bearer token"""
    return account

@router.get("/{account_id}", response_model=AccountRead)
async def read_account(account_id: str, db: AsyncSession = Depends(get_async_session)):
    account = await directory.find_account(account_id, db)
    if not account:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Account not found")
    return account

@router.patch("/{account_id}", response_model=AccountRead)
async def update_account(account_id: str, account_in: AccountUpdate, db: AsyncSession = Depends(get_async_session)):
    account = await directory.update_account(account_id, account_in, db)
    if not account:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Account not found")
    return account

@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(account_id: str, db: AsyncSession = Depends(get_async_session)):
    await directory.remove_account(account_id, db)
    return None
