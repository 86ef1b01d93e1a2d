# app/crud/account.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, func
from app.models.account import Account
from typing import Optional
import uuid

async def get_account_by_id(account_id: uuid.UUID, db: AsyncSession) -> Optional[Account]:
    result = await db.execute(select(Account).where(Account.id == account_id))
    return result.scalar_one_or_none()

async def get_account_by_email(email: str, db: AsyncSession) -> Optional[Account]:
    """Case-insensitive lookup of an account by email."""
    result = await db.execute(
        select(Account).where(func.lower(Account.email) == func.lower(email))
    )
    return result.scalars().first()

async def create_account(account: Account, db: AsyncSession) -> Account:
    db.add(account)
    await db.flush()
    return account

async def save_account(account: Account, db: AsyncSession) -> Account:
    db.add(account)
    await db.commit()
    await db.refresh(account)
    return account

async def delete_account(account_id: uuid.UUID, db: AsyncSession) -> bool:
    result = await db.execute(delete(Account).where(Account.id == account_id))
    await db.commit()
    return result.rowcount > 0
