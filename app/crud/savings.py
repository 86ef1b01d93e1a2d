# app/crud/savings.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from app.models.savings import Savings
from typing import List, Optional
from datetime import date
import uuid

async def get_savings_by_id(savings_id: uuid.UUID, db: AsyncSession) -> Optional[Savings]:
    result = await db.execute(select(Savings).where(Savings.id == savings_id))
    return result.unique().scalar_one_or_none()

async def get_savings_by_date(on_date: date, db: AsyncSession) -> List[Savings]:
    result = await db.execute(select(Savings).where(Savings.date == on_date))
    return result.unique().scalars().all()

async def get_savings_by_milestone_id(milestone_id: uuid.UUID, db: AsyncSession) -> Optional[Savings]:
    """A milestone may have many entries; returns the earliest one."""
    result = await db.execute(
        select(Savings).where(Savings.milestone_id == milestone_id).order_by(Savings.date, Savings.id).limit(1)
    )
    return result.unique().scalars().first()

async def get_savings_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Savings]:
    result = await db.execute(select(Savings).where(Savings.user_id == user_id))
    return result.unique().scalars().all()

async def create_savings(savings: Savings, db: AsyncSession) -> Savings:
    db.add(savings)
    await db.commit()
    await db.refresh(savings)
    return savings

async def delete_savings(savings_id: uuid.UUID, db: AsyncSession) -> bool:
    """Delete by id. The milestone's saved amount is not rolled back."""
    result = await db.execute(delete(Savings).where(Savings.id == savings_id))
    await db.commit()
    return result.rowcount > 0
