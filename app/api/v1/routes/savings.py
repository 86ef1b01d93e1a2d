# app/api/v1/routes/savings.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.schemas.savings import SavingsCreate, SavingsRead
from app.utils import savings as ledger
from app.core.database import get_async_session

router = APIRouter(prefix="/savings", tags=["savings"])

@router.post("", response_model=SavingsRead, status_code=status.HTTP_201_CREATED)
async def create_savings(savings_in: SavingsCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Record a contribution in the savings ledger.

    This does not change the milestone; apply the amount with
    PATCH /milestones/{milestone_id}/saved-amount.
    """
    return await ledger.create_savings(savings_in, db)

@router.get("/date/{on_date}", response_model=List[SavingsRead])
async def read_savings_by_date(on_date: str, db: AsyncSession = Depends(get_async_session)):
    return await ledger.find_savings_by_date(on_date, db)

@router.get("/milestone/{milestone_id}", response_model=SavingsRead)
async def read_savings_by_milestone(milestone_id: str, db: AsyncSession = Depends(get_async_session)):
    savings = await ledger.find_savings_by_milestone_id(milestone_id, db)
    if not savings:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Savings not found")
    return savings

@router.get("/user/{account_id}", response_model=List[SavingsRead])
async def read_savings_for_user(account_id: str, db: AsyncSession = Depends(get_async_session)):
    return await ledger.find_savings_for_user(account_id, db)

@router.get("/{savings_id}", response_model=SavingsRead)
async def read_savings(savings_id: str, db: AsyncSession = Depends(get_async_session)):
    savings = await ledger.find_savings(savings_id, db)
    if not savings:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Savings not found")
    return savings

@router.delete("/{savings_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_savings(savings_id: str, db: AsyncSession = Depends(get_async_session)):
    await ledger.remove_savings(savings_id, db)
    return None
