# app/crud/milestone.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from app.models.milestone import Milestone, MilestoneStatus
from typing import List, Optional
from datetime import date
import uuid

async def get_milestone_by_id(milestone_id: uuid.UUID, db: AsyncSession) -> Optional[Milestone]:
    result = await db.execute(select(Milestone).where(Milestone.id == milestone_id))
    return result.unique().scalar_one_or_none()

async def get_milestone_for_update(milestone_id: uuid.UUID, db: AsyncSession) -> Optional[Milestone]:
    """
    Load a milestone for a read-modify-write. Takes a row lock where the
    backend supports it and always reloads the row so a retried attempt sees
    the latest saved amount and version.
    """
    result = await db.execute(
        select(Milestone)
        .where(Milestone.id == milestone_id)
        .with_for_update(of=Milestone)
        .execution_options(populate_existing=True)
    )
    return result.unique().scalar_one_or_none()

async def get_milestone_by_name(name: str, db: AsyncSession) -> Optional[Milestone]:
    """Names are not unique; returns the first match."""
    result = await db.execute(
        select(Milestone).where(Milestone.name == name).order_by(Milestone.start_date, Milestone.id).limit(1)
    )
    return result.unique().scalars().first()

async def get_milestones_by_start_date(start_date: date, db: AsyncSession) -> List[Milestone]:
    result = await db.execute(select(Milestone).where(Milestone.start_date == start_date))
    return result.unique().scalars().all()

async def get_milestones_by_completion_date(completion_date: date, db: AsyncSession) -> List[Milestone]:
    result = await db.execute(select(Milestone).where(Milestone.completion_date == completion_date))
    return result.unique().scalars().all()

async def get_milestones_by_status(status: MilestoneStatus, db: AsyncSession) -> List[Milestone]:
    result = await db.execute(select(Milestone).where(Milestone.status == status))
    return result.unique().scalars().all()

async def get_milestones_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Milestone]:
    result = await db.execute(select(Milestone).where(Milestone.user_id == user_id))
    return result.unique().scalars().all()

async def create_milestone(milestone: Milestone, db: AsyncSession) -> Milestone:
    db.add(milestone)
    await db.commit()
    await db.refresh(milestone)
    return milestone

async def update_milestone(milestone: Milestone, db: AsyncSession) -> Milestone:
    db.add(milestone)
    await db.commit()
    await db.refresh(milestone)
    return milestone

async def delete_milestone(milestone_id: uuid.UUID, db: AsyncSession) -> bool:
    """Delete by id. Savings entries pointing at the milestone are left alone."""
    result = await db.execute(delete(Milestone).where(Milestone.id == milestone_id))
    await db.commit()
    return result.rowcount > 0
