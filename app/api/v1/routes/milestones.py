# app/api/v1/routes/milestones.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.schemas.milestone import ContributionRequest, MilestoneCreate, MilestoneProgress, MilestoneRead
from app.utils import milestones as engine
from app.utils.parsing import parse_uuid
from app.core.database import get_async_session

router = APIRouter(prefix="/milestones", tags=["milestones"])

@router.post("", response_model=MilestoneRead, status_code=status.HTTP_201_CREATED)
async def create_milestone(
    milestone_in: MilestoneCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Create a savings milestone for an account.

    - **user_id**: owning account
    - **name**: non-blank name
    - **target_amount**: amount to reach, greater than zero
    - **start_date**: today or earlier
    - **saved_amount**: optional initial amount, defaults to 0
    """
    return await engine.create_milestone(milestone_in, db)

@router.get("/name/{name}", response_model=MilestoneRead)
async def read_milestone_by_name(name: str, db: AsyncSession = Depends(get_async_session)):
    milestone = await engine.find_milestone_by_name(name, db)
    if not milestone:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Milestone not found")
    return milestone

@router.get("/start-date/{start_date}", response_model=List[MilestoneRead])
async def read_milestones_by_start_date(start_date: str, db: AsyncSession = Depends(get_async_session)):
    return await engine.find_milestones_by_start_date(start_date, db)

@router.get("/completion-date/{completion_date}", response_model=List[MilestoneRead])
async def read_milestones_by_completion_date(completion_date: str, db: AsyncSession = Depends(get_async_session)):
    return await engine.find_milestones_by_completion_date(completion_date, db)

@router.get("/status/{milestone_status}", response_model=List[MilestoneRead])
async def read_milestones_by_status(milestone_status: str, db: AsyncSession = Depends(get_async_session)):
    return await engine.find_milestones_by_status(milestone_status, db)

@router.get("/user/{account_id}", response_model=List[MilestoneRead])
async def read_milestones_for_user(account_id: str, db: AsyncSession = Depends(get_async_session)):
    return await engine.find_milestones_for_user(account_id, db)

@router.get("/{milestone_id}", response_model=MilestoneRead)
async def read_milestone(milestone_id: str, db: AsyncSession = Depends(get_async_session)):
    milestone = await engine.find_milestone(milestone_id, db)
    if not milestone:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Milestone not found")
    return milestone

@router.get("/{milestone_id}/progress", response_model=MilestoneProgress)
async def read_milestone_progress(milestone_id: str, db: AsyncSession = Depends(get_async_session)):
    milestone = await engine.find_milestone(milestone_id, db)
    if not milestone:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Milestone not found")
    return engine.calculate_progress(milestone)

@router.patch("/{milestone_id}/saved-amount", response_model=MilestoneRead)
async def update_saved_amount(
    milestone_id: str,
    contribution: ContributionRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Add a contribution to the milestone's saved amount.

    Completes the milestone when the target is reached exactly; rejects
    contributions that would overshoot it and leaves the milestone unchanged.
    """
    return await engine.update_saved_amount_and_check_completion(
        parse_uuid(milestone_id, "milestone id"), contribution.added_amount, db
    )

@router.patch("/{milestone_id}/complete", response_model=MilestoneRead)
async def complete_milestone(milestone_id: str, db: AsyncSession = Depends(get_async_session)):
    """Mark a milestone as completed regardless of how much has been saved."""
    return await engine.mark_milestone_as_completed(parse_uuid(milestone_id, "milestone id"), db)

@router.delete("/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_milestone(milestone_id: str, db: AsyncSession = Depends(get_async_session)):
    await engine.remove_milestone(milestone_id, db)
    return None
