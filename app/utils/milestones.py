# app/utils/milestones.py
"""
Milestone engine: creation rules, contribution accumulation and completion.

Every mutation goes through here. The contribution path is the only code
that moves ``saved_amount`` and, apart from manual completion, the only code
that flips a milestone to ``completed``.
"""
import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db_utils import storage_errors, with_db_retry
from app.core.errors import (
    AlreadyCompleted,
    ConcurrentUpdate,
    InvalidAmount,
    InvalidName,
    InvalidOwner,
    InvalidStartDate,
    InvalidTargetAmount,
    MilestoneNotFound,
)
from app.crud import account as account_crud
from app.crud import milestone as milestone_crud
from app.models.milestone import Milestone, MilestoneStatus
from app.schemas.milestone import MilestoneCreate, MilestoneProgress
from app.utils.parsing import (
    is_positive_money,
    is_valid_money,
    parse_date,
    parse_status,
    parse_uuid,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def today() -> date:
    return date.today()


# ────────────────────────────────────────────────────────────────────────────────
# CREATION
# ────────────────────────────────────────────────────────────────────────────────
async def create_milestone(milestone_in: MilestoneCreate, db: AsyncSession) -> Milestone:
    """
    Validate and persist a new milestone in ``active`` status.

    Rules are checked in a fixed order so the reported error is deterministic:
    owner, name, target amount, start date, then the optional initial saved
    amount.
    """
    async with storage_errors(db, "milestone creation"):
        owner_id = await _validate_owner(milestone_in.user_id, db)
    name = _validate_name(milestone_in.name)
    _validate_target_amount(milestone_in.target_amount)
    _validate_start_date(milestone_in.start_date)

    saved_amount = milestone_in.saved_amount
    if saved_amount is None:
        saved_amount = ZERO
    elif not is_valid_money(saved_amount):
        raise InvalidAmount("Initial saved amount must be a non-negative amount with at most two decimals.")
    elif saved_amount >= milestone_in.target_amount:
        raise InvalidAmount(
            "Initial saved amount must be below the target amount: this service does not "
            "create milestones that are already complete. Reach the target with a contribution instead."
        )

    milestone = Milestone(
        user_id=owner_id,
        name=name,
        target_amount=milestone_in.target_amount,
        saved_amount=saved_amount,
        start_date=milestone_in.start_date,
        completion_date=None,
        status=MilestoneStatus.active,
    )
    async with storage_errors(db, "milestone creation"):
        milestone = await milestone_crud.create_milestone(milestone, db)

    logger.info(f"Milestone {milestone.id} created for account {owner_id} with target {milestone.target_amount}")
    return milestone


async def _validate_owner(user_id: Optional[uuid.UUID], db: AsyncSession) -> uuid.UUID:
    if user_id is None:
        raise InvalidOwner("Invalid user: User account is required.")
    account = await account_crud.get_account_by_id(user_id, db)
    if account is None:
        raise InvalidOwner(f"User not found for ID: {user_id}")
    return account.id


def _validate_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise InvalidName("Milestone name cannot be empty.")
    return name.strip()


def _validate_target_amount(target_amount: Optional[Decimal]) -> None:
    if not is_positive_money(target_amount):
        raise InvalidTargetAmount("Target amount must be greater than zero.")


def _validate_start_date(start_date: Optional[date]) -> None:
    if start_date is None:
        raise InvalidStartDate("Start date cannot be null.")
    if start_date > today():
        raise InvalidStartDate("Start date cannot be in the future.")


# ────────────────────────────────────────────────────────────────────────────────
# CONTRIBUTIONS
# ────────────────────────────────────────────────────────────────────────────────
@with_db_retry(
    max_retries=settings.CONTRIBUTION_MAX_RETRIES,
    retry_delay=settings.CONTRIBUTION_RETRY_DELAY,
    retry_on=(ConcurrentUpdate,),
)
async def update_saved_amount_and_check_completion(
    milestone_id: uuid.UUID,
    added_amount: Optional[Decimal],
    db: AsyncSession,
) -> Milestone:
    """
    Add ``added_amount`` to the milestone and complete it when the target is
    reached.

    All-or-nothing: a rejected contribution leaves the row untouched. The
    read-modify-write runs under a row lock where the backend has one, and
    the row version makes a concurrent writer's flush fail with a conflict,
    in which case the whole step is retried against fresh data.
    """
    if not is_positive_money(added_amount):
        raise InvalidAmount("The added amount must be greater than zero.")

    async with storage_errors(db, "contribution"):
        milestone = await milestone_crud.get_milestone_for_update(milestone_id, db)
        if milestone is None:
            await db.rollback()
            raise MilestoneNotFound(f"Milestone not found for id: {milestone_id}")

        target_amount = milestone.target_amount
        new_saved_amount = milestone.saved_amount + added_amount
        if new_saved_amount > target_amount:
            await db.rollback()
            logger.info(
                f"Rejected contribution of {added_amount} to milestone {milestone_id}: "
                f"{new_saved_amount} would exceed target {target_amount}"
            )
            raise InvalidAmount("The added amount exceeds the target amount.")

        milestone.saved_amount = new_saved_amount
        if new_saved_amount >= target_amount:
            milestone.status = MilestoneStatus.completed
            milestone.completion_date = today()

        milestone = await milestone_crud.update_milestone(milestone, db)

    logger.info(f"Milestone {milestone_id} saved amount is now {milestone.saved_amount}/{milestone.target_amount}")
    if milestone.is_completed:
        logger.info(f"Milestone {milestone_id} completed on {milestone.completion_date}")
    return milestone


@with_db_retry(
    max_retries=settings.CONTRIBUTION_MAX_RETRIES,
    retry_delay=settings.CONTRIBUTION_RETRY_DELAY,
    retry_on=(ConcurrentUpdate,),
)
async def mark_milestone_as_completed(milestone_id: uuid.UUID, db: AsyncSession) -> Milestone:
    """
    Force a milestone to ``completed`` regardless of its saved amount.

    This is an override: the milestone may end up completed with
    ``saved_amount < target_amount``.
    """
    async with storage_errors(db, "manual completion"):
        milestone = await milestone_crud.get_milestone_for_update(milestone_id, db)
        if milestone is None:
            await db.rollback()
            raise MilestoneNotFound(f"Milestone not found for ID: {milestone_id}")
        if milestone.is_completed:
            await db.rollback()
            raise AlreadyCompleted("Milestone is already marked as completed.")

        milestone.status = MilestoneStatus.completed
        milestone.completion_date = today()
        milestone = await milestone_crud.update_milestone(milestone, db)

    logger.info(
        f"Milestone {milestone_id} manually completed at {milestone.saved_amount}/{milestone.target_amount}"
    )
    return milestone


def calculate_progress(milestone: Milestone) -> MilestoneProgress:
    remaining = max(ZERO, milestone.target_amount - milestone.saved_amount)
    percentage = (milestone.saved_amount / milestone.target_amount * HUNDRED).quantize(Decimal("0.01"))
    return MilestoneProgress(
        milestone_id=milestone.id,
        target_amount=milestone.target_amount,
        saved_amount=milestone.saved_amount,
        remaining_amount=remaining,
        progress_percentage=percentage,
        status=milestone.status,
    )


# ────────────────────────────────────────────────────────────────────────────────
# QUERIES
# ────────────────────────────────────────────────────────────────────────────────
async def find_milestone(milestone_id: Any, db: AsyncSession) -> Optional[Milestone]:
    milestone_id = parse_uuid(milestone_id, "milestone id")
    async with storage_errors(db, "milestone lookup"):
        return await milestone_crud.get_milestone_by_id(milestone_id, db)


async def find_milestone_by_name(name: str, db: AsyncSession) -> Optional[Milestone]:
    async with storage_errors(db, "milestone lookup by name"):
        return await milestone_crud.get_milestone_by_name(name, db)


async def find_milestones_by_start_date(start_date: Any, db: AsyncSession) -> List[Milestone]:
    start_date = parse_date(start_date, "start date")
    async with storage_errors(db, "milestone lookup by start date"):
        return await milestone_crud.get_milestones_by_start_date(start_date, db)


async def find_milestones_by_completion_date(completion_date: Any, db: AsyncSession) -> List[Milestone]:
    completion_date = parse_date(completion_date, "completion date")
    async with storage_errors(db, "milestone lookup by completion date"):
        return await milestone_crud.get_milestones_by_completion_date(completion_date, db)


async def find_milestones_by_status(status: Any, db: AsyncSession) -> List[Milestone]:
    status = parse_status(status)
    async with storage_errors(db, "milestone lookup by status"):
        return await milestone_crud.get_milestones_by_status(status, db)


async def find_milestones_for_user(user_id: Any, db: AsyncSession) -> List[Milestone]:
    user_id = parse_uuid(user_id, "account id")
    async with storage_errors(db, "milestone lookup by account"):
        if await account_crud.get_account_by_id(user_id, db) is None:
            raise InvalidOwner("Invalid Account Provided")
        return await milestone_crud.get_milestones_for_user(user_id, db)


async def remove_milestone(milestone_id: Any, db: AsyncSession) -> bool:
    milestone_id = parse_uuid(milestone_id, "milestone id")
    async with storage_errors(db, "milestone deletion"):
        deleted = await milestone_crud.delete_milestone(milestone_id, db)
    if deleted:
        logger.info(f"Milestone {milestone_id} deleted")
    return deleted
