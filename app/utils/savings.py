# app/utils/savings.py
"""
Savings ledger rules. Recording an entry does not touch the milestone: the
caller applies the contribution separately through the milestone engine.
"""
import logging
from datetime import date
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db_utils import storage_errors
from app.core.errors import InvalidAmount, InvalidArgument, InvalidDate, InvalidOwner
from app.crud import account as account_crud
from app.crud import savings as savings_crud
from app.models.savings import Savings
from app.schemas.savings import SavingsCreate
from app.utils.milestones import today
from app.utils.parsing import is_positive_money, parse_date, parse_uuid

logger = logging.getLogger(__name__)


async def create_savings(savings_in: SavingsCreate, db: AsyncSession) -> Savings:
    """Validate owner, amount, milestone id and date, then record the entry."""
    if savings_in.user_id is None:
        raise InvalidOwner("Invalid user: User account is required.")
    async with storage_errors(db, "savings creation"):
        account = await account_crud.get_account_by_id(savings_in.user_id, db)
    if account is None:
        raise InvalidOwner(f"User not found for ID: {savings_in.user_id}")

    if not is_positive_money(savings_in.amount):
        raise InvalidAmount("Amount must be greater than zero.")

    if savings_in.milestone_id is None or not savings_in.milestone_id.strip():
        raise InvalidArgument("Milestone Id cannot be empty.")
    milestone_id = parse_uuid(savings_in.milestone_id, "milestone id")

    _validate_date(savings_in.date)

    savings = Savings(
        user_id=account.id,
        amount=savings_in.amount,
        milestone_id=milestone_id,
        date=savings_in.date,
    )
    async with storage_errors(db, "savings creation"):
        savings = await savings_crud.create_savings(savings, db)

    logger.info(f"Savings {savings.id} of {savings.amount} recorded against milestone {milestone_id}")
    return savings


def _validate_date(on_date: Optional[date]) -> None:
    if on_date is None:
        raise InvalidDate("Date cannot be null.")
    if on_date > today():
        raise InvalidDate("Date cannot be in the future.")


async def find_savings(savings_id: Any, db: AsyncSession) -> Optional[Savings]:
    savings_id = parse_uuid(savings_id, "savings id")
    async with storage_errors(db, "savings lookup"):
        return await savings_crud.get_savings_by_id(savings_id, db)


async def find_savings_by_date(on_date: Any, db: AsyncSession) -> List[Savings]:
    on_date = parse_date(on_date)
    async with storage_errors(db, "savings lookup by date"):
        return await savings_crud.get_savings_by_date(on_date, db)


async def find_savings_by_milestone_id(milestone_id: Any, db: AsyncSession) -> Optional[Savings]:
    milestone_id = parse_uuid(milestone_id, "milestone id")
    async with storage_errors(db, "savings lookup by milestone"):
        return await savings_crud.get_savings_by_milestone_id(milestone_id, db)


async def find_savings_for_user(user_id: Any, db: AsyncSession) -> List[Savings]:
    user_id = parse_uuid(user_id, "account id")
    async with storage_errors(db, "savings lookup by account"):
        if await account_crud.get_account_by_id(user_id, db) is None:
            raise InvalidOwner("Invalid Account Provided")
        return await savings_crud.get_savings_for_user(user_id, db)


async def remove_savings(savings_id: Any, db: AsyncSession) -> bool:
    savings_id = parse_uuid(savings_id, "savings id")
    async with storage_errors(db, "savings deletion"):
        return await savings_crud.delete_savings(savings_id, db)
