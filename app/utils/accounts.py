# app/utils/accounts.py
"""Account directory and parent/child customer links."""
import logging
import uuid
from datetime import timedelta
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db_utils import storage_errors
from app.core.errors import (
    DuplicateEmail,
    InvalidAccount,
    InvalidCredentials,
    InvalidRelationship,
    NotFound,
)
from app.core.security import create_access_token, get_password_hash, verify_password
from app.crud import account as account_crud
from app.crud import customer as customer_crud
from app.models.account import Account, AccountRole
from app.models.customer import Customer
from app.schemas.account import AccountCreate, AccountRead, AccountUpdate, Token
from app.schemas.customer import CustomerCreate
from app.utils.milestones import today
from app.utils.parsing import parse_uuid

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


# ────────────────────────────────────────────────────────────────────────────────
# ACCOUNTS
# ────────────────────────────────────────────────────────────────────────────────
def _require(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise InvalidAccount(f"{label} is required")
    return value.strip()


async def create_account(account_in: AccountCreate, db: AsyncSession) -> Account:
    """
    Register a new account. A parent registered with ``child_id`` is linked
    to that child in the same transaction; if the link is rejected, so is
    the account.
    """
    first_name = _require(account_in.first_name, "First Name")
    last_name = _require(account_in.last_name, "Last Name")
    email = _require(account_in.email, "Email")
    if account_in.password is None or not account_in.password:
        raise InvalidAccount("Password is required")
    if len(account_in.password) < MIN_PASSWORD_LENGTH:
        raise InvalidAccount(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if account_in.dob is None:
        raise InvalidAccount("DOB is required")

    async with storage_errors(db, "account creation"):
        if await account_crud.get_account_by_email(email, db) is not None:
            raise DuplicateEmail("An account with this email already exists")

        account = Account(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=get_password_hash(account_in.password),
            role=account_in.role,
            child_id=account_in.child_id,
            dob=account_in.dob,
            created_at=today(),
        )
        try:
            account = await account_crud.create_account(account, db)
            if account_in.child_id is not None:
                await _link_parent_and_child(account.id, account_in.child_id, db)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise DuplicateEmail("Failed to create account due to data integrity issues")
        except InvalidRelationship:
            await db.rollback()
            raise
        await db.refresh(account)

    logger.info(f"Account {account.id} created with role {account.role.value}")
    return account


async def find_account(account_id: Any, db: AsyncSession) -> Optional[Account]:
    account_id = parse_uuid(account_id, "account id")
    async with storage_errors(db, "account lookup"):
        return await account_crud.get_account_by_id(account_id, db)


async def update_account(account_id: Any, account_in: AccountUpdate, db: AsyncSession) -> Optional[Account]:
    """Apply only the fields that actually changed. Returns None if the account is missing."""
    account_id = parse_uuid(account_id, "account id")
    async with storage_errors(db, "account update"):
        account = await account_crud.get_account_by_id(account_id, db)
        if account is None:
            return None

        changes = account_in.dict(exclude_unset=True)
        has_changes = False
        for field in ("first_name", "last_name", "email"):
            if field in changes:
                value = _require(changes[field], field.replace("_", " ").title())
                if value != getattr(account, field):
                    setattr(account, field, value)
                    has_changes = True

        password = changes.get("password")
        if password is not None and not verify_password(password, account.password_hash):
            if len(password) < MIN_PASSWORD_LENGTH:
                raise InvalidAccount(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
            account.password_hash = get_password_hash(password)
            has_changes = True

        if "child_id" in changes and changes["child_id"] != account.child_id:
            account.child_id = changes["child_id"]
            has_changes = True

        if has_changes:
            try:
                account = await account_crud.save_account(account, db)
            except IntegrityError:
                await db.rollback()
                raise DuplicateEmail("An account with this email already exists")
            logger.info(f"Account {account_id} updated")

    return account


async def remove_account(account_id: Any, db: AsyncSession) -> bool:
    account_id = parse_uuid(account_id, "account id")
    async with storage_errors(db, "account deletion"):
        return await account_crud.delete_account(account_id, db)


async def authenticate(email: str, password: str, db: AsyncSession) -> Token:
    async with storage_errors(db, "login"):
        account = await account_crud.get_account_by_email(email, db)
    if account is None:
        raise NotFound("No account registered with this email")
    if not verify_password(password, account.password_hash):
        raise InvalidCredentials("Incorrect password")

    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return Token(
        access_token=create_access_token(str(account.id), expires),
        token_type="bearer",
        expires_in=int(expires.total_seconds()),
        account=AccountRead.model_validate(account),
    )


# ────────────────────────────────────────────────────────────────────────────────
# CUSTOMERS (parent/child links)
# ────────────────────────────────────────────────────────────────────────────────
async def _link_parent_and_child(parent_id: uuid.UUID, child_id: uuid.UUID, db: AsyncSession) -> Customer:
    parent = await account_crud.get_account_by_id(parent_id, db)
    if parent is None:
        raise InvalidRelationship("Parent account not found.")
    child = await account_crud.get_account_by_id(child_id, db)
    if child is None:
        raise InvalidRelationship("Child account not found.")
    if parent.role != AccountRole.PARENT:
        raise InvalidRelationship("The parent account must have the 'PARENT' role.")
    if child.role != AccountRole.CHILD:
        raise InvalidRelationship("The child account must have the 'CHILD' role.")
    return await customer_crud.create_customer(Customer(parent_id=parent_id, child_id=child_id), db)


async def create_customer(customer_in: CustomerCreate, db: AsyncSession) -> Customer:
    if customer_in.parent_id is None or customer_in.child_id is None:
        raise InvalidRelationship("Both parent and child accounts must be provided.")
    async with storage_errors(db, "customer creation"):
        try:
            customer = await _link_parent_and_child(customer_in.parent_id, customer_in.child_id, db)
        except InvalidRelationship:
            await db.rollback()
            raise
        await db.commit()
        await db.refresh(customer)
    logger.info(f"Customer {customer.id} links parent {customer.parent_id} to child {customer.child_id}")
    return customer


async def find_customer(customer_id: Any, db: AsyncSession) -> Optional[Customer]:
    customer_id = parse_uuid(customer_id, "customer id")
    async with storage_errors(db, "customer lookup"):
        return await customer_crud.get_customer_by_id(customer_id, db)


async def remove_customer(customer_id: Any, db: AsyncSession) -> bool:
    customer_id = parse_uuid(customer_id, "customer id")
    async with storage_errors(db, "customer deletion"):
        return await customer_crud.delete_customer(customer_id, db)
