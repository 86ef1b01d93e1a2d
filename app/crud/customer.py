# app/crud/customer.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from app.models.customer import Customer
from typing import List, Optional
import uuid

async def get_customer_by_id(customer_id: uuid.UUID, db: AsyncSession) -> Optional[Customer]:
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    return result.scalar_one_or_none()

async def get_customers_for_parent(parent_id: uuid.UUID, db: AsyncSession) -> List[Customer]:
    result = await db.execute(select(Customer).where(Customer.parent_id == parent_id))
    return result.scalars().all()

async def create_customer(customer: Customer, db: AsyncSession) -> Customer:
    """Stage a customer link; the caller owns the commit."""
    db.add(customer)
    await db.flush()
    return customer

async def delete_customer(customer_id: uuid.UUID, db: AsyncSession) -> bool:
    result = await db.execute(delete(Customer).where(Customer.id == customer_id))
    await db.commit()
    return result.rowcount > 0
