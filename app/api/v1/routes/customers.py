# app/api/v1/routes/customers.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.customer import CustomerCreate, CustomerRead
from app.utils import accounts as directory
from app.core.database import get_async_session

router = APIRouter(prefix="/customers", tags=["customers"])

@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer(customer_in: CustomerCreate, db: AsyncSession = Depends(get_async_session)):
    """Link a PARENT account to a CHILD account."""
    return await directory.create_customer(customer_in, db)

@router.get("/{customer_id}", response_model=CustomerRead)
async def read_customer(customer_id: str, db: AsyncSession = Depends(get_async_session)):
    customer = await directory.find_customer(customer_id, db)
    if not customer:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer

@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: str, db: AsyncSession = Depends(get_async_session)):
    await directory.remove_customer(customer_id, db)
    return None
