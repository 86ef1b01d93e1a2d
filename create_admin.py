#!/usr/bin/env python3
"""
Standalone script to create an ADMIN account for the Savings Milestones API
Usage: python create_admin.py
"""

import asyncio
from datetime import date
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from app.core.config import settings
from app.core.errors import SavingsAppError
from app.models.account import AccountRole
from app.schemas.account import AccountCreate
from app.utils.accounts import create_account

async def create_admin():
    print("Creating admin account...")

    # Get user input
    email = input("Enter admin email: ") or "admin@example.com"
    password = input("Enter admin password: ") or "admin123"
    first_name = input("Enter first name: ") or "System"
    last_name = input("Enter last name: ") or "Administrator"
    dob = input("Enter date of birth (YYYY-MM-DD): ") or "1990-01-01"

    engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    async_session_maker = async_sessionmaker(engine, expire_on_commit=False)

    async with async_session_maker() as session:
        try:
            admin = await create_account(
                AccountCreate(
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    password=password,
                    role=AccountRole.ADMIN,
                    dob=date.fromisoformat(dob),
                ),
                session,
            )
            print(f"✅ Admin account created successfully!")
            print(f"📧 Email: {admin.email}")
            print(f"👤 Name: {admin.first_name} {admin.last_name}")
            print(f"🔑 ID: {admin.id}")

        except SavingsAppError as e:
            print(f"❌ Error creating admin account: {e.message}")
        finally:
            await session.close()
            await engine.dispose()

if __name__ == "__main__":
    asyncio.run(create_admin())
