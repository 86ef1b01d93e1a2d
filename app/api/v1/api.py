from fastapi import APIRouter

from app.api.v1.routes import accounts, customers, milestones, savings

api_router = APIRouter()

api_router.include_router(accounts.router)
api_router.include_router(customers.router)
api_router.include_router(milestones.router)
api_router.include_router(savings.router)
