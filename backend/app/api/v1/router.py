from fastapi import APIRouter
from backend.app.api.v1 import budgets

api_router = APIRouter()
api_router.include_router(budgets.router, prefix="/budgets", tags=["budgets"])
