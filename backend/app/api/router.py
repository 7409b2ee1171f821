"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import auth, users, expenses, approvals, flows, ocr

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(expenses.router)
api_router.include_router(approvals.router)
api_router.include_router(flows.router)
api_router.include_router(ocr.router)
