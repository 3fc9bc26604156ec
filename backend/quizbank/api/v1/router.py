"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from quizbank.api.v1.endpoints import admin_import, admin_questions, health, quiz_sessions

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(admin_questions.router)
api_router.include_router(admin_import.router)
api_router.include_router(quiz_sessions.router)
