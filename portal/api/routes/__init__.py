"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from portal.api.routes.user_routes import router as user_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(user_router)
