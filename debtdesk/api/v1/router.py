"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from debtdesk.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from debtdesk.api.v1.endpoints import access, auth, health, role_grants

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(access.router, prefix="/access", tags=["access"])
api_router.include_router(role_grants.router, tags=["role-grants"])
