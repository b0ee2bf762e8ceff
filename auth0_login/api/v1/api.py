"""
API v1 router that includes all endpoint routers.
"""

from fastapi import APIRouter

from auth0_login.api.v1.endpoints import auth0, users

api_router = APIRouter()

api_router.include_router(auth0.router, prefix="/auth0", tags=["auth0"])
api_router.include_router(users.router, prefix="/users", tags=["user"])
