"""
API routes.
"""

from fastapi import APIRouter

from fintech_index.api.v1 import auth, country_data, startups, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(country_data.router, prefix="/country-data", tags=["Country Data"])
router.include_router(startups.router, prefix="/startups", tags=["Startups"])
