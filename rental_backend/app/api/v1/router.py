"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from rental_backend.app.api.v1.endpoints import bikes

router = APIRouter()

# Pricing & availability endpoints
router.include_router(bikes.router)
