"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from dispatch_desk.api.v1 import bookings, statuses

api_router = APIRouter()

# Statuses
api_router.include_router(statuses.router, prefix="/statuses", tags=["Statuses"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
