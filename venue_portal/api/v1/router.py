"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from venue_portal.api.v1 import admin, bookings, notifications, venues

api_router = APIRouter()

# Venues and clubs
api_router.include_router(venues.router, tags=["Venues"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Admin
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])

# Notifications
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
