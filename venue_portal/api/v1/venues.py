"""Reference data endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from venue_portal.api.deps import get_booking_store
from venue_portal.models.venue import Club, Venue
from venue_portal.schemas.venue import ClubResponse, VenueResponse
from venue_portal.services.booking_store import BookingStore

router = APIRouter()


@router.get("/venues", response_model=list[VenueResponse])
async def list_venues(
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> list[Venue]:
    """List bookable venues."""
    return await store.list_venues()


@router.get("/clubs", response_model=list[ClubResponse])
async def list_clubs(
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> list[Club]:
    """List clubs."""
    return await store.list_clubs()
