from dataclasses import replace
from datetime import UTC, datetime
from typing import Annotated, Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
from fastapi import Header
from httpx import ASGITransport, AsyncClient

from venue_portal.api.deps import get_booking_service, get_booking_store, get_current_user
from venue_portal.config import settings
from venue_portal.core.exceptions import AuthenticationError, StoreError
from venue_portal.core.middleware import booking_limiter
from venue_portal.domain.booking_policy import intervals_overlap
from venue_portal.main import app
from venue_portal.models.booking import Booking
from venue_portal.models.user import Profile
from venue_portal.models.venue import Club, Venue
from venue_portal.services.booking_service import BookingService
from venue_portal.services.booking_store import BookingFilter

IST = ZoneInfo("Asia/Kolkata")

# Monday, 10:00 local
NOW = datetime(2026, 10, 19, 10, 0, tzinfo=IST)


def local(year: int, month: int, day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=IST)


class FakeStore:
    """In-memory BookingStore with the same filter semantics as the SQL one.

    Inserted rows stay staged until commit, so a failed submission leaves
    ``bookings`` untouched.
    """

    def __init__(self, venues: list[Venue], clubs: list[Club]) -> None:
        self.venues = {venue.id: venue for venue in venues}
        self.clubs = {club.id: club for club in clubs}
        self.bookings: list[Booking] = []
        self.staged: list[Booking] = []
        self.audit: list[dict[str, Any]] = []
        self.locked: list[list[UUID]] = []
        self.locked_clubs: list[UUID] = []
        self.commits = 0
        self.fail_on_insert: int | None = None

    # Reference data

    async def find_venues_by_ids(self, venue_ids):
        return [self.venues[venue_id] for venue_id in venue_ids if venue_id in self.venues]

    async def find_club_by_id(self, club_id):
        return self.clubs.get(club_id)

    async def list_venues(self):
        return sorted(self.venues.values(), key=lambda venue: venue.name)

    async def list_clubs(self):
        return sorted(self.clubs.values(), key=lambda club: club.name)

    # Bookings

    def add_booking(self, club: Club, venue: Venue, start: datetime, end: datetime, **fields) -> Booking:
        """Seed a committed booking."""
        defaults = {
            "event_name": "Existing event",
            "event_type": "closed_club",
            "status": "approved",
            "batch_id": uuid4(),
            "is_public": False,
        }
        defaults.update(fields)
        booking = Booking(
            id=uuid4(),
            club=club,
            venue=venue,
            club_id=club.id,
            venue_id=venue.id,
            start_time=start.astimezone(UTC),
            end_time=end.astimezone(UTC),
            created_at=datetime.now(UTC),
            **defaults,
        )
        self.bookings.append(booking)
        return booking

    def _matches(self, booking: Booking, criteria: BookingFilter) -> bool:
        if criteria.venue_ids is not None and booking.venue_id not in criteria.venue_ids:
            return False
        if criteria.overlaps is not None and not intervals_overlap(
            booking.start_time, booking.end_time, *criteria.overlaps
        ):
            return False
        if criteria.status is not None and booking.status != criteria.status:
            return False
        if criteria.exclude_status is not None and booking.status == criteria.exclude_status:
            return False
        if criteria.club_id is not None and booking.club_id != criteria.club_id:
            return False
        if criteria.exclude_club_id is not None and booking.club_id == criteria.exclude_club_id:
            return False
        if (
            criteria.group_category is not None
            and self.clubs[booking.club_id].group_category != criteria.group_category
        ):
            return False
        if criteria.event_type is not None and booking.event_type != criteria.event_type:
            return False
        if criteria.batch_id is not None and booking.batch_id != criteria.batch_id:
            return False
        if criteria.start_from is not None and booking.start_time < criteria.start_from:
            return False
        if criteria.start_to is not None and booking.start_time > criteria.start_to:
            return False
        if criteria.end_from is not None and booking.end_time < criteria.end_from:
            return False
        if criteria.exclude_booking_id is not None and booking.id == criteria.exclude_booking_id:
            return False
        if criteria.created_by is not None and booking.created_by != criteria.created_by:
            return False
        return True

    async def query_bookings(self, criteria: BookingFilter) -> list[Booking]:
        rows = [b for b in self.bookings + self.staged if self._matches(b, criteria)]
        rows.sort(key=lambda b: (b.start_time, str(b.id)), reverse=criteria.order == "desc")
        rows = rows[criteria.offset:]
        if criteria.limit is not None:
            rows = rows[: criteria.limit]
        return rows

    async def count_bookings(self, criteria: BookingFilter) -> int:
        return len(await self.query_bookings(replace(criteria, limit=None, offset=0)))

    async def count_clubs(self) -> int:
        return len(self.clubs)

    async def get_booking(self, booking_id):
        return next((b for b in self.bookings if b.id == booking_id), None)

    async def insert_booking(self, **fields) -> Booking:
        if self.fail_on_insert is not None and len(self.staged) == self.fail_on_insert:
            raise StoreError("Failed to save booking: connection lost")
        booking = Booking(id=uuid4(), created_at=datetime.now(UTC), **fields)
        self.staged.append(booking)
        return booking

    async def update_booking_status(self, booking_id, status):
        booking = await self.get_booking(booking_id)
        booking.status = status
        return booking

    async def save(self, booking):
        return booking

    async def delete_booking(self, booking):
        self.bookings.remove(booking)

    async def lock_venues(self, venue_ids):
        self.locked.append(sorted(set(venue_ids), key=str))

    async def lock_club(self, club_id):
        self.locked_clubs.append(club_id)

    async def commit(self) -> None:
        self.bookings.extend(self.staged)
        self.staged = []
        self.commits += 1

    def log_action(self, user_id, action, booking_id, old_values=None, new_values=None):
        entry = {
            "user_id": user_id,
            "action": action,
            "booking_id": booking_id,
            "old_values": old_values,
            "new_values": new_values,
        }
        self.audit.append(entry)
        return entry


# ==================== CAMPUS DATA ====================


@pytest.fixture
def cep_104():
    return Venue(id=uuid4(), name="CEP 104", category="auto_approval", capacity=60)


@pytest.fixture
def oat():
    return Venue(id=uuid4(), name="OAT (Open Air Theatre)", category="auto_approval", capacity=None)


@pytest.fixture
def lt1():
    return Venue(id=uuid4(), name="Lecture Theatre 1 (LT1)", category="needs_approval", capacity=120)


@pytest.fixture
def misconfigured_venue():
    return Venue(id=uuid4(), name="Old Gym", category="outdoor", capacity=None)


@pytest.fixture
def music_club():
    return Club(id=uuid4(), name="Music Club", group_category="B")


@pytest.fixture
def dance_club():
    return Club(id=uuid4(), name="Dance Club", group_category="B")


@pytest.fixture
def chess_club():
    return Club(id=uuid4(), name="Chess Club", group_category="C")


@pytest.fixture
def admin_profile():
    return Profile(id=uuid4(), email="sbg_convener@dau.ac.in", full_name="SBG Convener", role="admin")


@pytest.fixture
def music_member(music_club):
    return Profile(
        id=uuid4(),
        email="music_club@dau.ac.in",
        full_name="Music Club",
        role="club",
        club_id=music_club.id,
    )


@pytest.fixture
def dance_member(dance_club):
    return Profile(
        id=uuid4(),
        email="dance_club@dau.ac.in",
        full_name="Dance Club",
        role="club",
        club_id=dance_club.id,
    )


@pytest.fixture
def store(cep_104, oat, lt1, misconfigured_venue, music_club, dance_club, chess_club):
    return FakeStore(
        venues=[cep_104, oat, lt1, misconfigured_venue],
        clubs=[music_club, dance_club, chess_club],
    )


@pytest.fixture
def notifier():
    return AsyncMock()


@pytest.fixture
def service(store, notifier):
    return BookingService(store, notifier, settings=settings, clock=lambda: NOW)


# ==================== HTTP ====================


@pytest.fixture
def fake_limiter_redis():
    original = booking_limiter._redis
    client = FakeRedis(server=FakeServer(), decode_responses=True)
    booking_limiter._redis = client
    try:
        yield client
    finally:
        booking_limiter._redis = original


@pytest_asyncio.fixture
async def api_client(store, service, admin_profile, music_member, dance_member, fake_limiter_redis):
    profiles = {p.email: p for p in (admin_profile, music_member, dance_member)}

    async def current_user(
        x_mock_user_email: Annotated[str | None, Header()] = None,
    ) -> Profile:
        profile = profiles.get(x_mock_user_email)
        if profile is None:
            raise AuthenticationError("Not authenticated")
        return profile

    app.dependency_overrides[get_current_user] = current_user
    app.dependency_overrides[get_booking_store] = lambda: store
    app.dependency_overrides[get_booking_service] = lambda: service

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
