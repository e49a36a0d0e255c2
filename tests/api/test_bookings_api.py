from datetime import UTC

import pytest

from conftest import local
from venue_portal.core.middleware import booking_limiter

CLUB = {"X-Mock-User-Email": "music_club@dau.ac.in"}
ADMIN = {"X-Mock-User-Email": "sbg_convener@dau.ac.in"}


def payload(club, venues, start=None, end=None, event_type="closed_club", **fields):
    body = {
        "club_id": str(club.id),
        "venue_ids": [str(venue.id) for venue in venues],
        "event_type": event_type,
        "event_name": "Jam Session",
        "start_time": (start or local(2026, 10, 20, 17)).isoformat(),
        "end_time": (end or local(2026, 10, 20, 18)).isoformat(),
    }
    body.update(fields)
    return body


def utc_param(value):
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


@pytest.mark.asyncio
async def test_health(api_client):
    response = await api_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_reference_data(api_client):
    venues = await api_client.get("/api/v1/venues")
    clubs = await api_client.get("/api/v1/clubs")

    assert venues.status_code == 200
    assert [v["name"] for v in venues.json()][:2] == ["CEP 104", "Lecture Theatre 1 (LT1)"]
    assert {"Music Club", "Dance Club", "Chess Club"} == {c["name"] for c in clubs.json()}


@pytest.mark.asyncio
async def test_submit_booking_returns_created_rows(api_client, music_club, cep_104, lt1):
    response = await api_client.post(
        "/api/v1/bookings", json=payload(music_club, [cep_104, lt1]), headers=CLUB
    )

    assert response.status_code == 201
    created = response.json()["created"]
    assert [(row["venue_name"], row["status"]) for row in created] == [
        ("CEP 104", "approved"),
        ("Lecture Theatre 1 (LT1)", "pending"),
    ]
    assert created[0]["club_name"] == "Music Club"
    assert created[0]["batch_id"] == created[1]["batch_id"]


@pytest.mark.asyncio
async def test_single_venue_id_is_accepted(api_client, music_club, cep_104):
    body = payload(music_club, [cep_104])
    body["venue_id"] = body.pop("venue_ids")[0]

    response = await api_client.post("/api/v1/bookings", json=body, headers=CLUB)

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_submit_requires_authentication(api_client, music_club, cep_104):
    response = await api_client.post("/api/v1/bookings", json=payload(music_club, [cep_104]))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_policy_violation_is_400(api_client, music_club, cep_104):
    response = await api_client.post(
        "/api/v1/bookings",
        json=payload(music_club, [cep_104], event_type="co_curricular"),
        headers=CLUB,
    )

    assert response.status_code == 400
    assert response.json() == {
        "detail": "Co-curricular events must be booked at least 30 days in advance."
    }


@pytest.mark.asyncio
async def test_conflict_is_409(api_client, store, music_club, dance_club, cep_104):
    store.add_booking(dance_club, cep_104, local(2026, 10, 20, 17), local(2026, 10, 20, 18))

    response = await api_client.post(
        "/api/v1/bookings", json=payload(music_club, [cep_104]), headers=CLUB
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Conflict: CEP 104 is already booked during this time."


@pytest.mark.asyncio
async def test_quota_exceeded_is_409(api_client, store, music_club, cep_104, oat):
    for day in (10, 17):
        store.add_booking(
            music_club, oat, local(2026, 9, day, 17), local(2026, 9, day, 18), event_type="co_curricular"
        )

    response = await api_client.post(
        "/api/v1/bookings",
        json=payload(
            music_club,
            [cep_104],
            local(2026, 11, 25, 17),
            local(2026, 11, 25, 18),
            event_type="co_curricular",
        ),
        headers=CLUB,
    )

    assert response.status_code == 409
    assert "limit of 2 per semester" in response.json()["detail"]


@pytest.mark.asyncio
async def test_other_club_is_403(api_client, dance_club, cep_104):
    response = await api_client.post(
        "/api/v1/bookings", json=payload(dance_club, [cep_104]), headers=CLUB
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_malformed_request_is_422(api_client, music_club, cep_104):
    body = payload(music_club, [cep_104], end=local(2026, 10, 20, 16))

    response = await api_client.post("/api/v1/bookings", json=body, headers=CLUB)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_event_type_is_422(api_client, music_club, cep_104):
    response = await api_client.post(
        "/api/v1/bookings", json=payload(music_club, [cep_104], event_type="workshop"), headers=CLUB
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_submissions_are_rate_limited(api_client, monkeypatch, music_club, cep_104):
    monkeypatch.setattr(booking_limiter, "requests_per_minute", 2)

    statuses = []
    for _ in range(3):
        response = await api_client.post(
            "/api/v1/bookings", json=payload(music_club, [cep_104]), headers=CLUB
        )
        statuses.append(response.status_code)

    assert statuses[2] == 429
    assert 429 not in statuses[:2]


@pytest.mark.asyncio
async def test_check_conflict(api_client, store, music_club, dance_club, cep_104, lt1):
    store.add_booking(dance_club, lt1, local(2026, 10, 20, 17), local(2026, 10, 20, 18))

    response = await api_client.get(
        "/api/v1/bookings/check-conflict",
        params={
            "club_id": str(music_club.id),
            "venue_ids": [str(cep_104.id), str(lt1.id)],
            "start_time": utc_param(local(2026, 10, 20, 17, 30)),
            "end_time": utc_param(local(2026, 10, 20, 19)),
        },
        headers=CLUB,
    )

    assert response.status_code == 200
    assert response.json() == {
        "has_conflict": True,
        "message": "Conflict: Lecture Theatre 1 (LT1) is already booked during this time.",
        "conflicting_venues": ["Lecture Theatre 1 (LT1)"],
    }


@pytest.mark.asyncio
async def test_quota_endpoint(api_client, store, music_club, cep_104):
    store.add_booking(
        music_club, cep_104, local(2026, 9, 10, 17), local(2026, 9, 10, 18), event_type="co_curricular"
    )

    response = await api_client.get(
        "/api/v1/bookings/quota",
        params={"club_id": str(music_club.id), "event_type": "co_curricular"},
        headers=CLUB,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["limit"] == 2


@pytest.mark.asyncio
async def test_my_and_public_bookings(api_client, store, music_club, dance_club, cep_104, lt1):
    store.add_booking(music_club, cep_104, local(2026, 10, 20, 17), local(2026, 10, 20, 18))
    store.add_booking(dance_club, lt1, local(2026, 10, 20, 17), local(2026, 10, 20, 18), status="pending")

    mine = await api_client.get("/api/v1/bookings/mine", headers=CLUB)
    public = await api_client.get("/api/v1/bookings/public")

    assert [row["club_name"] for row in mine.json()] == ["Music Club"]
    assert [row["venue_name"] for row in public.json()] == ["CEP 104"]


@pytest.mark.asyncio
async def test_naive_start_with_offset_end_is_accepted(api_client, music_club, cep_104):
    body = payload(music_club, [cep_104])
    body["start_time"] = "2026-10-20T17:00:00"
    body["end_time"] = "2026-10-20T18:00:00+05:30"

    response = await api_client.post("/api/v1/bookings", json=body, headers=CLUB)

    assert response.status_code == 201
    row = response.json()["created"][0]
    assert row["start_time"].startswith("2026-10-20T11:30:00")
    assert row["end_time"].startswith("2026-10-20T12:30:00")


@pytest.mark.asyncio
async def test_mixed_naive_and_offset_window_must_still_be_ordered(api_client, music_club, cep_104):
    body = payload(music_club, [cep_104])
    body["start_time"] = "2026-10-20T18:00:00"
    body["end_time"] = "2026-10-20T17:00:00+05:30"

    response = await api_client.post("/api/v1/bookings", json=body, headers=CLUB)

    assert response.status_code == 422
