import pytest

from conftest import local
from venue_portal.services.conflict_service import ConflictService


@pytest.mark.asyncio
async def test_free_venue_has_no_conflict(store, cep_104, music_club):
    store.add_booking(music_club, cep_104, local(2026, 10, 20, 16), local(2026, 10, 20, 17))

    result = await ConflictService(store).check(
        [cep_104.id], local(2026, 10, 20, 18), local(2026, 10, 20, 19)
    )

    assert not result.has_conflict
    assert result.message == ""
    assert result.venue_names == ()


@pytest.mark.asyncio
async def test_touching_windows_do_not_conflict(store, cep_104, music_club):
    store.add_booking(music_club, cep_104, local(2026, 10, 20, 16), local(2026, 10, 20, 18))

    service = ConflictService(store)
    before = await service.check([cep_104.id], local(2026, 10, 20, 18), local(2026, 10, 20, 20))
    after = await service.check([cep_104.id], local(2026, 10, 20, 15), local(2026, 10, 20, 16))

    assert not before.has_conflict
    assert not after.has_conflict


@pytest.mark.asyncio
async def test_overlap_names_the_venue(store, cep_104, music_club):
    store.add_booking(music_club, cep_104, local(2026, 10, 20, 16), local(2026, 10, 20, 18))

    result = await ConflictService(store).check(
        [cep_104.id], local(2026, 10, 20, 17), local(2026, 10, 20, 19)
    )

    assert result.has_conflict
    assert result.message == "Conflict: CEP 104 is already booked during this time."
    assert result.venue_names == ["CEP 104"]


@pytest.mark.asyncio
async def test_each_conflicting_venue_listed_once(store, cep_104, lt1, music_club, dance_club):
    store.add_booking(music_club, cep_104, local(2026, 10, 20, 16), local(2026, 10, 20, 17))
    store.add_booking(dance_club, cep_104, local(2026, 10, 20, 17), local(2026, 10, 20, 18))
    store.add_booking(dance_club, lt1, local(2026, 10, 20, 17), local(2026, 10, 20, 19))

    result = await ConflictService(store).check(
        [cep_104.id, lt1.id], local(2026, 10, 20, 16), local(2026, 10, 20, 20)
    )

    assert result.venue_names == ["CEP 104", "Lecture Theatre 1 (LT1)"]
    assert result.message == (
        "Conflict: CEP 104, Lecture Theatre 1 (LT1) are already booked during this time."
    )


@pytest.mark.asyncio
async def test_rejected_bookings_never_block(store, cep_104, music_club):
    store.add_booking(
        music_club, cep_104, local(2026, 10, 20, 16), local(2026, 10, 20, 18), status="rejected"
    )

    result = await ConflictService(store).check(
        [cep_104.id], local(2026, 10, 20, 16), local(2026, 10, 20, 18)
    )

    assert not result.has_conflict


@pytest.mark.asyncio
async def test_pending_bookings_block(store, lt1, dance_club):
    store.add_booking(dance_club, lt1, local(2026, 10, 20, 16), local(2026, 10, 20, 18), status="pending")

    result = await ConflictService(store).check(
        [lt1.id], local(2026, 10, 20, 17), local(2026, 10, 20, 18)
    )

    assert result.has_conflict


@pytest.mark.asyncio
async def test_other_venues_are_ignored(store, cep_104, oat, music_club):
    store.add_booking(music_club, oat, local(2026, 10, 20, 16), local(2026, 10, 20, 18))

    result = await ConflictService(store).check(
        [cep_104.id], local(2026, 10, 20, 16), local(2026, 10, 20, 18)
    )

    assert not result.has_conflict


@pytest.mark.asyncio
async def test_group_rule_matches_same_group_only(store, cep_104, oat, music_club, dance_club, chess_club):
    store.add_booking(dance_club, oat, local(2026, 10, 20, 16), local(2026, 10, 20, 18))
    service = ConflictService(store)

    same_group = await service.check_group(music_club, local(2026, 10, 20, 17), local(2026, 10, 20, 19))
    other_group = await service.check_group(chess_club, local(2026, 10, 20, 17), local(2026, 10, 20, 19))
    own_club = await service.check_group(dance_club, local(2026, 10, 20, 17), local(2026, 10, 20, 19))

    assert same_group.has_conflict
    assert same_group.message == (
        "Conflict: Another club in group 'B' has a booking during this time."
    )
    assert not other_group.has_conflict
    assert not own_club.has_conflict
