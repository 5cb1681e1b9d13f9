import uuid

import pytest

from app.schemas.booking import BookingInput, BookingUpdate
from app.services.booking_repository import booking_repository
from app.services.itinerary_builder import build_itinerary
from app.services.itinerary_repository import itinerary_repository, parse_id
from app.services.itinerary_service import RaceNotFoundError, generate_and_save_itinerary


@pytest.fixture
def result(london_request, monaco, builder):
    return build_itinerary(london_request, monaco, builder)


async def _create(db, london_request, result, user_id="user-1") -> str:
    return await itinerary_repository.create_itinerary(db, user_id, london_request, result)


def test_parse_id():
    value = uuid.uuid4()
    assert parse_id(value) == value
    assert parse_id(str(value)) == value
    assert parse_id("not-a-uuid") is None


async def test_create_and_get(db, london_request, result):
    itinerary_id = await _create(db, london_request, result)

    record = await itinerary_repository.get_itinerary_by_id(db, "user-1", itinerary_id)
    assert record is not None
    assert record.id == itinerary_id
    assert record.race_id == "monaco-gp"
    assert record.budget_tier == "$$"
    assert record.result_json["race"]["id"] == "monaco-gp"
    assert record.result_json["request"]["originCity"] == "London"


async def test_get_is_owner_scoped(db, london_request, result):
    itinerary_id = await _create(db, london_request, result)

    assert await itinerary_repository.get_itinerary_by_id(db, "someone-else", itinerary_id) is None
    assert await itinerary_repository.get_itinerary_by_id(db, "user-1", "not-a-uuid") is None
    assert await itinerary_repository.get_itinerary_by_id(db, "user-1", str(uuid.uuid4())) is None


async def test_list_itineraries(db, london_request, result):
    first = await _create(db, london_request, result)
    second = await _create(db, london_request, result)
    await _create(db, london_request, result, user_id="someone-else")

    summaries = await itinerary_repository.list_itineraries(db, "user-1")

    assert {s.id for s in summaries} == {first, second}
    assert all(s.race_date_iso == "2026-06-07" for s in summaries)
    assert all(s.country == "Monaco" for s in summaries)


async def test_duplicate_itinerary(db, london_request, result):
    source = await _create(db, london_request, result)

    copy_id = await itinerary_repository.duplicate_itinerary(db, "user-1", source)

    assert copy_id and copy_id != source
    original = await itinerary_repository.get_itinerary_by_id(db, "user-1", source)
    duplicate = await itinerary_repository.get_itinerary_by_id(db, "user-1", copy_id)
    assert duplicate.result_json == original.result_json
    assert await itinerary_repository.duplicate_itinerary(db, "someone-else", source) is None


async def test_delete_itinerary_removes_bookings(db, london_request, result):
    itinerary_id = await _create(db, london_request, result)
    await booking_repository.create_booking(
        db, "user-1", itinerary_id, BookingInput(type="flight", provider="Kayak", confirmation_ref="K1")
    )

    assert await itinerary_repository.delete_itinerary(db, "someone-else", itinerary_id) is False
    assert await itinerary_repository.delete_itinerary(db, "user-1", itinerary_id) is True
    assert await itinerary_repository.get_itinerary_by_id(db, "user-1", itinerary_id) is None
    assert await booking_repository.list_for_user(db, "user-1") == []
    assert await itinerary_repository.delete_itinerary(db, "user-1", "garbage") is False


async def test_generate_and_save(db, catalog):
    itinerary_id, generated = await generate_and_save_itinerary(
        db,
        "user-1",
        {"originCity": "Paris", "raceId": "monaco-gp", "durationDays": 4, "budgetTier": "$"},
        catalog=catalog,
    )

    record = await itinerary_repository.get_itinerary_by_id(db, "user-1", itinerary_id)
    assert record.origin_city == "Paris"
    assert record.result_json == generated.to_json()
    assert len(generated.date_options) == 3


async def test_generate_unknown_race(db, catalog):
    with pytest.raises(RaceNotFoundError):
        await generate_and_save_itinerary(
            db,
            "user-1",
            {"originCity": "Paris", "raceId": "nowhere-gp", "durationDays": 4, "budgetTier": "$"},
            catalog=catalog,
        )


# ─── Bookings ───


async def test_booking_lifecycle(db, london_request, result):
    itinerary_id = await _create(db, london_request, result)

    booking = await booking_repository.create_booking(
        db,
        "user-1",
        itinerary_id,
        BookingInput(type="stay", provider=" Booking.com ", confirmation_ref="BK-99", details_url="  "),
    )
    assert booking.provider == "Booking.com"
    assert booking.details_url is None
    assert str(booking.itinerary_id) == itinerary_id

    listed = await booking_repository.list_for_itinerary(db, "user-1", itinerary_id)
    assert [b.id for b in listed] == [booking.id]

    updated = await booking_repository.update_booking(
        db, "user-1", booking.id, BookingUpdate(notes="Late check-in", confirmation_ref="BK-100")
    )
    assert updated.notes == "Late check-in"
    assert updated.confirmation_ref == "BK-100"
    assert updated.provider == "Booking.com"

    assert await booking_repository.get_booking(db, "someone-else", booking.id) is None
    assert await booking_repository.delete_booking(db, "someone-else", booking.id) is False
    assert await booking_repository.delete_booking(db, "user-1", booking.id) is True
    assert await booking_repository.get_booking(db, "user-1", booking.id) is None


async def test_booking_requires_owned_itinerary(db, london_request, result):
    itinerary_id = await _create(db, london_request, result)
    data = BookingInput(type="ticket", provider="F1", confirmation_ref="T1")

    assert await booking_repository.create_booking(db, "someone-else", itinerary_id, data) is None
    assert await booking_repository.create_booking(db, "user-1", "bad-id", data) is None


async def test_list_for_user_includes_itinerary_summary(db, session_factory, london_request, result):
    itinerary_id = await _create(db, london_request, result)
    await booking_repository.create_booking(
        db, "user-1", itinerary_id, BookingInput(type="activity", provider="GetYourGuide", confirmation_ref="G-1")
    )

    async with session_factory() as fresh:
        bookings = await booking_repository.list_for_user(fresh, "user-1")

    assert len(bookings) == 1
    summary = bookings[0].itinerary
    assert str(summary.id) == itinerary_id
    assert summary.race_id == "monaco-gp"
    assert summary.race_date_iso == "2026-06-07"
    assert summary.country == "Monaco"
    assert await booking_repository.list_for_user(db, "someone-else") == []
