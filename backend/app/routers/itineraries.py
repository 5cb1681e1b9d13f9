"""Itinerary router — generate, view, price, duplicate and delete trip plans."""

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.data.currency import DisplayCurrency, localize_price_label
from app.database import get_db
from app.dependencies import get_current_user_id, get_itinerary_cache
from app.schemas.booking import BookingInput
from app.schemas.itinerary import GenerateItineraryResponse, ItineraryRecord, ItinerarySummary
from app.services.booking_repository import booking_repository
from app.services.booking_service import group_bookings_by_section, validate_booking_input
from app.services.itinerary_cache import ItineraryResultCache
from app.services.itinerary_merge import get_flight_prices_for_itinerary, get_merged_itinerary_result
from app.services.itinerary_repository import itinerary_repository
from app.services.itinerary_service import RaceNotFoundError, generate_and_save_itinerary

logger = logging.getLogger(__name__)

router = APIRouter()


def _cache_key(user_id: str, itinerary_id: str) -> str:
    return f"{user_id}:{itinerary_id}"


def _localize_ticket_prices(result: dict, currency: DisplayCurrency) -> dict:
    tickets = result.get("tickets")
    options = tickets.get("options") if isinstance(tickets, dict) else None
    if not isinstance(options, list):
        return result

    localized = []
    for option in options:
        if isinstance(option, dict) and isinstance(option.get("price"), str):
            display = localize_price_label(option["price"], currency)
            if display:
                option = {**option, "displayPrice": display}
        localized.append(option)
    return {**result, "tickets": {**tickets, "options": localized}}


async def _get_owned(db: AsyncSession, user_id: str, itinerary_id: str) -> ItineraryRecord:
    record = await itinerary_repository.get_itinerary_by_id(db, user_id, itinerary_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return record


@router.post("/generate", status_code=201, response_model=GenerateItineraryResponse)
async def generate_itinerary(
    body: dict = Body(...),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    cache: ItineraryResultCache = Depends(get_itinerary_cache),
):
    """Build a plan for the requested race weekend and save it for the caller."""
    try:
        itinerary_id, result = await generate_and_save_itinerary(db, user_id, body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid trip request: {e.error_count()} invalid field(s)")
    except RaceNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result_json = result.to_json()
    await cache.put(_cache_key(user_id, itinerary_id), result_json)
    return GenerateItineraryResponse(itinerary_id=itinerary_id, result=result_json)


@router.get("", response_model=list[ItinerarySummary])
async def list_itineraries(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await itinerary_repository.list_itineraries(db, user_id)


@router.get("/{itinerary_id}/result")
async def get_itinerary_result(
    itinerary_id: str,
    currency: DisplayCurrency | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    cache: ItineraryResultCache = Depends(get_itinerary_cache),
):
    """Stored itinerary refreshed against the live catalog. A just-generated result is served once from cache."""
    key = _cache_key(user_id, itinerary_id)
    result = await cache.get(key)
    if result is not None:
        await cache.clear(key)
    else:
        record = await _get_owned(db, user_id, itinerary_id)
        result = get_merged_itinerary_result(record)

    if currency:
        result = _localize_ticket_prices(result, currency)
    return {"result": result}


@router.get("/{itinerary_id}/flight-prices")
async def get_itinerary_flight_prices(
    itinerary_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    record = await _get_owned(db, user_id, itinerary_id)
    flights_by_option = await get_flight_prices_for_itinerary(record)
    return {"flightsByOption": flights_by_option}


@router.post("/{itinerary_id}/duplicate", status_code=201)
async def duplicate_itinerary(
    itinerary_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    new_id = await itinerary_repository.duplicate_itinerary(db, user_id, itinerary_id)
    if new_id is None:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return {"id": new_id}


@router.delete("/{itinerary_id}", status_code=204)
async def delete_itinerary(
    itinerary_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    cache: ItineraryResultCache = Depends(get_itinerary_cache),
):
    deleted = await itinerary_repository.delete_itinerary(db, user_id, itinerary_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    await cache.clear(_cache_key(user_id, itinerary_id))
    return Response(status_code=204)


# ─── Bookings attached to an itinerary ───


@router.get("/{itinerary_id}/bookings")
async def list_itinerary_bookings(
    itinerary_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    await _get_owned(db, user_id, itinerary_id)
    bookings = await booking_repository.list_for_itinerary(db, user_id, itinerary_id)
    return {
        "bookings": [b.model_dump(mode="json", by_alias=True) for b in bookings],
        "bySection": group_bookings_by_section(bookings).model_dump(mode="json", by_alias=True),
    }


@router.post("/{itinerary_id}/bookings", status_code=201)
async def add_itinerary_booking(
    itinerary_id: str,
    data: BookingInput,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    error = validate_booking_input(data)
    if error:
        raise HTTPException(status_code=400, detail=error)

    booking = await booking_repository.create_booking(db, user_id, itinerary_id, data)
    if booking is None:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return {"booking": booking.model_dump(mode="json", by_alias=True)}
