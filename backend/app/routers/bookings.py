"""Bookings router — the caller's saved confirmations across all itineraries."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user_id
from app.schemas.booking import BookingInput, BookingUpdate, BookingWithItinerary
from app.services.booking_repository import booking_repository
from app.services.booking_service import validate_booking_input

router = APIRouter()


@router.get("", response_model=list[BookingWithItinerary])
async def list_bookings(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await booking_repository.list_for_user(db, user_id)


@router.patch("/{booking_id}")
async def update_booking(
    booking_id: str,
    data: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Edit provider, confirmation, link or notes. The booking type cannot change."""
    existing = await booking_repository.get_booking(db, user_id, booking_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Booking not found")

    merged = BookingInput(
        type=existing.type,
        provider=data.provider if data.provider is not None else existing.provider,
        confirmation_ref=data.confirmation_ref if data.confirmation_ref is not None else existing.confirmation_ref,
        details_url=data.details_url if "details_url" in data.model_fields_set else existing.details_url,
        notes=data.notes if "notes" in data.model_fields_set else existing.notes,
    )
    error = validate_booking_input(merged)
    if error:
        raise HTTPException(status_code=400, detail=error)

    booking = await booking_repository.update_booking(db, user_id, booking_id, data)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return {"booking": booking.model_dump(mode="json", by_alias=True)}


@router.delete("/{booking_id}", status_code=204)
async def delete_booking(
    booking_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    deleted = await booking_repository.delete_booking(db, user_id, booking_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Booking not found")
    return Response(status_code=204)
