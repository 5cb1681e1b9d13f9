"""Booking persistence — confirmation details users attach to an itinerary."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.itinerary import Itinerary, ItineraryBooking
from app.schemas.booking import (
    BookingInput,
    BookingItinerarySummary,
    BookingResponse,
    BookingUpdate,
    BookingWithItinerary,
)
from app.services.itinerary_repository import parse_id

logger = logging.getLogger(__name__)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class BookingRepository:
    async def create_booking(
        self, db: AsyncSession, user_id: str, itinerary_id, data: BookingInput
    ) -> BookingResponse | None:
        """Attach a booking to an owned itinerary. None when the itinerary is not the caller's."""
        parsed = parse_id(itinerary_id)
        if parsed is None:
            return None
        owner = await db.execute(
            select(Itinerary.id).where(Itinerary.id == parsed, Itinerary.user_id == user_id)
        )
        if owner.scalar_one_or_none() is None:
            return None

        booking = ItineraryBooking(
            itinerary_id=parsed,
            user_id=user_id,
            type=data.type,
            provider=data.provider.strip(),
            confirmation_ref=data.confirmation_ref.strip(),
            details_url=_blank_to_none(data.details_url),
            notes=_blank_to_none(data.notes),
        )
        db.add(booking)
        await db.commit()
        await db.refresh(booking)
        logger.info(f"Booking {booking.id} ({booking.type}) added to itinerary {parsed}")
        return BookingResponse.model_validate(booking)

    async def list_for_itinerary(self, db: AsyncSession, user_id: str, itinerary_id) -> list[BookingResponse]:
        """Bookings on one itinerary, oldest first."""
        parsed = parse_id(itinerary_id)
        if parsed is None:
            return []
        result = await db.execute(
            select(ItineraryBooking)
            .where(ItineraryBooking.itinerary_id == parsed, ItineraryBooking.user_id == user_id)
            .order_by(ItineraryBooking.created_at.asc())
        )
        return [BookingResponse.model_validate(row) for row in result.scalars().all()]

    async def list_for_user(self, db: AsyncSession, user_id: str) -> list[BookingWithItinerary]:
        """All of a user's bookings with a short summary of their itinerary, newest first."""
        result = await db.execute(
            select(ItineraryBooking)
            .where(ItineraryBooking.user_id == user_id)
            .options(selectinload(ItineraryBooking.itinerary))
            .order_by(ItineraryBooking.created_at.desc())
        )
        bookings = []
        for row in result.scalars().all():
            itinerary = row.itinerary
            race = (itinerary.result_json or {}).get("race") or {}
            bookings.append(
                BookingWithItinerary(
                    **BookingResponse.model_validate(row).model_dump(),
                    itinerary=BookingItinerarySummary(
                        id=itinerary.id,
                        race_id=itinerary.race_id,
                        origin_city=itinerary.origin_city,
                        duration_days=itinerary.duration_days,
                        race_date_iso=race.get("raceDateISO"),
                        country=race.get("country"),
                    ),
                )
            )
        return bookings

    async def get_booking(self, db: AsyncSession, user_id: str, booking_id) -> BookingResponse | None:
        parsed = parse_id(booking_id)
        if parsed is None:
            return None
        result = await db.execute(
            select(ItineraryBooking).where(ItineraryBooking.id == parsed, ItineraryBooking.user_id == user_id)
        )
        row = result.scalar_one_or_none()
        return BookingResponse.model_validate(row) if row else None

    async def update_booking(
        self, db: AsyncSession, user_id: str, booking_id, data: BookingUpdate
    ) -> BookingResponse | None:
        parsed = parse_id(booking_id)
        if parsed is None:
            return None
        result = await db.execute(
            select(ItineraryBooking).where(ItineraryBooking.id == parsed, ItineraryBooking.user_id == user_id)
        )
        booking = result.scalar_one_or_none()
        if booking is None:
            return None

        changes = data.model_dump(exclude_unset=True)
        if "provider" in changes and changes["provider"] is not None:
            booking.provider = changes["provider"].strip()
        if "confirmation_ref" in changes and changes["confirmation_ref"] is not None:
            booking.confirmation_ref = changes["confirmation_ref"].strip()
        if "details_url" in changes:
            booking.details_url = _blank_to_none(changes["details_url"])
        if "notes" in changes:
            booking.notes = _blank_to_none(changes["notes"])

        await db.commit()
        await db.refresh(booking)
        return BookingResponse.model_validate(booking)

    async def delete_booking(self, db: AsyncSession, user_id: str, booking_id) -> bool:
        parsed = parse_id(booking_id)
        if parsed is None:
            return False
        result = await db.execute(
            delete(ItineraryBooking).where(ItineraryBooking.id == parsed, ItineraryBooking.user_id == user_id)
        )
        await db.commit()
        return result.rowcount > 0


booking_repository = BookingRepository()
