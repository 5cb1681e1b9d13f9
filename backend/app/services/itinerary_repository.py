"""Itinerary persistence — owner-scoped CRUD over the itineraries table."""

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.itinerary import Itinerary, ItineraryBooking
from app.schemas.itinerary import ItineraryRecord, ItineraryResult, ItinerarySummary, TripRequest

logger = logging.getLogger(__name__)


def parse_id(value: str | uuid.UUID) -> uuid.UUID | None:
    """UUID from a path parameter; None for anything malformed."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _race_field(result_json, field: str) -> str | None:
    race = result_json.get("race") if isinstance(result_json, dict) else None
    value = race.get(field) if isinstance(race, dict) else None
    return value if isinstance(value, str) else None


def _to_record(row: Itinerary) -> ItineraryRecord:
    return ItineraryRecord(
        id=str(row.id),
        user_id=row.user_id,
        origin_city=row.origin_city,
        race_id=row.race_id,
        duration_days=row.duration_days,
        budget_tier=row.budget_tier,
        result_json=row.result_json if isinstance(row.result_json, dict) else {},
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class ItineraryRepository:
    async def create_itinerary(
        self, db: AsyncSession, user_id: str, request: TripRequest, result: ItineraryResult | dict
    ) -> str:
        result_json = result.to_json() if isinstance(result, ItineraryResult) else result
        row = Itinerary(
            user_id=user_id,
            origin_city=request.origin_city,
            race_id=request.race_id,
            duration_days=request.duration_days,
            budget_tier=request.budget_tier,
            result_json=result_json,
        )
        db.add(row)
        await db.commit()
        logger.info(f"Itinerary {row.id} created for race {request.race_id}")
        return str(row.id)

    async def _get_row(self, db: AsyncSession, user_id: str, itinerary_id) -> Itinerary | None:
        parsed = parse_id(itinerary_id)
        if parsed is None:
            return None
        result = await db.execute(
            select(Itinerary).where(Itinerary.id == parsed, Itinerary.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_itinerary_by_id(self, db: AsyncSession, user_id: str, itinerary_id) -> ItineraryRecord | None:
        row = await self._get_row(db, user_id, itinerary_id)
        return _to_record(row) if row else None

    async def list_itineraries(self, db: AsyncSession, user_id: str) -> list[ItinerarySummary]:
        """Caller's itineraries, newest first."""
        result = await db.execute(
            select(Itinerary)
            .where(Itinerary.user_id == user_id)
            .order_by(Itinerary.created_at.desc())
        )
        return [
            ItinerarySummary(
                id=str(row.id),
                origin_city=row.origin_city,
                race_id=row.race_id,
                race_date_iso=_race_field(row.result_json, "raceDateISO"),
                country=_race_field(row.result_json, "country"),
                duration_days=row.duration_days,
                budget_tier=row.budget_tier,
                created_at=row.created_at,
            )
            for row in result.scalars().all()
        ]

    async def duplicate_itinerary(self, db: AsyncSession, user_id: str, itinerary_id) -> str | None:
        """Copy of an owned itinerary under a new id. None when the source is missing."""
        source = await self._get_row(db, user_id, itinerary_id)
        if source is None:
            return None
        copy = Itinerary(
            user_id=user_id,
            origin_city=source.origin_city,
            race_id=source.race_id,
            duration_days=source.duration_days,
            budget_tier=source.budget_tier,
            result_json=dict(source.result_json or {}),
        )
        db.add(copy)
        await db.commit()
        logger.info(f"Itinerary {source.id} duplicated as {copy.id}")
        return str(copy.id)

    async def delete_itinerary(self, db: AsyncSession, user_id: str, itinerary_id) -> bool:
        parsed = parse_id(itinerary_id)
        if parsed is None:
            return False
        # SQLite does not enforce the FK cascade
        await db.execute(
            delete(ItineraryBooking).where(
                ItineraryBooking.itinerary_id == parsed, ItineraryBooking.user_id == user_id
            )
        )
        result = await db.execute(
            delete(Itinerary).where(Itinerary.id == parsed, Itinerary.user_id == user_id)
        )
        await db.commit()
        return result.rowcount > 0


itinerary_repository = ItineraryRepository()
