import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.race import CAMEL_CONFIG

BookingType = Literal["flight", "stay", "ticket", "activity"]


class BookingInput(BaseModel):
    type: str
    provider: str = ""
    confirmation_ref: str = ""
    details_url: str | None = None
    notes: str | None = None

    model_config = CAMEL_CONFIG


class BookingUpdate(BaseModel):
    provider: str | None = None
    confirmation_ref: str | None = None
    details_url: str | None = None
    notes: str | None = None

    model_config = CAMEL_CONFIG


class BookingResponse(BaseModel):
    id: uuid.UUID
    itinerary_id: uuid.UUID
    user_id: str
    type: BookingType
    provider: str
    confirmation_ref: str
    details_url: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {**CAMEL_CONFIG, "from_attributes": True}


class BookingItinerarySummary(BaseModel):
    id: uuid.UUID
    race_id: str
    origin_city: str
    duration_days: int
    race_date_iso: str | None = Field(default=None, alias="raceDateISO")
    country: str | None = None

    model_config = CAMEL_CONFIG


class BookingWithItinerary(BookingResponse):
    itinerary: BookingItinerarySummary


class BookingsBySection(BaseModel):
    flights: list[BookingResponse] = []
    stays: list[BookingResponse] = []
    tickets: list[BookingResponse] = []
    experiences: list[BookingResponse] = []

    model_config = CAMEL_CONFIG
