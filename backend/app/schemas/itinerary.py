from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from app.schemas.race import CAMEL_CONFIG, ExperienceActivity, RaceWeekend, TicketOption

BudgetTier = Literal["$", "$$", "$$$"]


class TripRequest(BaseModel):
    origin_city: str = Field(min_length=2)
    race_id: str = Field(min_length=1)
    duration_days: int = Field(ge=2, le=30)
    budget_tier: BudgetTier

    model_config = {**CAMEL_CONFIG, "frozen": True}


class DateOption(BaseModel):
    key: str
    label: str = ""
    depart_date_iso: str = Field(alias="departDateISO")
    return_date_iso: str = Field(alias="returnDateISO")

    model_config = {**CAMEL_CONFIG, "frozen": True}


class LegacyDateOption(BaseModel):
    """Date option as written by older releases (snake_case date fields)."""

    key: str
    label: str = ""
    depart_date_iso: str
    return_date_iso: str

    model_config = {"frozen": True}

    def to_current(self) -> DateOption:
        return DateOption(
            key=self.key,
            label=self.label,
            depart_date_iso=self.depart_date_iso,
            return_date_iso=self.return_date_iso,
        )


StoredDateOption = DateOption | LegacyDateOption


def decode_date_option(raw: Any) -> DateOption | None:
    """Normalize a persisted date option to the current shape; None if unusable."""
    if not isinstance(raw, dict):
        return None
    model: type[StoredDateOption] = (
        DateOption if "departDateISO" in raw or "returnDateISO" in raw else LegacyDateOption
    )
    try:
        option = model.model_validate(raw)
    except ValidationError:
        return None
    if isinstance(option, LegacyDateOption):
        return option.to_current()
    return option


class SampleFlightLeg(BaseModel):
    dep_iata: str
    dep_time: str
    arr_iata: str
    arr_time: str
    duration_text: str

    model_config = CAMEL_CONFIG


class SampleFlight(BaseModel):
    airline_label: str
    departure: str
    arrival: str
    stops: int
    duration_text: str
    stop_airports: list[str] | None = None
    legs: list[SampleFlightLeg] | None = None

    model_config = CAMEL_CONFIG


class ProviderLink(BaseModel):
    label: str
    href: str
    logo: str | None = None
    from_price: str | None = None
    sample_flight: SampleFlight | None = None
    is_affiliate: bool | None = None

    model_config = CAMEL_CONFIG


class SectionLinks(BaseModel):
    title: str
    links: list[ProviderLink]
    notes: list[str] | None = None

    model_config = CAMEL_CONFIG


class TicketsSection(SectionLinks):
    options: list[TicketOption] | None = None


class ExperiencesSection(SectionLinks):
    provider_activities: dict[str, list[ExperienceActivity]] | None = None


class ItineraryResult(BaseModel):
    request: TripRequest
    race: RaceWeekend
    date_options: list[DateOption]
    flights_by_option: dict[str, SectionLinks]
    stays_by_option: dict[str, SectionLinks]
    tickets: TicketsSection
    experiences: ExperiencesSection

    model_config = CAMEL_CONFIG

    def to_json(self) -> dict:
        """JSON document in the persisted camelCase shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FlightPricesResult(BaseModel):
    google: int
    skyscanner: int
    kayak: int
    # Only display prices when from_api is true
    from_api: bool
    # Index 0=Google, 1=Skyscanner, 2=Kayak
    sample_flights: list[SampleFlight | None] | None = None

    model_config = CAMEL_CONFIG


class ItineraryRecord(BaseModel):
    id: str
    user_id: str
    origin_city: str
    race_id: str
    duration_days: int
    budget_tier: str
    result_json: dict
    created_at: datetime
    updated_at: datetime

    model_config = {**CAMEL_CONFIG}


class ItinerarySummary(BaseModel):
    id: str
    origin_city: str
    race_id: str
    race_date_iso: str | None = Field(default=None, alias="raceDateISO")
    country: str | None = None
    duration_days: int
    budget_tier: str
    created_at: datetime

    model_config = CAMEL_CONFIG


class GenerateItineraryResponse(BaseModel):
    itinerary_id: str
    result: dict

    model_config = CAMEL_CONFIG
