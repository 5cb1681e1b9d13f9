from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class TicketOption(BaseModel):
    """A single curated ticket offer (official F1, circuit promoter, ...)."""

    source: str
    source_logo: str | None = None
    stand: str
    days: int
    price: str
    href: str
    notes: list[str] | None = None
    # Only set when a display currency was requested
    display_price: str | None = None

    model_config = CAMEL_CONFIG


class ExperienceActivity(BaseModel):
    title: str
    href: str
    description: str | None = None

    model_config = CAMEL_CONFIG


class RaceExperienceOption(BaseModel):
    provider: str
    activities: list[ExperienceActivity] = []

    model_config = CAMEL_CONFIG


class RaceWeekend(BaseModel):
    id: str
    name: str
    circuit: str
    city: str
    country: str
    airport_code: str | None = None
    race_date_iso: str = Field(alias="raceDateISO")
    official_tickets_url: str | None = None
    other_tickets_url: str | None = None
    ticket_options: list[TicketOption] | None = None
    experience_options: list[RaceExperienceOption] | None = None

    model_config = {**CAMEL_CONFIG, "frozen": True}
