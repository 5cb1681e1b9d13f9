"""Race catalog — per-season race weekends read from app/data/races/<year>.json."""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from app.config import settings
from app.schemas.race import RaceWeekend

logger = logging.getLogger(__name__)

_season_adapter = TypeAdapter(list[RaceWeekend])


class RaceCatalog:
    """Read-only race calendar.

    Every call re-reads the season file so edits to curated ticket and
    experience content show up on existing itineraries without a restart.
    """

    def __init__(self, data_dir: str | Path | None = None):
        self.data_dir = Path(data_dir or settings.races_data_dir)

    def _load_season(self, year: int) -> list[RaceWeekend]:
        path = self.data_dir / f"{year}.json"
        if not path.is_file():
            return []
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return _season_adapter.validate_python(raw)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Could not load race calendar {path}: {e}")
            return []

    def list_races(self, year: int) -> list[RaceWeekend]:
        """All race weekends of a season, earliest first. Empty for unknown seasons."""
        return sorted(self._load_season(year), key=lambda race: race.race_date_iso)

    def get_race_by_id(self, year: int, race_id: str) -> RaceWeekend | None:
        for race in self._load_season(year):
            if race.id == race_id:
                return race
        return None


race_catalog = RaceCatalog()
