import json

from app.services.race_catalog import RaceCatalog


def test_2026_calendar(catalog):
    races = catalog.list_races(2026)

    assert len(races) == 24
    dates = [race.race_date_iso for race in races]
    assert dates == sorted(dates)
    assert len({race.id for race in races}) == 24


def test_unknown_season_is_empty(catalog):
    assert catalog.list_races(1999) == []
    assert catalog.get_race_by_id(1999, "monaco-gp") is None


def test_get_race_by_id(catalog):
    race = catalog.get_race_by_id(2026, "monaco-gp")
    assert race.city == "Monte Carlo"
    assert race.airport_code == "NCE"
    assert catalog.get_race_by_id(2026, "atlantis-gp") is None


def test_reads_file_on_every_lookup(tmp_path):
    season = tmp_path / "2027.json"
    race = {"id": "x-gp", "name": "X GP", "circuit": "X Ring", "city": "X", "country": "X", "raceDateISO": "2027-05-01"}
    season.write_text(json.dumps([race]), encoding="utf-8")
    catalog = RaceCatalog(tmp_path)
    assert catalog.get_race_by_id(2027, "x-gp").other_tickets_url is None

    race["otherTicketsUrl"] = "https://tickets.example.com/"
    season.write_text(json.dumps([race]), encoding="utf-8")
    assert catalog.get_race_by_id(2027, "x-gp").other_tickets_url == "https://tickets.example.com/"


def test_malformed_season_file_is_empty(tmp_path, caplog):
    (tmp_path / "2027.json").write_text("[{not json", encoding="utf-8")
    (tmp_path / "2028.json").write_text(json.dumps([{"id": "missing-fields"}]), encoding="utf-8")
    catalog = RaceCatalog(tmp_path)

    assert catalog.list_races(2027) == []
    assert catalog.list_races(2028) == []
    assert "Could not load race calendar" in caplog.text
