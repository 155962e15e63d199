"""Tests for races service — validation, search, CRUD, table import."""

import pytest

from nabajk.services.race_import import ImportRow
from nabajk.tests.conftest import make_race


class TestValidateRace:
    def test_valid(self):
        from nabajk.services.races import validate_race

        assert validate_race({"name": "Franja", "race_date": "2026-06-07", "link": "franja.org"}) == {}

    def test_name_and_date_required(self):
        from nabajk.services.races import validate_race

        errors = validate_race({"name": " ", "race_date": ""})
        assert set(errors) == {"name", "race_date"}

    def test_date_shape(self):
        from nabajk.services.races import validate_race

        errors = validate_race({"name": "Franja", "race_date": "07.06.2026"})
        assert errors == {"race_date": "Date must be YYYY-MM-DD"}

    @pytest.mark.parametrize("link", ["not a url", "https://", "ftp://files.si"])
    def test_bad_links(self, link):
        from nabajk.services.races import validate_race

        errors = validate_race({"name": "Franja", "race_date": "2026-06-07", "link": link})
        assert "link" in errors


class TestBuildPayload:
    def test_blank_optionals_become_none(self):
        from nabajk.services.races import build_payload

        payload = build_payload("  Franja ", "2026-06-07")
        assert payload == {
            "name": "Franja",
            "race_date": "2026-06-07",
            "race_type": None,
            "region": None,
            "link": None,
        }

    def test_link_gets_scheme(self):
        from nabajk.services.races import build_payload

        assert build_payload("F", "2026-06-07", link="franja.org")["link"] == "https://franja.org"


class TestGetRaces:
    def test_sorted_by_date(self, fake_db):
        from nabajk.services.races import get_races

        fake_db.store["races"].extend([
            make_race(name="Later", race_date="2026-09-01"),
            make_race(name="Sooner", race_date="2026-04-01"),
        ])
        assert [r["name"] for r in get_races()] == ["Sooner", "Later"]

    def test_search_matches_name_or_region(self, fake_db):
        from nabajk.services.races import get_races

        fake_db.store["races"].extend([
            make_race(name="Maraton Franja", region="Osrednja Slovenija"),
            make_race(name="Vzpon na Krvavec", region="Gorenjska"),
        ])
        assert [r["name"] for r in get_races("franja")] == ["Maraton Franja"]
        assert [r["name"] for r in get_races("GORENJSKA")] == ["Vzpon na Krvavec"]


class TestCrud:
    def test_create_update_delete(self, fake_db):
        from nabajk.services.races import build_payload, create_race, delete_race, update_race

        row = create_race(build_payload("Franja", "2026-06-07", "Cestna"))
        assert fake_db.store["races"][0]["name"] == "Franja"

        update_race(row["id"], {"name": "Franja 2026"})
        assert fake_db.store["races"][0]["name"] == "Franja 2026"
        assert "updated_at" in fake_db.store["races"][0]

        assert delete_race(row["id"]) is True
        assert fake_db.store["races"] == []

    def test_delete_missing(self, fake_db):
        from nabajk.services.races import delete_race

        assert delete_race("nope") is False


class TestImportRaces:
    def test_inserts_every_row(self, fake_db):
        from nabajk.services.races import import_races

        rows = [
            ImportRow("2026-06-07", "Cestna", "Franja", "franja.org"),
            ImportRow("2026-06-14", "Vzpon", "Vršič"),
        ]
        outcome = import_races(rows)

        assert outcome.success_count == 2
        assert not outcome.has_failures
        stored = fake_db.store["races"]
        assert [r["name"] for r in stored] == ["Franja", "Vršič"]
        assert stored[0]["link"] == "https://franja.org"
        assert stored[1]["race_type"] == "Vzpon"

    def test_rejected_rows_are_reported(self, fake_db):
        from nabajk.services.races import import_races

        fake_db.reject("races", lambda row: row["name"] == "Bad", message="permission denied",
                       code="42501")
        rows = [ImportRow("2026-06-07", "Cestna", n) for n in ("A", "Bad", "C")]
        outcome = import_races(rows)

        assert outcome.success_count == 2
        assert outcome.failures[0].row_name == "Bad"
        assert outcome.failures[0].message == "permission denied"
        assert outcome.failures[0].code == "42501"
        assert [r["name"] for r in fake_db.store["races"]] == ["A", "C"]

    def test_empty_import(self, fake_db):
        from nabajk.services.races import import_races

        outcome = import_races([])
        assert outcome.attempted == 0
        assert fake_db.store["races"] == []
