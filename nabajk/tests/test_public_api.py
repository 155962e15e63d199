"""Tests for the app feeds under /api/v1."""

from nabajk.tests.conftest import make_announcement, make_race


class TestAnnouncementsFeed:
    def test_visible_announcements_only(self, anon_client, fake_db):
        fake_db.store["announcements"].extend([
            make_announcement(title="Shown", language="en"),
            make_announcement(title="Off", language="en", active=False),
            make_announcement(title="Expired", language="en", end_date="2000-01-01T00:00:00+00:00"),
            make_announcement(title="Slovensko", language="sl"),
        ])
        resp = anon_client.get("/api/v1/announcements?lang=en")
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 1
        assert body["results"][0]["title"] == "Shown"
        assert set(body["results"][0]) == {"id", "title", "body", "language", "start_date", "end_date"}

    def test_unknown_language(self, anon_client):
        assert anon_client.get("/api/v1/announcements?lang=de").status_code == 400


class TestRacesFeed:
    def test_upcoming_only(self, anon_client, fake_db):
        fake_db.store["races"].extend([
            make_race(name="Past", race_date="2000-05-01"),
            make_race(name="Later", race_date="2099-09-01"),
            make_race(name="Sooner", race_date="2099-06-01"),
        ])
        body = anon_client.get("/api/v1/races").json()
        assert [r["name"] for r in body["results"]] == ["Sooner", "Later"]

    def test_limit(self, anon_client, fake_db):
        fake_db.store["races"].extend(make_race(race_date=f"2099-06-{d:02d}") for d in range(1, 6))
        assert anon_client.get("/api/v1/races?limit=2").json()["count"] == 2

    def test_rate_limit(self, anon_client, fake_db):
        for _ in range(60):
            assert anon_client.get("/api/v1/races").status_code == 200
        assert anon_client.get("/api/v1/races").status_code == 429
