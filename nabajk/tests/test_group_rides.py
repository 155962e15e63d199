"""Tests for group rides service — validation, filters, cancel/restore."""

from nabajk.tests.conftest import make_group_ride


class TestValidateGroupRide:
    def test_valid(self):
        from nabajk.services.group_rides import validate_group_ride

        data = {"title": "Kava", "ride_date": "2026-05-10", "ride_time": "08:00",
                "region": "gorenjska", "meeting_point": "Kranj"}
        assert validate_group_ride(data) == {}

    def test_errors(self):
        from nabajk.services.group_rides import validate_group_ride

        errors = validate_group_ride({"title": "", "ride_date": "10.05.2026", "ride_time": "8am",
                                      "region": "", "meeting_point": ""})
        assert set(errors) == {"title", "ride_date", "ride_time", "region", "meeting_point"}


class TestFilterGroupRides:
    def _rides(self):
        return [
            make_group_ride(title="Jutranja kava", meeting_point="Ljubljana", region="osrednja_slovenija"),
            make_group_ride(title="Krvavec", meeting_point="Cerklje", region="gorenjska"),
            make_group_ride(title="Odpovedana", meeting_point="Ljubljana", cancelled=True),
        ]

    def test_hides_cancelled_by_default(self):
        from nabajk.services.group_rides import filter_group_rides

        titles = [r["title"] for r in filter_group_rides(self._rides())]
        assert "Odpovedana" not in titles
        assert len(filter_group_rides(self._rides(), show_cancelled=True)) == 3

    def test_search_title_or_meeting_point(self):
        from nabajk.services.group_rides import filter_group_rides

        assert [r["title"] for r in filter_group_rides(self._rides(), search="cerklje")] == ["Krvavec"]
        assert len(filter_group_rides(self._rides(), search="ljubljana", show_cancelled=True)) == 2

    def test_region(self):
        from nabajk.services.group_rides import filter_group_rides

        assert [r["title"] for r in filter_group_rides(self._rides(), region="gorenjska")] == ["Krvavec"]


class TestGetGroupRides:
    def test_ordered_by_date_then_time(self, fake_db):
        from nabajk.services.group_rides import get_group_rides

        fake_db.store["group_rides"].extend([
            make_group_ride(title="C", ride_date="2026-05-11", ride_time="07:00:00"),
            make_group_ride(title="B", ride_date="2026-05-10", ride_time="17:00:00"),
            make_group_ride(title="A", ride_date="2026-05-10", ride_time="08:00:00"),
        ])
        assert [r["title"] for r in get_group_rides()] == ["A", "B", "C"]


class TestCancelRestore:
    def test_cancel_then_restore(self, fake_db):
        from nabajk.services.group_rides import cancel_group_ride, restore_group_ride

        ride = make_group_ride()
        fake_db.store["group_rides"].append(ride)

        assert cancel_group_ride(ride["id"])["cancelled"] is True
        assert restore_group_ride(ride["id"])["cancelled"] is False
        assert len(fake_db.store["group_rides"]) == 1

    def test_missing_ride(self, fake_db):
        from nabajk.services.group_rides import cancel_group_ride, delete_group_ride

        assert cancel_group_ride("missing") == {}
        assert delete_group_ride("missing") is False
