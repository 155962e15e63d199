"""Tests for waitlist signups — normalization, duplicates, dev mode."""

from unittest.mock import patch

import pytest


class TestNormalizeEmail:
    def test_trims_and_lowercases(self):
        from nabajk.services.waitlist import normalize_email

        assert normalize_email("  Ana@Example.SI ") == "ana@example.si"

    @pytest.mark.parametrize("email", ["", "ana", "ana@", "ana@example", "a na@example.si", "@x.si"])
    def test_rejects(self, email):
        from nabajk.services.waitlist import normalize_email

        assert normalize_email(email) is None


class TestAddToWaitlist:
    def test_stores_normalized_email(self, fake_db):
        from nabajk.services.waitlist import add_to_waitlist

        assert add_to_waitlist(" Ana@Example.si ", "sl") == "ok"
        assert fake_db.store["waitlist"][0]["email"] == "ana@example.si"
        assert fake_db.store["waitlist"][0]["locale"] == "sl"

    def test_duplicate(self, fake_db):
        from nabajk.services.waitlist import add_to_waitlist

        add_to_waitlist("ana@example.si", "sl")
        assert add_to_waitlist("ANA@example.si", "en") == "duplicate"
        assert len(fake_db.store["waitlist"]) == 1

    def test_other_database_errors(self, fake_db):
        from nabajk.services.waitlist import add_to_waitlist

        fake_db.reject("waitlist", lambda row: True, message="permission denied", code="42501")
        assert add_to_waitlist("ana@example.si", "sl") == "error"

    def test_invalid_email_or_locale(self, fake_db):
        from nabajk.services.waitlist import add_to_waitlist

        assert add_to_waitlist("nope", "sl") == "invalid"
        assert add_to_waitlist("ana@example.si", "de") == "invalid"
        assert fake_db.store["waitlist"] == []

    def test_dev_mode_without_supabase(self, fake_db):
        from nabajk.services.waitlist import add_to_waitlist

        with patch("nabajk.supabase_client.is_configured", return_value=False):
            assert add_to_waitlist("ana@example.si", "en") == "ok"
        assert fake_db.store["waitlist"] == []


class TestWaitlistCounts:
    def test_counts_per_locale(self, fake_db):
        from nabajk.services.waitlist import waitlist_counts

        fake_db.store["waitlist"].extend([
            {"email": "a@x.si", "locale": "sl"},
            {"email": "b@x.si", "locale": "sl"},
            {"email": "c@x.si", "locale": "en"},
        ])
        assert waitlist_counts() == {"sl": 2, "en": 1, "total": 3}
