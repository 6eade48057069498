import re

import pytest

from app.util import (
    extract_bearer_token,
    is_valid_email,
    normalize_email,
    prompt_preview,
    utc_now_iso,
    waitlist_entry_id,
)


# --- email ---

class TestEmail:
    @pytest.mark.parametrize("email", ["a@b.co", "first.last+tag@example.org", "  a@b.co  "])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["", "plain", "a@b", "a b@c.de", "@example.com"])
    def test_invalid(self, email):
        assert not is_valid_email(email)

    def test_normalize(self):
        assert normalize_email("  Mixed@Example.COM ") == "mixed@example.com"


# --- bearer tokens ---

class TestExtractBearerToken:
    def test_bearer(self):
        assert extract_bearer_token("Bearer abc.def") == "abc.def"

    def test_bare(self):
        assert extract_bearer_token("abc.def") == "abc.def"

    @pytest.mark.parametrize("header", [None, "", "Bearer ", "  "])
    def test_empty(self, header):
        assert extract_bearer_token(header) is None


class TestMisc:
    def test_waitlist_entry_id_shape(self):
        assert re.fullmatch(r"WL-\d{13}-[a-z0-9]{9}", waitlist_entry_id())

    def test_waitlist_entry_ids_differ(self):
        assert waitlist_entry_id() != waitlist_entry_id()

    def test_prompt_preview(self):
        assert prompt_preview("short") == "short"
        assert prompt_preview("x" * 60) == "x" * 50 + "..."

    def test_utc_now_iso(self):
        assert utc_now_iso().endswith("+00:00")
