"""Tests for expiration parsing."""

from __future__ import annotations

import pytest

from shush.errors import ConfigurationError
from shush.expire import DEFAULT_EXPIRE_SECONDS, ExpireAfter, NoExpiration, parse_expiration


class TestParseExpiration:
    def test_none_keyword(self):
        assert parse_expiration("none", False) == NoExpiration(False)
        assert parse_expiration("none", True) == NoExpiration(True)

    def test_units(self):
        assert parse_expiration("1d10m1s", False) == ExpireAfter(87001, False)
        assert parse_expiration("1h30m") == ExpireAfter(5400)

    def test_unmatched_unit_tokens_contribute_nothing(self):
        assert parse_expiration("2hfoo", False) == ExpireAfter(7200, False)

    def test_clock(self):
        assert parse_expiration("10:10:1", False) == ExpireAfter(36601, False)
        assert parse_expiration("5:00") == ExpireAfter(300)

    def test_clock_non_numeric_is_fatal(self):
        with pytest.raises(ConfigurationError):
            parse_expiration("1:xx:00")

    def test_clock_too_many_fields(self):
        with pytest.raises(ConfigurationError):
            parse_expiration("1:1:1:1")

    def test_plain_seconds(self):
        assert parse_expiration("300") == ExpireAfter(300, False)

    def test_defaults(self):
        assert parse_expiration(None, False) == ExpireAfter(DEFAULT_EXPIRE_SECONDS, False)
        assert parse_expiration(None, True) == NoExpiration(True)

    def test_malformed_falls_back_to_two_hours(self):
        assert parse_expiration("200b", False) == ExpireAfter(7200, False)

    def test_expire_on_resolve_carried(self):
        assert parse_expiration("60", True) == ExpireAfter(60, True)


class TestDisplay:
    @pytest.mark.parametrize("policy,text", [
        (NoExpiration(False), "never expire"),
        (NoExpiration(True), "not expire until resolution"),
        (ExpireAfter(30, False), "expire in 30 seconds"),
        (ExpireAfter(30, True), "expire in 30 seconds or on resolution"),
    ])
    def test_str(self, policy, text):
        assert str(policy) == text
