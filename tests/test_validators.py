"""
Tests for input validation utilities.
"""

import pytest
from datetime import date, datetime, time
from utils.validators import (
    validate_positive_integer,
    validate_date_format,
    parse_date,
    parse_time,
    sanitize_input
)


class TestValidatePositiveInteger:
    """Tests for id/count validation."""

    @pytest.mark.parametrize('value, expected', [
        (1, 1),
        ('7', 7),
        (' 12 ', 12),
        (3.0, 3),
    ])
    def test_valid(self, value, expected):
        valid, parsed, err = validate_positive_integer(value, 'cabin_id')
        assert valid is True
        assert parsed == expected
        assert err == ''

    @pytest.mark.parametrize('value', [0, -1, '0', 'abc', 1.5, True, False, [], '1.5'])
    def test_invalid(self, value):
        valid, parsed, err = validate_positive_integer(value, 'cabin_id')
        assert valid is False
        assert parsed is None
        assert 'cabin_id' in err

    @pytest.mark.parametrize('value', [None, ''])
    def test_missing(self, value):
        valid, _, err = validate_positive_integer(value, 'party_size')
        assert valid is False
        assert err == 'party_size is required'


class TestParseDate:
    """Tests for YYYY-MM-DD parsing."""

    def test_valid(self):
        assert parse_date('2025-11-10') == date(2025, 11, 10)
        assert parse_date(' 2025-11-10 ') == date(2025, 11, 10)

    def test_date_objects_pass_through(self):
        assert parse_date(date(2025, 11, 10)) == date(2025, 11, 10)
        assert parse_date(datetime(2025, 11, 10, 9, 30)) == date(2025, 11, 10)

    @pytest.mark.parametrize('value', ['', None, '10/11/2025', '2025-11-31', '2025-1-1x', 20251110])
    def test_invalid(self, value):
        assert parse_date(value) is None

    def test_validate_date_format(self):
        assert validate_date_format('2025-11-10') is True
        assert validate_date_format('2025/11/10') is False


class TestParseTime:
    """Tests for start-time parsing."""

    @pytest.mark.parametrize('value, expected', [
        ('18:00', time(18, 0)),
        ('7:05', time(7, 5)),
        ('18:00:30', time(18, 0, 30)),
        ('6:30 PM', time(18, 30)),
        ('6:30 pm', time(18, 30)),
        ('12:00 AM', time(0, 0)),
    ])
    def test_valid(self, value, expected):
        assert parse_time(value) == expected

    @pytest.mark.parametrize('value', ['', None, '24:00', '10h30', '13:00 PM', 'noon', 1800])
    def test_invalid(self, value):
        assert parse_time(value) is None


class TestSanitizeInput:
    """Tests for input sanitization."""

    def test_trims_whitespace(self):
        assert sanitize_input('  Reyes  ') == 'Reyes'

    def test_max_length(self):
        assert sanitize_input('abcdef', max_length=3) == 'abc'

    def test_empty(self):
        assert sanitize_input('') == ''
        assert sanitize_input(None) == ''
