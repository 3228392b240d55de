"""
Service layer helpers:
- common.py: clock, tokens, correlation id normalization, parsing
- export_service.py: participant rows and status labels
- utils/parsers.py: cookie and index parsing
"""

from datetime import datetime, timezone

import pytest

from lottery.errors import InvalidClientId
from lottery.models import Participant
from lottery.services.common import (
    MAX_CORRELATION_ID_LENGTH,
    correlation_short,
    generate_round_token,
    normalize_correlation_id,
    now_utc,
    parse_iso_datetime,
)
from lottery.services.export_service import participant_row, participant_status
from lottery.utils.parsers import _parse_index, _parse_int_optional


class TestCommonServiceUtils:
    """Tests for common.py utilities."""

    def test_now_utc_returns_utc_datetime(self):
        assert now_utc().tzinfo == timezone.utc

    def test_round_tokens_unique(self):
        tokens = [generate_round_token() for _ in range(100)]
        assert len(set(tokens)) == 100
        assert all(t.startswith("rnd_") for t in tokens)

    @pytest.mark.parametrize("value, expected", [(None, None), ("", None), ("   ", None), (" abc ", "abc"), (123, "123")])
    def test_normalize_correlation_id(self, value, expected):
        assert normalize_correlation_id(value) == expected

    def test_normalize_correlation_id_caps_length(self):
        assert normalize_correlation_id("d" * MAX_CORRELATION_ID_LENGTH) == "d" * MAX_CORRELATION_ID_LENGTH
        assert normalize_correlation_id(f"  {'d' * 128}  ") == "d" * 128
        with pytest.raises(InvalidClientId):
            normalize_correlation_id("d" * (MAX_CORRELATION_ID_LENGTH + 1))

    @pytest.mark.parametrize("value, expected", [(None, None), ("", None), ("a", "00a"), ("abcdef", "def")])
    def test_correlation_short(self, value, expected):
        assert correlation_short(value) == expected

    def test_parse_iso_datetime(self):
        assert parse_iso_datetime("2026-03-01T10:00:00Z") == datetime(2026, 3, 1, 10, tzinfo=timezone.utc)
        assert parse_iso_datetime("2026-03-01T10:00:00").tzinfo == timezone.utc
        assert parse_iso_datetime("not a date") is None
        assert parse_iso_datetime(None) is None


class TestExportRows:
    def _participant(self, **kwargs):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        return Participant(pid=3, joined_at=base, **kwargs)

    def test_status_labels(self):
        assert participant_status(self._participant()) == "PENDING"
        drawn_at = datetime(2026, 1, 1, 0, 5, tzinfo=timezone.utc)
        assert participant_status(self._participant(participated=True, win=True, draw_at=drawn_at)) == "WON"
        assert participant_status(self._participant(participated=True, win=False, draw_at=drawn_at)) == "LOST"

    def test_row(self):
        row = participant_row(self._participant(correlation_id="device-42"))
        assert row["pid"] == 3
        assert row["correlation_short"] == "-42"
        assert row["joined_at"] == "2026-01-01T00:00:00+00:00"
        assert row["draw_at"] is None


class TestParsers:
    @pytest.mark.parametrize("value, expected", [(None, None), ("", None), ("7", 7), (" 8 ", 8), ("abc", None), (True, None), (5, 5)])
    def test_parse_int_optional(self, value, expected):
        assert _parse_int_optional(value) == expected

    @pytest.mark.parametrize("value, expected", [("1", 1), (" 2 ", 2), (0, 0), (None, None), ("x", "x"), (1.5, 1.5)])
    def test_parse_index(self, value, expected):
        assert _parse_index(value) == expected
