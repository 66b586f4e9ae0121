"""
Tests for utils/utils.py — pure Python, no store.
"""
from datetime import date, datetime, timedelta

from utils.utils import clean_text, truncate, today, now


class TestCleanText:
    def test_strips_whitespace(self):
        assert clean_text('  Tokyo  ') == 'Tokyo'

    def test_none_is_empty(self):
        assert clean_text(None) == ''

    def test_whitespace_only_is_empty(self):
        assert clean_text(' \n\t ') == ''


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate('short', 10) == 'short'

    def test_exact_length_unchanged(self):
        assert truncate('x' * 10, 10) == 'x' * 10

    def test_long_text_gets_ellipsis(self):
        r = truncate('abcdefghij', 5)
        assert r == 'abcd…'
        assert len(r) == 5


class TestToday:
    def test_iso_date(self):
        assert today() == date.today().isoformat()


class TestNow:
    def test_timestamp_is_utc(self):
        stamp = datetime.fromisoformat(now())
        assert stamp.utcoffset() == timedelta(0)
