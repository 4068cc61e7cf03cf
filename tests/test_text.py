from datetime import datetime, timedelta, timezone

from smartchips.services.text import relative_time, trim_string


class TestTrimString:

    def test_trims_long_string(self):
        want = "This is a very long string..."
        result = trim_string("This is a very long string that should be trimmed.", 30)
        assert result == want
        assert len(result) <= 30

    def test_whitespace_at_cut_is_stripped(self):
        assert trim_string("hello world foo", 9) == "hello..."

    def test_keeps_short_string(self):
        assert trim_string("This is a short string.", 50) == "This is a short string."

    def test_exact_length_is_not_trimmed(self):
        assert trim_string("abcde", 5) == "abcde"

    def test_drops_suffix_when_it_does_not_fit(self):
        assert trim_string("short string", 5, ".............") == "short"

    def test_custom_suffix(self):
        assert trim_string("abcdefghij", 6, "~") == "abcde~"


class TestRelativeTime:
    now = datetime(2025, 1, 30, 12, 0, 0, tzinfo=timezone.utc)

    def test_today(self):
        assert relative_time(self.now, self.now - timedelta(hours=1)) == "today"

    def test_just_under_a_day_is_today(self):
        assert relative_time(self.now, self.now - timedelta(hours=23, minutes=59)) == "today"

    def test_yesterday(self):
        assert relative_time(self.now, self.now - timedelta(hours=25)) == "yesterday"

    def test_days(self):
        assert relative_time(self.now, self.now - timedelta(days=3)) == "3 days ago"

    def test_weeks(self):
        assert relative_time(self.now, self.now - timedelta(days=15)) == "2 weeks ago"

    def test_months_use_calendar_difference(self):
        now = datetime(2025, 4, 30, 12, 0, 0, tzinfo=timezone.utc)
        then = datetime(2025, 1, 27, 11, 0, 0, tzinfo=timezone.utc)
        assert relative_time(now, then) == "3 months ago"

    def test_month_not_complete_until_day_reached(self):
        now = datetime(2025, 4, 20, 12, 0, 0, tzinfo=timezone.utc)
        then = datetime(2025, 1, 27, 11, 0, 0, tzinfo=timezone.utc)
        assert relative_time(now, then) == "2 months ago"

    def test_thirty_days_is_at_least_one_month(self):
        now = datetime(2025, 4, 30, 12, 0, 0, tzinfo=timezone.utc)
        assert relative_time(now, now - timedelta(days=30)) == "1 months ago"

    def test_years_are_counted_in_months(self):
        now = datetime(2025, 1, 30, 12, 0, 0, tzinfo=timezone.utc)
        then = datetime(2023, 1, 30, 12, 0, 0, tzinfo=timezone.utc)
        assert relative_time(now, then) == "24 months ago"
