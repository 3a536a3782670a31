"""Tests for utils/dt_utils.py."""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from opsrules.utils import dt_utils

SAO_PAULO = ZoneInfo("America/Sao_Paulo")


class TestTimezone:
    """Default time zone configuration and "today"."""

    def test_set_by_key(self) -> None:
        """IANA keys are accepted."""
        dt_utils.set_default_timezone("America/Sao_Paulo")
        assert dt_utils.get_default_timezone() == SAO_PAULO

    @freeze_time("2024-01-04 01:30:00")
    def test_today_depends_on_zone(self) -> None:
        """01:30 UTC on the 4th is still the 3rd in Sao Paulo."""
        assert dt_utils.dt_today_local() == date(2024, 1, 4)
        assert dt_utils.dt_today_local(SAO_PAULO) == date(2024, 1, 3)

        dt_utils.set_default_timezone(SAO_PAULO)
        assert dt_utils.dt_today_iso() == "2024-01-03"

    @freeze_time("2024-01-04 01:30:00")
    def test_now_local(self) -> None:
        """dt_now_local is aware and in the default zone."""
        dt_utils.set_default_timezone(SAO_PAULO)
        now = dt_utils.dt_now_local()
        assert now.tzinfo == SAO_PAULO
        assert (now.date(), now.hour) == (date(2024, 1, 3), 22)
        assert now == datetime(2024, 1, 4, 1, 30, tzinfo=UTC)

    @freeze_time("2024-01-04 01:30:00")
    def test_now_utc(self) -> None:
        """dt_now_utc is aware."""
        assert dt_utils.dt_now_utc() == datetime(2024, 1, 4, 1, 30, tzinfo=UTC)


class TestParseDate:
    """dt_parse_date input formats."""

    @pytest.mark.parametrize(
        "value",
        [
            "2024-04-07",
            " 2024-04-07 ",
            "07/04/2024",
            "2024/04/07",
            "2024-04-07T10:30:00+00:00",
            "2024-04-07 10:30:00",
            date(2024, 4, 7),
            datetime(2024, 4, 7, 10, 30, tzinfo=UTC),
        ],
    )
    def test_accepted(self, value) -> None:
        """Every supported shape parses to April 7th."""
        assert dt_utils.dt_parse_date(value) == date(2024, 4, 7)

    @pytest.mark.parametrize("value", [None, "", "soon", "2024-02-30", 20240407])
    def test_rejected(self, value) -> None:
        """Anything else is None."""
        assert dt_utils.dt_parse_date(value) is None

    def test_aware_datetime_uses_default_zone(self) -> None:
        """Aware timestamps are converted before taking the day."""
        dt_utils.set_default_timezone(SAO_PAULO)
        assert dt_utils.dt_parse_date("2024-01-04T01:30:00+00:00") == date(2024, 1, 3)

    def test_naive_timestamp_is_local(self) -> None:
        """Naive timestamps are not shifted."""
        dt_utils.set_default_timezone(SAO_PAULO)
        assert dt_utils.dt_to_local_date("2024-01-04T01:30:00") == date(2024, 1, 4)


class TestMonths:
    """Competence month parsing and arithmetic."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2024-02", date(2024, 2, 1)),
            ("2024-2", date(2024, 2, 1)),
            ("2024-02-15", date(2024, 2, 1)),
            (date(2024, 2, 15), date(2024, 2, 1)),
            ("2024-13", None),
            ("2024-02-45", None),
            ("2023-02-29", None),
            ("2024-02-29", date(2024, 2, 1)),
            ("0000-05", None),
            ("2024-00", None),
            ("Feb 2024", None),
            (None, None),
        ],
    )
    def test_parse_month(self, value, expected) -> None:
        """Months parse to their first day."""
        assert dt_utils.dt_parse_month(value) == expected

    def test_format_month(self) -> None:
        """Zero padded YYYY-MM."""
        assert dt_utils.dt_format_month(date(2024, 3, 9)) == "2024-03"

    def test_add_months_clamps(self) -> None:
        """Jan 31 + 1 month is the last day of February."""
        assert dt_utils.dt_add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert dt_utils.dt_add_months(date(2024, 12, 1), 2) == date(2025, 2, 1)


class TestDayHelpers:
    """Weekday numbering and ranges."""

    def test_weekday_sunday_first(self) -> None:
        """Sunday is 0, Saturday is 6."""
        assert dt_utils.dt_weekday(date(2024, 1, 7)) == 0
        assert dt_utils.dt_weekday(date(2024, 1, 1)) == 1
        assert dt_utils.dt_weekday(date(2024, 1, 6)) == 6

    def test_days_between(self) -> None:
        """Signed whole days."""
        assert dt_utils.dt_days_between(date(2024, 1, 1), date(2024, 1, 7)) == 6
        assert dt_utils.dt_days_between(date(2024, 1, 7), date(2024, 1, 1)) == -6

    def test_date_range_inclusive(self) -> None:
        """Both ends are yielded, an inverted range yields nothing."""
        assert list(dt_utils.dt_date_range(date(2024, 2, 28), date(2024, 3, 1))) == [
            date(2024, 2, 28),
            date(2024, 2, 29),
            date(2024, 3, 1),
        ]
        assert list(dt_utils.dt_date_range(date(2024, 3, 1), date(2024, 2, 28))) == []
