"""Recurrence Engine for OpsRules.

Decides whether a checklist obligation is due on a calendar day:
- `is_due` is the single source of truth (pure, never raises)
- `dateutil.rrule` lists occurrences in a window for complete rules and
  renders RFC 5545 RRULE text for calendar export

Weekday numbering is Sunday = 0 ... Saturday = 6.

IMPORTANT: This module must NOT import from managers or store.
Only import from const.py, type_defs.py, utils and standard libraries.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Any, ClassVar

from dateutil.rrule import DAILY, FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, rrule

from .. import const
from ..utils.dt_utils import (
    dt_date_range,
    dt_days_between,
    dt_parse_date,
    dt_to_local_date,
    dt_weekday,
)

if TYPE_CHECKING:
    from ..type_defs import ChecklistItem, RecurrenceRule


def _coerce_int(value: Any) -> int | None:
    """Return value as int, or None when it is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class RecurrenceEngine:
    """Evaluates one recurrence rule against calendar days.

    Defaults applied instead of raising:
    - Missing rule, non-mapping rule or missing type: daily
    - Unknown type: daily (logged as a warning)
    - weekly/monthly without day_of_week/day_of_month: due every day, the
      same observable behaviour as comparing the target day to itself.
      Configuration validation rejects such rules before they are saved.
    - every_x_days: interval below 2 (or missing) is raised to 2; without
      start_date nor anchor the rule is never due
    - specific_date without a date: never due
    """

    # Sunday-first to match day_of_week numbering
    RRULE_WEEKDAYS: ClassVar[list] = [SU, MO, TU, WE, TH, FR, SA]
    RRULE_DAY_CODES: ClassVar[list[str]] = ["SU", "MO", "TU", "WE", "TH", "FR", "SA"]

    def __init__(
        self,
        rule: RecurrenceRule | dict[str, Any] | None,
        anchor: str | date | datetime | None = None,
    ) -> None:
        """Initialize the engine for one rule.

        Args:
            rule: RecurrenceRule dict, or None for daily.
            anchor: Fallback start for every_x_days when the rule carries no
                start_date (normally the item's creation timestamp).
        """
        if rule is not None and not isinstance(rule, Mapping):
            const.LOGGER.debug(
                "RecurrenceEngine: Rule %r is not a mapping, evaluating as daily", rule
            )
            rule = None
        self._rule: dict[str, Any] = dict(rule or {})

        rule_type = self._rule.get(const.DATA_RULE_TYPE) or const.RECURRENCE_DAILY
        if rule_type not in const.RECURRENCE_TYPES:
            const.LOGGER.warning(
                "RecurrenceEngine: Unknown rule type '%s', evaluating as daily",
                rule_type,
            )
            rule_type = const.RECURRENCE_DAILY
        self._type: str = rule_type

        self._day_of_week = _coerce_int(self._rule.get(const.DATA_RULE_DAY_OF_WEEK))
        self._day_of_month = _coerce_int(self._rule.get(const.DATA_RULE_DAY_OF_MONTH))
        self._interval = max(
            const.MIN_INTERVAL_DAYS,
            _coerce_int(self._rule.get(const.DATA_RULE_INTERVAL_DAYS)) or 0,
        )
        self._specific_date = dt_parse_date(
            self._rule.get(const.DATA_RULE_SPECIFIC_DATE)
        )

        # Two-level anchor lookup: rule start_date, then the caller's anchor
        self._start_date = dt_parse_date(
            self._rule.get(const.DATA_RULE_START_DATE)
        ) or dt_parse_date(anchor)

    @property
    def rule_type(self) -> str:
        """Effective rule type after defaults."""
        return self._type

    @property
    def start_date(self) -> date | None:
        """Resolved every_x_days anchor (rule start_date or fallback anchor)."""
        return self._start_date

    @property
    def is_complete(self) -> bool:
        """True when every field the rule type discriminates on is usable."""
        if self._type == const.RECURRENCE_WEEKLY:
            return self._day_of_week is not None
        if self._type == const.RECURRENCE_MONTHLY:
            return self._day_of_month is not None
        if self._type == const.RECURRENCE_EVERY_X_DAYS:
            return self._start_date is not None
        if self._type == const.RECURRENCE_SPECIFIC_DATE:
            return self._specific_date is not None
        return True

    # =========================================================================
    # Evaluation
    # =========================================================================

    def is_due(self, target: str | date | datetime | None) -> bool:
        """Return True if the obligation is due on `target`.

        Args:
            target: Calendar day (date or ISO string).

        Returns:
            True if due. Unparseable targets are never due.
        """
        target_date = dt_parse_date(target)
        if target_date is None:
            const.LOGGER.debug("RecurrenceEngine: Unparseable target %r", target)
            return False

        if self._type == const.RECURRENCE_DAILY:
            return True

        if self._type == const.RECURRENCE_WEEKLY:
            if self._day_of_week is None:
                const.LOGGER.debug(
                    "RecurrenceEngine: weekly rule without day_of_week, due every day"
                )
                return True
            return dt_weekday(target_date) == self._day_of_week

        if self._type == const.RECURRENCE_MONTHLY:
            if self._day_of_month is None:
                const.LOGGER.debug(
                    "RecurrenceEngine: monthly rule without day_of_month, due every day"
                )
                return True
            return target_date.day == self._day_of_month

        if self._type == const.RECURRENCE_EVERY_X_DAYS:
            if self._start_date is None:
                const.LOGGER.debug(
                    "RecurrenceEngine: every_x_days rule without anchor, never due"
                )
                return False
            if target_date < self._start_date:
                return False
            return dt_days_between(self._start_date, target_date) % self._interval == 0

        # specific_date: single occurrence ever
        return self._specific_date is not None and target_date == self._specific_date

    def get_occurrences(
        self,
        start: str | date,
        end: str | date,
        limit: int = const.MAX_OCCURRENCES,
    ) -> list[date]:
        """List the due days within a window.

        Args:
            start: Window start (inclusive).
            end: Window end (inclusive).
            limit: Maximum occurrences to return (safety limit).

        Returns:
            Sorted list of due dates, empty for an invalid window.
        """
        start_date = dt_parse_date(start)
        end_date = dt_parse_date(end)
        if start_date is None or end_date is None or end_date < start_date:
            return []

        if self._type == const.RECURRENCE_SPECIFIC_DATE:
            if self._specific_date and start_date <= self._specific_date <= end_date:
                return [self._specific_date]
            return []

        rule = self._build_rrule(start_date) if self.is_complete else None
        if rule is None:
            # Incomplete rules: scan days with the same evaluation as is_due
            occurrences = [
                day for day in dt_date_range(start_date, end_date) if self.is_due(day)
            ]
            return occurrences[:limit]

        window_start = datetime.combine(start_date, time.min)
        window_end = datetime.combine(end_date, time.min)
        occurrences = []
        for occurrence in rule.xafter(window_start, count=limit, inc=True):
            if occurrence > window_end:
                break
            occurrences.append(occurrence.date())
        return occurrences

    def get_next_occurrence(
        self, after: str | date, include_after: bool = False
    ) -> date | None:
        """Return the first due day after `after` (or on it if include_after).

        Complete rules are answered by their rrule, however far ahead the
        next day is. Rules without an rrule form (incomplete or out of range
        fields) are scanned at most MAX_OCCURRENCES days ahead.
        """
        after_date = dt_parse_date(after)
        if after_date is None:
            return None

        if self._type == const.RECURRENCE_SPECIFIC_DATE:
            if self._specific_date is None:
                return None
            if self._specific_date > after_date or (
                include_after and self._specific_date == after_date
            ):
                return self._specific_date
            return None

        first = after_date if include_after else after_date + timedelta(days=1)
        rule = self._build_rrule(first) if self.is_complete else None
        if rule is not None:
            occurrence = rule.after(datetime.combine(first, time.min), inc=True)
            return occurrence.date() if occurrence else None

        last = first + timedelta(days=const.MAX_OCCURRENCES)
        occurrences = self.get_occurrences(first, last, limit=1)
        return occurrences[0] if occurrences else None

    # =========================================================================
    # Export / Display
    # =========================================================================

    def to_rrule_string(self) -> str:
        """Generate RFC 5545 RRULE string for iCal export.

        Returns:
            RRULE string (e.g., "FREQ=WEEKLY;BYDAY=TU")
            or empty string if not representable.
        """
        if self._type == const.RECURRENCE_DAILY:
            return "FREQ=DAILY;INTERVAL=1"
        if self._type == const.RECURRENCE_WEEKLY and self._valid_weekday():
            return f"FREQ=WEEKLY;BYDAY={self.RRULE_DAY_CODES[self._day_of_week]}"
        if self._type == const.RECURRENCE_MONTHLY and self._valid_month_day():
            return f"FREQ=MONTHLY;BYMONTHDAY={self._day_of_month}"
        if self._type == const.RECURRENCE_EVERY_X_DAYS:
            return f"FREQ=DAILY;INTERVAL={self._interval}"

        # specific_date is a single event, incomplete rules have no pattern
        return ""

    def describe(self) -> str:
        """Short human-readable label for admin listings."""
        if self._type == const.RECURRENCE_DAILY:
            return "Daily"
        if self._type == const.RECURRENCE_WEEKLY:
            if not self._valid_weekday():
                return "Weekly"
            return f"Weekly on {const.WEEKDAY_LABELS[self._day_of_week]}"
        if self._type == const.RECURRENCE_MONTHLY:
            if not self._valid_month_day():
                return "Monthly"
            return f"Monthly on day {self._day_of_month}"
        if self._type == const.RECURRENCE_EVERY_X_DAYS:
            label = f"Every {self._interval} days"
            if self._start_date:
                label += f" from {self._start_date.isoformat()}"
            return label
        if self._specific_date:
            return f"On {self._specific_date.isoformat()}"
        return const.DISPLAY_UNKNOWN

    # =========================================================================
    # Private helpers
    # =========================================================================

    def _valid_weekday(self) -> bool:
        return self._day_of_week is not None and (
            const.WEEKDAY_SUNDAY <= self._day_of_week <= const.WEEKDAY_SATURDAY
        )

    def _valid_month_day(self) -> bool:
        return self._day_of_month is not None and (
            const.DAY_OF_MONTH_MIN <= self._day_of_month <= const.DAY_OF_MONTH_MAX
        )

    def _build_rrule(self, window_start: date) -> rrule | None:
        """Build the rrule equivalent of a complete rule.

        every_x_days starts at its anchor so the interval phase is kept;
        the other patterns start at the window.
        """
        dtstart = datetime.combine(window_start, time.min)

        if self._type == const.RECURRENCE_DAILY:
            return rrule(DAILY, dtstart=dtstart)
        if self._type == const.RECURRENCE_WEEKLY:
            if not self._valid_weekday():
                return None
            return rrule(
                WEEKLY,
                dtstart=dtstart,
                byweekday=self.RRULE_WEEKDAYS[self._day_of_week],
            )
        if self._type == const.RECURRENCE_MONTHLY:
            if not self._valid_month_day():
                return None
            # Months without this day are skipped, same as is_due
            return rrule(MONTHLY, dtstart=dtstart, bymonthday=self._day_of_month)
        if self._type == const.RECURRENCE_EVERY_X_DAYS and self._start_date:
            return rrule(
                DAILY,
                interval=self._interval,
                dtstart=datetime.combine(self._start_date, time.min),
            )
        return None


# =============================================================================
# Convenience functions
# =============================================================================


def is_due(
    rule: RecurrenceRule | dict[str, Any] | None,
    anchor: str | date | datetime | None,
    target: str | date | datetime | None,
) -> bool:
    """Return True if an obligation with `rule` is due on `target`.

    Args:
        rule: Recurrence rule, or None for daily.
        anchor: Fallback every_x_days start (item creation timestamp).
        target: Calendar day to evaluate.
    """
    return RecurrenceEngine(rule, anchor).is_due(target)


def get_item_anchor(item: ChecklistItem | dict[str, Any]) -> date | None:
    """Return the calendar day an item was created (its recurrence anchor)."""
    return dt_to_local_date(item.get(const.DATA_ITEM_CREATED_AT))


def is_item_due(
    item: ChecklistItem | dict[str, Any], target: str | date | datetime | None
) -> bool:
    """Return True if a checklist item is due on `target`.

    Anchor lookup is explicit: rule start_date first, then item created_at.
    """
    return is_due(item.get(const.DATA_ITEM_RECURRENCE), get_item_anchor(item), target)


def describe_rule(rule: RecurrenceRule | dict[str, Any] | None) -> str:
    """Short human-readable label for a recurrence rule."""
    return RecurrenceEngine(rule).describe()
