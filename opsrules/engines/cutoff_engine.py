"""Cutoff Engine - Pure logic for commission cutoff periods.

This engine provides stateless functions for:
- Resolving the configured period that contains a transaction date
- Validating a candidate period against the configured set

Periods are inclusive on both ends and must never overlap, so a date
matches at most one period. When no period matches, `resolve` returns None
and the caller applies its own default competence policy (see
helpers/competence_helpers.py).

Validation is a write-time check only. It must run inside the same
transaction (or lock) as the write, otherwise two concurrent writers can
both pass validation and insert overlapping periods.

ARCHITECTURE: Pure logic engine. The registry in store.py owns the lock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_parse_date, dt_parse_month

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from ..type_defs import CutoffPeriod


@dataclass(frozen=True)
class CutoffValidationResult:
    """Outcome of validating a cutoff period.

    Attributes:
        error: None when valid, otherwise one CUTOFF_ERROR_* kind
        field: The CutoffPeriod key that failed (None for overlaps)
        conflicting_id: Id of the existing period overlapped (overlaps only)
    """

    error: str | None = None
    field: str | None = None
    conflicting_id: str | None = None

    @property
    def ok(self) -> bool:
        """True when no rule was violated."""
        return self.error is None


class CutoffPeriodValidationError(Exception):
    """Raised when a cutoff period write is rejected.

    Attributes:
        result: The CutoffValidationResult describing the first violation
    """

    def __init__(self, result: CutoffValidationResult) -> None:
        """Initialize CutoffPeriodValidationError.

        Args:
            result: Failed validation result
        """
        self.result = result
        detail = f"Cutoff period rejected: {result.error}"
        if result.field:
            detail += f" (field={result.field})"
        if result.conflicting_id:
            detail += f" (overlaps={result.conflicting_id})"
        super().__init__(detail)


@dataclass(frozen=True)
class _ParsedPeriod:
    start: date
    end: date


def _parse_bounds(period: CutoffPeriod | dict[str, Any]) -> _ParsedPeriod | None:
    start = dt_parse_date(period.get(const.DATA_CUTOFF_START_DATE))
    end = dt_parse_date(period.get(const.DATA_CUTOFF_END_DATE))
    if start is None or end is None:
        return None
    return _ParsedPeriod(start, end)


class CutoffEngine:
    """Pure logic engine for cutoff period resolution and validation.

    All methods are static - no instance state.
    """

    @staticmethod
    def resolve(
        periods: Iterable[CutoffPeriod | dict[str, Any]],
        on_date: str | date,
    ) -> CutoffPeriod | dict[str, Any] | None:
        """Return the period whose [start_date, end_date] contains `on_date`.

        Periods with unparseable bounds are skipped. None is a valid "no
        configured period" answer, not an error.
        """
        target = dt_parse_date(on_date)
        if target is None:
            const.LOGGER.debug("CutoffEngine: Unparseable date %r", on_date)
            return None

        for period in periods:
            bounds = _parse_bounds(period)
            if bounds is None:
                const.LOGGER.debug(
                    "CutoffEngine: Skipping period %s with invalid bounds",
                    period.get(const.DATA_CUTOFF_ID),
                )
                continue
            if bounds.start <= target <= bounds.end:
                return period
        return None

    @staticmethod
    def resolve_competence_month(
        periods: Iterable[CutoffPeriod | dict[str, Any]],
        on_date: str | date,
    ) -> str | None:
        """Return the competence month of the matching period, if any."""
        period = CutoffEngine.resolve(periods, on_date)
        if period is None:
            return None
        return period.get(const.DATA_CUTOFF_COMPETENCE_MONTH)

    @staticmethod
    def periods_overlap(
        first: CutoffPeriod | dict[str, Any],
        second: CutoffPeriod | dict[str, Any],
    ) -> bool:
        """Check two periods for any shared day (bounds inclusive)."""
        a = _parse_bounds(first)
        b = _parse_bounds(second)
        if a is None or b is None:
            return False
        return a.start <= b.end and a.end >= b.start

    @staticmethod
    def validate(
        candidate: CutoffPeriod | dict[str, Any],
        existing: Iterable[CutoffPeriod | dict[str, Any]],
        excluding_self: bool = False,
    ) -> CutoffValidationResult:
        """Validate a candidate period, reporting the first violated rule.

        Checks, in order:
        1. name, start_date, end_date and competence_month are present
           (unparseable dates/month count as missing)
        2. start_date <= end_date
        3. competence_month is a month strictly after end_date's month
        4. no overlap with `existing`; with excluding_self the record sharing
           the candidate's id is ignored (update of that record)

        Returns:
            CutoffValidationResult (ok when error is None)
        """
        for field in const.CUTOFF_REQUIRED_FIELDS:
            value = candidate.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                return CutoffValidationResult(
                    error=const.CUTOFF_ERROR_MISSING_FIELD, field=field
                )

        start = dt_parse_date(candidate.get(const.DATA_CUTOFF_START_DATE))
        if start is None:
            return CutoffValidationResult(
                error=const.CUTOFF_ERROR_MISSING_FIELD,
                field=const.DATA_CUTOFF_START_DATE,
            )
        end = dt_parse_date(candidate.get(const.DATA_CUTOFF_END_DATE))
        if end is None:
            return CutoffValidationResult(
                error=const.CUTOFF_ERROR_MISSING_FIELD,
                field=const.DATA_CUTOFF_END_DATE,
            )
        competence = dt_parse_month(candidate.get(const.DATA_CUTOFF_COMPETENCE_MONTH))
        if competence is None:
            return CutoffValidationResult(
                error=const.CUTOFF_ERROR_MISSING_FIELD,
                field=const.DATA_CUTOFF_COMPETENCE_MONTH,
            )

        if start > end:
            return CutoffValidationResult(
                error=const.CUTOFF_ERROR_INVALID_ORDERING,
                field=const.DATA_CUTOFF_END_DATE,
            )

        if (competence.year, competence.month) <= (end.year, end.month):
            return CutoffValidationResult(
                error=const.CUTOFF_ERROR_COMPETENCE_BEFORE_END,
                field=const.DATA_CUTOFF_COMPETENCE_MONTH,
            )

        candidate_id = candidate.get(const.DATA_CUTOFF_ID)
        for other in existing:
            if excluding_self and candidate_id and (
                other.get(const.DATA_CUTOFF_ID) == candidate_id
            ):
                continue
            if CutoffEngine.periods_overlap(candidate, other):
                const.LOGGER.debug(
                    "CutoffEngine: Candidate %s overlaps period %s",
                    candidate_id,
                    other.get(const.DATA_CUTOFF_ID),
                )
                return CutoffValidationResult(
                    error=const.CUTOFF_ERROR_OVERLAPS_EXISTING,
                    conflicting_id=other.get(const.DATA_CUTOFF_ID),
                )

        return CutoffValidationResult()

    @staticmethod
    def find_overlaps(
        periods: Iterable[CutoffPeriod | dict[str, Any]],
    ) -> list[tuple[str | None, str | None]]:
        """List id pairs of overlapping periods in an already stored set.

        Used to audit configuration imported without going through validate.
        """
        period_list = list(periods)
        conflicts = []
        for index, first in enumerate(period_list):
            for second in period_list[index + 1 :]:
                if CutoffEngine.periods_overlap(first, second):
                    conflicts.append(
                        (
                            first.get(const.DATA_CUTOFF_ID),
                            second.get(const.DATA_CUTOFF_ID),
                        )
                    )
        return conflicts
