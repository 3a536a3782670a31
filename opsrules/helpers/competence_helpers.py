"""Competence month assignment for commission installments.

A paid installment is attributed to a competence month:
1. If a configured cutoff period contains the paid date, its
   competence_month wins.
2. Otherwise the monthly cutoff-day table applies: a date on or before
   that month's cutoff day belongs to the NEXT month, a date after it to
   the month after next.

CutoffEngine only answers "which configured period"; step 2 lives here.

Month arithmetic starts from day 1 of the paid month.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.cutoff_engine import CutoffEngine
from ..utils.dt_utils import dt_add_months, dt_format_month, dt_parse_date

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import date

    from ..type_defs import CutoffPeriod


def get_cutoff_day(
    month: int, cutoff_days: Mapping[int, int] | None = None
) -> int:
    """Return the last day of `month` that still rolls to the next month."""
    table = const.DEFAULT_MONTHLY_CUTOFF_DAYS if cutoff_days is None else cutoff_days
    return table.get(month, const.DEFAULT_CUTOFF_DAY)


def fallback_competence_month(
    paid_date: str | date,
    cutoff_days: Mapping[int, int] | None = None,
) -> str | None:
    """Apply the monthly cutoff-day table to a paid date.

    Returns:
        "YYYY-MM", or None when the date cannot be parsed

    Examples:
        fallback_competence_month("2024-01-19") → "2024-02"
        fallback_competence_month("2024-01-20") → "2024-03"
        fallback_competence_month("2024-12-31") → "2025-02"
    """
    parsed = dt_parse_date(paid_date)
    if parsed is None:
        return None

    months_ahead = 1 if parsed.day <= get_cutoff_day(parsed.month, cutoff_days) else 2
    return dt_format_month(dt_add_months(parsed.replace(day=1), months_ahead))


def calculate_competence_month(
    periods: Iterable[CutoffPeriod | dict[str, Any]],
    paid_date: str | date,
    cutoff_days: Mapping[int, int] | None = None,
) -> str | None:
    """Return the competence month for a paid date.

    Configured periods first, monthly cutoff table otherwise.
    """
    competence = CutoffEngine.resolve_competence_month(periods, paid_date)
    if competence:
        return competence

    const.LOGGER.debug(
        "No cutoff period covers %s, using monthly cutoff table", paid_date
    )
    return fallback_competence_month(paid_date, cutoff_days)
