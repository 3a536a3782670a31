"""Type definitions for OpsRules data structures.

Records arrive as plain dicts from the persistence layer (JSON rows), so
the static shapes are described with TypedDict. TypedDict is STATIC
ANALYSIS ONLY: the engines still read every field with `.get()` and fall
back to documented defaults when a field is missing.

IMPORTANT: This file must NOT import from engines, managers or helpers to
avoid circular dependencies. Only import from typing.
"""

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

TemplateId = str  # UUID string
ItemId = str  # UUID string
UserId = str  # UUID string
CutoffPeriodId = str  # UUID string
ISODatetime = str  # ISO 8601 datetime string "2024-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2024-01-18"
ISOMonth = str  # Year-month string "2024-02"

RecurrenceType = Literal[
    "daily", "weekly", "monthly", "every_x_days", "specific_date"
]


# =============================================================================
# Recurrence
# =============================================================================


class RecurrenceRule(TypedDict):
    """Recurrence rule of a checklist item.

    Only `type` is always present; the remaining keys belong to one
    variant each:
    - weekly: day_of_week (0=Sunday ... 6=Saturday)
    - monthly: day_of_month (1-31)
    - every_x_days: interval_days (effective minimum 2), optional start_date
    - specific_date: specific_date
    """

    type: RecurrenceType
    day_of_week: NotRequired[int]
    day_of_month: NotRequired[int]
    interval_days: NotRequired[int]
    start_date: NotRequired[ISODate]
    specific_date: NotRequired[ISODate]


# =============================================================================
# Checklist Catalog
# =============================================================================


class ChecklistItem(TypedDict):
    """A single obligation inside a checklist template."""

    id: ItemId
    template_id: TemplateId
    text: str
    is_active: bool
    order_index: int
    created_at: ISODatetime  # Recurrence anchor when rule has no start_date
    recurrence: NotRequired[RecurrenceRule | None]  # Missing = daily


class ChecklistTemplate(TypedDict):
    """A checklist template (the unit of assignment)."""

    id: TemplateId
    title: str
    is_active: bool
    audience_scope: NotRequired[str]  # AUDIENCE_SCOPE_* (default any_role)
    items: NotRequired[list[ChecklistItem]]


class AssignmentOverride(TypedDict):
    """Explicit allow-list entry: template visible to this user only."""

    template_id: TemplateId
    user_id: UserId


class CompletionRecord(TypedDict):
    """Per-user, per-item, per-date completion flag."""

    item_id: ItemId
    user_id: UserId
    date: ISODate
    done: bool


class UserContext(TypedDict):
    """The user a query is resolved for."""

    id: UserId
    role: str  # ROLE_*
    name: NotRequired[str]


class ProgressSummary(TypedDict):
    """Aggregated completion for one user on one date."""

    completed: int
    total: int
    percent: int


# =============================================================================
# Cutoff Periods
# =============================================================================


class CutoffPeriod(TypedDict):
    """Named date window mapping transaction dates to a competence month.

    start_date and end_date are both inclusive.
    """

    id: CutoffPeriodId
    name: str
    start_date: ISODate
    end_date: ISODate
    competence_month: ISOMonth
