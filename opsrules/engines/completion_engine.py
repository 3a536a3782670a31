"""Completion Engine - Pure logic for checklist completion tracking.

This engine provides stateless functions for:
- Toggling and setting the done flag of (item, user, date)
- Aggregating progress over the items due on a date
- Detecting the one-shot "just reached 100%" transition

Completion records live in an external store keyed by (item_id, user_id,
date). The engine only reads and writes through the store's get_done /
set_done methods; the store must make set_done an atomic upsert.

NOTE: toggle is a negation, not "mark complete". Calling it twice (UI
double click, network retry) restores the previous state. Use
set_completion when the caller means an absolute value.

ARCHITECTURE: Pure logic engine. Persistence belongs in store.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_parse_date
from ..utils.math_utils import calculate_percentage
from .recurrence_engine import is_item_due

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from ..store import CompletionStore
    from ..type_defs import ChecklistItem, ItemId, ProgressSummary, UserId


def completion_key(
    item_id: ItemId, user_id: UserId, on_date: str | date
) -> tuple[str, str, str]:
    """Build the canonical (item_id, user_id, "YYYY-MM-DD") record key.

    Raises:
        ValueError: If the date cannot be parsed
    """
    parsed = dt_parse_date(on_date)
    if parsed is None:
        raise ValueError(f"Invalid completion date: {on_date!r}")
    return (item_id, user_id, parsed.isoformat())


def empty_progress() -> ProgressSummary:
    """Return the progress of an empty item set."""
    return {
        const.DATA_PROGRESS_COMPLETED: 0,
        const.DATA_PROGRESS_TOTAL: 0,
        const.DATA_PROGRESS_PERCENT: 0,
    }


@dataclass
class ToggleOutcome:
    """Result of a toggle with the progress around it.

    Returned by ChecklistManager.toggle_item() so the caller can fire
    one-shot effects (celebration) on the transition itself.

    Attributes:
        item_id: Item toggled
        user_id: User the record belongs to
        date: ISO date of the record
        done: New completion state
        previous: Progress before the toggle
        current: Progress after the toggle
        reached_full: True only when the last open item of a non-empty set is done
    """

    item_id: str
    user_id: str
    date: str
    done: bool
    previous: ProgressSummary
    current: ProgressSummary
    reached_full: bool = False


class CompletionEngine:
    """Pure logic engine for completion records and progress.

    All methods are static - no instance state.
    """

    @staticmethod
    def is_done(
        store: CompletionStore,
        item_id: ItemId,
        user_id: UserId,
        on_date: str | date,
    ) -> bool:
        """Read the done flag; absence of a record means not done."""
        return bool(store.get_done(item_id, user_id, on_date))

    @staticmethod
    def toggle(
        store: CompletionStore,
        item_id: ItemId,
        user_id: UserId,
        on_date: str | date,
    ) -> bool:
        """Negate the done flag of (item, user, date) and return the new state.

        Storage failures propagate from the store unchanged.
        """
        new_state = not CompletionEngine.is_done(store, item_id, user_id, on_date)
        store.set_done(item_id, user_id, on_date, new_state)
        const.LOGGER.debug(
            "CompletionEngine: toggled item %s for user %s on %s → %s",
            item_id,
            user_id,
            on_date,
            new_state,
        )
        return new_state

    @staticmethod
    def set_completion(
        store: CompletionStore,
        item_id: ItemId,
        user_id: UserId,
        on_date: str | date,
        done: bool,
    ) -> bool:
        """Set the done flag to an absolute value (safe to retry).

        Returns:
            True if the stored value changed
        """
        if CompletionEngine.is_done(store, item_id, user_id, on_date) == done:
            return False
        store.set_done(item_id, user_id, on_date, done)
        return True

    @staticmethod
    def due_items(
        items: Iterable[ChecklistItem | dict[str, Any]],
        on_date: str | date,
    ) -> list[ChecklistItem | dict[str, Any]]:
        """Filter active items to the ones due on `on_date` (order kept)."""
        return [
            item
            for item in items
            if item.get(const.DATA_ITEM_IS_ACTIVE, True) and is_item_due(item, on_date)
        ]

    @staticmethod
    def progress(
        items: Iterable[ChecklistItem | dict[str, Any]],
        user_id: UserId,
        on_date: str | date,
        store: CompletionStore,
    ) -> ProgressSummary:
        """Aggregate completion of the items due on a date.

        total counts active items due on the date, completed counts those
        with a done record for (item, user, date). percent is rounded to a
        whole number and is 0 when nothing is due.
        """
        due = CompletionEngine.due_items(items, on_date)
        completed = sum(
            1
            for item in due
            if CompletionEngine.is_done(
                store, item[const.DATA_ITEM_ID], user_id, on_date
            )
        )
        total = len(due)
        return {
            const.DATA_PROGRESS_COMPLETED: completed,
            const.DATA_PROGRESS_TOTAL: total,
            const.DATA_PROGRESS_PERCENT: calculate_percentage(completed, total),
        }

    @staticmethod
    def reached_full_completion(
        previous: ProgressSummary | None, current: ProgressSummary
    ) -> bool:
        """Detect the transition from "something open" to "everything done".

        Decided on the counts, not on the rounded percent: 199 of 200 shows
        as 100% but is not complete. An empty set (total 0) never counts as
        completed. With no previous value the transition is not assumed
        (first render is not an edge).
        """
        if previous is None:
            return False
        was_complete = CompletionEngine.is_complete(previous)
        return not was_complete and CompletionEngine.is_complete(current)

    @staticmethod
    def is_complete(progress: ProgressSummary) -> bool:
        """True when a non-empty set has every due item done."""
        total = progress.get(const.DATA_PROGRESS_TOTAL, 0)
        return total > 0 and progress.get(const.DATA_PROGRESS_COMPLETED, 0) >= total

    @staticmethod
    def summarize_team(
        items: Iterable[ChecklistItem | dict[str, Any]],
        user_ids: Iterable[UserId],
        on_date: str | date,
        store: CompletionStore,
    ) -> dict[UserId, ProgressSummary]:
        """Progress of each user over the same item set."""
        item_list = list(items)
        return {
            user_id: CompletionEngine.progress(item_list, user_id, on_date, store)
            for user_id in user_ids
        }
