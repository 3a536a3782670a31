"""Checklist manager for OpsRules.

Composes the engines into the daily checklist query flow:

    visible templates (AssignmentEngine)
      → active items, ordered (AssignmentEngine)
      → items due on the date (RecurrenceEngine)
      → done flags and progress (CompletionEngine)

The manager reads catalog snapshots handed to it by the caller and writes
only through the completion store. Replace the manager (or call
`update_catalog`) when the catalog changes; nothing is cached between calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.assignment_engine import AssignmentEngine
from ..engines.completion_engine import CompletionEngine, ToggleOutcome
from ..engines.recurrence_engine import RecurrenceEngine, get_item_anchor
from ..utils.dt_utils import dt_parse_date

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from ..store import CompletionStore
    from ..type_defs import (
        AssignmentOverride,
        ChecklistItem,
        ChecklistTemplate,
        ProgressSummary,
        UserContext,
        UserId,
    )


class ChecklistManager:
    """Daily checklist queries and completion writes for one catalog snapshot.

    Items may be supplied nested under each template (`items` key) or as a
    flat catalog linked by `template_id`; both are merged.
    """

    def __init__(
        self,
        templates: Iterable[ChecklistTemplate | dict[str, Any]],
        overrides: Iterable[AssignmentOverride | dict[str, Any]],
        store: CompletionStore,
        items: Iterable[ChecklistItem | dict[str, Any]] | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            templates: Template catalog snapshot
            overrides: Assignment override snapshot
            store: Completion record store (reads and toggles)
            items: Optional flat item catalog
        """
        self.store = store
        self._templates: list[dict[str, Any]] = []
        self._overrides: list[dict[str, Any]] = []
        self._items: list[dict[str, Any]] = []
        self.update_catalog(templates, overrides, items)

    def update_catalog(
        self,
        templates: Iterable[ChecklistTemplate | dict[str, Any]],
        overrides: Iterable[AssignmentOverride | dict[str, Any]],
        items: Iterable[ChecklistItem | dict[str, Any]] | None = None,
    ) -> None:
        """Replace the catalog snapshot."""
        self._templates = [dict(t) for t in templates]
        self._overrides = [dict(o) for o in overrides]

        merged: dict[str, dict[str, Any]] = {}
        for template in self._templates:
            for item in template.get(const.DATA_TEMPLATE_ITEMS) or []:
                nested = dict(item)
                nested.setdefault(
                    const.DATA_ITEM_TEMPLATE_ID, template.get(const.DATA_TEMPLATE_ID)
                )
                merged[nested[const.DATA_ITEM_ID]] = nested
        for item in items or []:
            merged[item[const.DATA_ITEM_ID]] = dict(item)
        self._items = list(merged.values())

        const.LOGGER.debug(
            "ChecklistManager: catalog with %d template(s), %d item(s), %d override(s)",
            len(self._templates),
            len(self._items),
            len(self._overrides),
        )

    # =========================================================================
    # Visibility
    # =========================================================================

    def visible_template_ids(self, user: UserContext | dict[str, Any]) -> set[str]:
        """Ids of the templates the user sees."""
        return AssignmentEngine.visible_templates(
            self._templates, self._overrides, user
        )

    def get_visible_templates(
        self, user: UserContext | dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Templates the user sees, sorted by title."""
        return AssignmentEngine.get_visible_templates(
            self._templates, self._overrides, user
        )

    def get_template_items(self, template_id: str) -> list[dict[str, Any]]:
        """Active items of a template, ordered."""
        return AssignmentEngine.get_template_items(template_id, self._items)

    def get_visible_items(
        self, user: UserContext | dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Active items of every visible template (template title, then order)."""
        return [
            item
            for template in self.get_visible_templates(user)
            for item in self.get_template_items(template[const.DATA_TEMPLATE_ID])
        ]

    # =========================================================================
    # Due items / progress
    # =========================================================================

    def get_due_items(
        self, user: UserContext | dict[str, Any], on_date: str | date
    ) -> list[dict[str, Any]]:
        """Visible items due on `on_date`."""
        return CompletionEngine.due_items(self.get_visible_items(user), on_date)

    def get_progress(
        self, user: UserContext | dict[str, Any], on_date: str | date
    ) -> ProgressSummary:
        """Completion progress of the user's due items."""
        return CompletionEngine.progress(
            self.get_visible_items(user),
            user[const.DATA_USER_ID],
            on_date,
            self.store,
        )

    def get_checklist(
        self, user: UserContext | dict[str, Any], on_date: str | date
    ) -> list[dict[str, Any]]:
        """Due items grouped by visible template, each with its done flag.

        Templates with nothing due on the date are left out.
        """
        user_id = user[const.DATA_USER_ID]
        checklist = []
        for template in self.get_visible_templates(user):
            due = CompletionEngine.due_items(
                self.get_template_items(template[const.DATA_TEMPLATE_ID]), on_date
            )
            if not due:
                continue
            checklist.append(
                {
                    const.DATA_TEMPLATE_ID: template[const.DATA_TEMPLATE_ID],
                    const.DATA_TEMPLATE_TITLE: template.get(const.DATA_TEMPLATE_TITLE),
                    const.DATA_TEMPLATE_ITEMS: [
                        {
                            **item,
                            const.DATA_COMPLETION_DONE: CompletionEngine.is_done(
                                self.store, item[const.DATA_ITEM_ID], user_id, on_date
                            ),
                        }
                        for item in due
                    ],
                }
            )
        return checklist

    def get_due_calendar(
        self,
        user: UserContext | dict[str, Any],
        start: str | date,
        end: str | date,
    ) -> dict[str, list[str]]:
        """Map each day in [start, end] with something due to its item ids."""
        calendar: dict[str, list[str]] = {}
        for item in self.get_visible_items(user):
            engine = RecurrenceEngine(
                item.get(const.DATA_ITEM_RECURRENCE), get_item_anchor(item)
            )
            for day in engine.get_occurrences(start, end):
                calendar.setdefault(day.isoformat(), []).append(item[const.DATA_ITEM_ID])
        return dict(sorted(calendar.items()))

    # =========================================================================
    # Writes
    # =========================================================================

    def toggle_item(
        self, user: UserContext | dict[str, Any], item_id: str, on_date: str | date
    ) -> ToggleOutcome:
        """Toggle an item's done flag and report progress around the write.

        `reached_full` on the outcome is the one-shot celebration signal.
        """
        user_id = user[const.DATA_USER_ID]
        previous = self.get_progress(user, on_date)
        done = CompletionEngine.toggle(self.store, item_id, user_id, on_date)
        return self._build_outcome(user, item_id, on_date, done, previous)

    def set_item_completion(
        self,
        user: UserContext | dict[str, Any],
        item_id: str,
        on_date: str | date,
        done: bool,
    ) -> ToggleOutcome:
        """Set an item's done flag to an absolute value (retry safe)."""
        user_id = user[const.DATA_USER_ID]
        previous = self.get_progress(user, on_date)
        CompletionEngine.set_completion(self.store, item_id, user_id, on_date, done)
        return self._build_outcome(user, item_id, on_date, done, previous)

    # =========================================================================
    # Monitoring
    # =========================================================================

    def get_template_monitoring(
        self,
        template_id: str,
        users: Iterable[UserContext | dict[str, Any]],
        on_date: str | date,
    ) -> dict[UserId, ProgressSummary]:
        """Progress of every user in a template's audience on a date."""
        template = next(
            (t for t in self._templates if t.get(const.DATA_TEMPLATE_ID) == template_id),
            None,
        )
        if template is None:
            const.LOGGER.warning(
                "ChecklistManager: Unknown template %s for monitoring", template_id
            )
            return {}

        audience = AssignmentEngine.resolve_audience(template, self._overrides, users)
        return CompletionEngine.summarize_team(
            self.get_template_items(template_id), sorted(audience), on_date, self.store
        )

    def _build_outcome(
        self,
        user: UserContext | dict[str, Any],
        item_id: str,
        on_date: str | date,
        done: bool,
        previous: ProgressSummary,
    ) -> ToggleOutcome:
        current = self.get_progress(user, on_date)
        parsed = dt_parse_date(on_date)
        return ToggleOutcome(
            item_id=item_id,
            user_id=user[const.DATA_USER_ID],
            date=parsed.isoformat() if parsed else str(on_date),
            done=done,
            previous=previous,
            current=current,
            reached_full=CompletionEngine.reached_full_completion(previous, current),
        )
