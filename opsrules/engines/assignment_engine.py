"""Assignment Engine - Pure logic for checklist template visibility.

This engine provides stateless, pure Python functions for:
- Resolving which templates a user sees (override allow-lists or role scope)
- Resolving the effective audience of one template
- Ordering a template's active items

A template with at least one assignment override is visible ONLY to the
overridden users, whatever their role. A template with no overrides is
global and visible to every user whose role matches its audience scope.
Inactive templates are never visible.

ARCHITECTURE: This is a pure logic engine. All functions are static
methods that operate on passed-in snapshots. State belongs in managers.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..type_defs import (
        AssignmentOverride,
        ChecklistItem,
        ChecklistTemplate,
        TemplateId,
        UserContext,
        UserId,
    )


class AssignmentEngine:
    """Pure logic engine for template visibility.

    All methods are static - no instance state.
    """

    @staticmethod
    def group_overrides(
        overrides: Iterable[AssignmentOverride | dict[str, Any]],
    ) -> dict[TemplateId, set[UserId]]:
        """Index overrides by template id.

        Returns:
            Mapping template_id → set of allowed user ids. Templates with no
            override are absent from the mapping.
        """
        grouped: dict[str, set[str]] = defaultdict(set)
        for override in overrides:
            template_id = override.get(const.DATA_OVERRIDE_TEMPLATE_ID)
            user_id = override.get(const.DATA_OVERRIDE_USER_ID)
            if template_id and user_id:
                grouped[template_id].add(user_id)
        return dict(grouped)

    @staticmethod
    def role_matches_scope(role: str | None, audience_scope: str | None) -> bool:
        """Check a user role against a template's audience scope.

        Args:
            role: ROLE_* of the user
            audience_scope: AUDIENCE_SCOPE_* of the template (None = any role)
        """
        scope = audience_scope or const.DEFAULT_AUDIENCE_SCOPE
        if scope == const.AUDIENCE_SCOPE_ANY_ROLE:
            return True
        return role == scope

    @staticmethod
    def is_template_visible(
        template: ChecklistTemplate | dict[str, Any],
        allowed_user_ids: set[UserId] | None,
        user: UserContext | dict[str, Any],
    ) -> bool:
        """Decide visibility of one template for one user.

        Args:
            template: The template to check
            allowed_user_ids: Users from this template's overrides (empty/None
                means the template is global)
            user: The user the query is for

        Returns:
            True if the template is active and visible to the user
        """
        if not template.get(const.DATA_TEMPLATE_IS_ACTIVE, True):
            return False

        if allowed_user_ids:
            # Explicit allow-list: role never grants access
            return user.get(const.DATA_USER_ID) in allowed_user_ids

        return AssignmentEngine.role_matches_scope(
            user.get(const.DATA_USER_ROLE),
            template.get(const.DATA_TEMPLATE_AUDIENCE_SCOPE),
        )

    @staticmethod
    def visible_templates(
        templates: Iterable[ChecklistTemplate | dict[str, Any]],
        overrides: Iterable[AssignmentOverride | dict[str, Any]],
        user: UserContext | dict[str, Any],
    ) -> set[TemplateId]:
        """Return the ids of every template the user sees.

        Union of the override path and the global (role-scoped) path,
        restricted to active templates.
        """
        grouped = AssignmentEngine.group_overrides(overrides)
        visible: set[str] = set()
        for template in templates:
            template_id = template.get(const.DATA_TEMPLATE_ID)
            if not template_id:
                continue
            if AssignmentEngine.is_template_visible(
                template, grouped.get(template_id), user
            ):
                visible.add(template_id)

        const.LOGGER.debug(
            "AssignmentEngine: user %s sees %d template(s)",
            user.get(const.DATA_USER_ID),
            len(visible),
        )
        return visible

    @staticmethod
    def get_visible_templates(
        templates: Iterable[ChecklistTemplate | dict[str, Any]],
        overrides: Iterable[AssignmentOverride | dict[str, Any]],
        user: UserContext | dict[str, Any],
    ) -> list[ChecklistTemplate | dict[str, Any]]:
        """Return the visible templates themselves, sorted by title."""
        template_list = list(templates)
        visible_ids = AssignmentEngine.visible_templates(
            template_list, overrides, user
        )
        seen: set[str] = set()
        result = []
        for template in template_list:
            template_id = template.get(const.DATA_TEMPLATE_ID)
            if template_id in visible_ids and template_id not in seen:
                seen.add(template_id)
                result.append(template)
        return sorted(
            result, key=lambda t: str(t.get(const.DATA_TEMPLATE_TITLE, "")).casefold()
        )

    @staticmethod
    def resolve_audience(
        template: ChecklistTemplate | dict[str, Any],
        overrides: Iterable[AssignmentOverride | dict[str, Any]],
        users: Iterable[UserContext | dict[str, Any]],
    ) -> set[UserId]:
        """Return the ids of every user that sees `template`.

        Used by monitoring views to know whose completions count.
        """
        template_id = template.get(const.DATA_TEMPLATE_ID)
        allowed = AssignmentEngine.group_overrides(overrides).get(template_id)
        return {
            user[const.DATA_USER_ID]
            for user in users
            if user.get(const.DATA_USER_ID)
            and AssignmentEngine.is_template_visible(template, allowed, user)
        }

    @staticmethod
    def get_template_items(
        template_id: TemplateId,
        items: Iterable[ChecklistItem | dict[str, Any]],
        include_inactive: bool = False,
    ) -> list[ChecklistItem | dict[str, Any]]:
        """Return a template's items ordered by order_index.

        Args:
            template_id: Template to collect items for
            items: Flat item catalog
            include_inactive: Keep inactive items (admin editing views)
        """
        selected = [
            item
            for item in items
            if item.get(const.DATA_ITEM_TEMPLATE_ID) == template_id
            and (include_inactive or item.get(const.DATA_ITEM_IS_ACTIVE, True))
        ]
        return sorted(selected, key=lambda i: i.get(const.DATA_ITEM_ORDER_INDEX, 0))
