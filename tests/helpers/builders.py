"""Record builders shared by OpsRules tests."""

from typing import Any

from opsrules import const


def make_user(user_id: str, role: str, name: str | None = None) -> dict[str, Any]:
    """Build a user context dict."""
    return {
        const.DATA_USER_ID: user_id,
        const.DATA_USER_NAME: name or user_id,
        const.DATA_USER_ROLE: role,
    }


def make_item(
    item_id: str,
    template_id: str,
    order_index: int = 0,
    recurrence: dict[str, Any] | None = None,
    is_active: bool = True,
    created_at: str = "2024-01-01T09:00:00+00:00",
) -> dict[str, Any]:
    """Build a checklist item dict."""
    item: dict[str, Any] = {
        const.DATA_ITEM_ID: item_id,
        const.DATA_ITEM_TEMPLATE_ID: template_id,
        const.DATA_ITEM_TEXT: f"Task {item_id}",
        const.DATA_ITEM_IS_ACTIVE: is_active,
        const.DATA_ITEM_ORDER_INDEX: order_index,
        const.DATA_ITEM_CREATED_AT: created_at,
    }
    if recurrence is not None:
        item[const.DATA_ITEM_RECURRENCE] = recurrence
    return item


def make_period(
    period_id: str, start: str, end: str, competence: str, name: str | None = None
) -> dict[str, Any]:
    """Build a cutoff period dict."""
    return {
        const.DATA_CUTOFF_ID: period_id,
        const.DATA_CUTOFF_NAME: name or f"Period {period_id}",
        const.DATA_CUTOFF_START_DATE: start,
        const.DATA_CUTOFF_END_DATE: end,
        const.DATA_CUTOFF_COMPETENCE_MONTH: competence,
    }


def weekly(day_of_week: int | None) -> dict[str, Any]:
    """Weekly rule (Sunday = 0)."""
    rule: dict[str, Any] = {const.DATA_RULE_TYPE: const.RECURRENCE_WEEKLY}
    if day_of_week is not None:
        rule[const.DATA_RULE_DAY_OF_WEEK] = day_of_week
    return rule


def monthly(day_of_month: int | None) -> dict[str, Any]:
    """Monthly rule."""
    rule: dict[str, Any] = {const.DATA_RULE_TYPE: const.RECURRENCE_MONTHLY}
    if day_of_month is not None:
        rule[const.DATA_RULE_DAY_OF_MONTH] = day_of_month
    return rule


def every_x_days(interval: int | None, start_date: str | None = None) -> dict[str, Any]:
    """every_x_days rule."""
    rule: dict[str, Any] = {const.DATA_RULE_TYPE: const.RECURRENCE_EVERY_X_DAYS}
    if interval is not None:
        rule[const.DATA_RULE_INTERVAL_DAYS] = interval
    if start_date is not None:
        rule[const.DATA_RULE_START_DATE] = start_date
    return rule


def specific_date(value: str | None) -> dict[str, Any]:
    """specific_date rule."""
    rule: dict[str, Any] = {const.DATA_RULE_TYPE: const.RECURRENCE_SPECIFIC_DATE}
    if value is not None:
        rule[const.DATA_RULE_SPECIFIC_DATE] = value
    return rule
