"""Configuration-time validation for checklist catalogs.

Rules are checked when an administrator saves them, not when they are
evaluated: the recurrence engine tolerates incomplete rules at runtime
(a weekly rule without day_of_week matches every day), so saving one must
be refused here.

Two layers, same as admin form handling:
- `voluptuous` schemas that coerce and raise `vol.Invalid`
- `validate_*` functions returning a {field: ERROR_* key} dict, empty when
  the input is valid
"""

# pyright: reportArgumentType=false
# Reason: Voluptuous schema definitions use dynamic typing that pyright cannot infer.

from __future__ import annotations

from typing import Any

import voluptuous as vol

from .. import const
from ..utils.dt_utils import dt_parse_date

# =============================================================================
# INPUT VALIDATION HELPERS
# =============================================================================


def validate_iso_date(value: Any) -> str:
    """Validate a calendar date and normalize it to "YYYY-MM-DD".

    Raises:
        vol.Invalid: If the value is not a date
    """
    parsed = dt_parse_date(value)
    if parsed is None:
        raise vol.Invalid(f"Invalid date: '{value}'. Expected format: YYYY-MM-DD.")
    return parsed.isoformat()


def validate_non_empty_text(value: Any) -> str:
    """Validate a non-blank string and strip it.

    Raises:
        vol.Invalid: If the value is empty or not a string
    """
    if not isinstance(value, str) or not value.strip():
        raise vol.Invalid("Value must be a non-empty string")
    return value.strip()


_STRICT_INT = vol.All(vol.Coerce(int), msg="Expected an integer")

# ----------------------------------------------------------------------------------
# RECURRENCE SCHEMAS
# ----------------------------------------------------------------------------------

RECURRENCE_SCHEMAS: dict[str, vol.Schema] = {
    const.RECURRENCE_DAILY: vol.Schema(
        {vol.Required(const.DATA_RULE_TYPE): const.RECURRENCE_DAILY},
        extra=vol.REMOVE_EXTRA,
    ),
    const.RECURRENCE_WEEKLY: vol.Schema(
        {
            vol.Required(const.DATA_RULE_TYPE): const.RECURRENCE_WEEKLY,
            vol.Required(const.DATA_RULE_DAY_OF_WEEK): vol.All(
                _STRICT_INT,
                vol.Range(min=const.WEEKDAY_SUNDAY, max=const.WEEKDAY_SATURDAY),
            ),
        },
        extra=vol.REMOVE_EXTRA,
    ),
    const.RECURRENCE_MONTHLY: vol.Schema(
        {
            vol.Required(const.DATA_RULE_TYPE): const.RECURRENCE_MONTHLY,
            vol.Required(const.DATA_RULE_DAY_OF_MONTH): vol.All(
                _STRICT_INT,
                vol.Range(min=const.DAY_OF_MONTH_MIN, max=const.DAY_OF_MONTH_MAX),
            ),
        },
        extra=vol.REMOVE_EXTRA,
    ),
    const.RECURRENCE_EVERY_X_DAYS: vol.Schema(
        {
            vol.Required(const.DATA_RULE_TYPE): const.RECURRENCE_EVERY_X_DAYS,
            vol.Required(const.DATA_RULE_INTERVAL_DAYS): vol.All(
                _STRICT_INT, vol.Range(min=const.MIN_INTERVAL_DAYS)
            ),
            vol.Optional(const.DATA_RULE_START_DATE): validate_iso_date,
        },
        extra=vol.REMOVE_EXTRA,
    ),
    const.RECURRENCE_SPECIFIC_DATE: vol.Schema(
        {
            vol.Required(const.DATA_RULE_TYPE): const.RECURRENCE_SPECIFIC_DATE,
            vol.Required(const.DATA_RULE_SPECIFIC_DATE): validate_iso_date,
        },
        extra=vol.REMOVE_EXTRA,
    ),
}

# Field → error key reported by validate_recurrence_rule
_RULE_FIELD_ERRORS = {
    const.DATA_RULE_TYPE: const.ERROR_RULE_TYPE_INVALID,
    const.DATA_RULE_DAY_OF_WEEK: const.ERROR_RULE_DAY_OF_WEEK_REQUIRED,
    const.DATA_RULE_DAY_OF_MONTH: const.ERROR_RULE_DAY_OF_MONTH_REQUIRED,
    const.DATA_RULE_INTERVAL_DAYS: const.ERROR_RULE_INTERVAL_INVALID,
    const.DATA_RULE_START_DATE: const.ERROR_RULE_START_DATE_INVALID,
    const.DATA_RULE_SPECIFIC_DATE: const.ERROR_RULE_SPECIFIC_DATE_REQUIRED,
}


def normalize_recurrence_rule(rule: dict[str, Any] | None) -> dict[str, Any] | None:
    """Validate a rule and return its normalized form.

    Keys that do not belong to the rule's type are dropped, integers are
    coerced and dates normalized to ISO strings. None stays None (daily).

    Raises:
        vol.Invalid: If the rule is incomplete or malformed
    """
    if rule is None:
        return None
    if not isinstance(rule, dict):
        raise vol.Invalid("Recurrence rule must be a mapping")

    rule_type = rule.get(const.DATA_RULE_TYPE)
    schema = RECURRENCE_SCHEMAS.get(rule_type) if isinstance(rule_type, str) else None
    if schema is None:
        raise vol.Invalid(
            f"Unknown recurrence type: {rule_type!r}", path=[const.DATA_RULE_TYPE]
        )
    return schema(rule)


def validate_recurrence_rule(rule: dict[str, Any] | None) -> dict[str, str]:
    """Validate a recurrence rule for saving.

    Returns:
        {field: ERROR_* key} for each invalid field, empty when valid
    """
    try:
        normalize_recurrence_rule(rule)
    except vol.MultipleInvalid as err:
        return _map_errors(err.errors, _RULE_FIELD_ERRORS, const.ERROR_RULE_TYPE_INVALID)
    except vol.Invalid as err:
        return _map_errors([err], _RULE_FIELD_ERRORS, const.ERROR_RULE_TYPE_INVALID)
    return {}


# ----------------------------------------------------------------------------------
# TEMPLATE / ITEM SCHEMAS
# ----------------------------------------------------------------------------------

TEMPLATE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_TEMPLATE_TITLE): validate_non_empty_text,
        vol.Optional(
            const.DATA_TEMPLATE_AUDIENCE_SCOPE, default=const.DEFAULT_AUDIENCE_SCOPE
        ): vol.In(const.AUDIENCE_SCOPES),
        vol.Optional(const.DATA_TEMPLATE_IS_ACTIVE, default=True): bool,
    },
    extra=vol.ALLOW_EXTRA,
)

ITEM_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_ITEM_TEXT): validate_non_empty_text,
        vol.Optional(const.DATA_ITEM_ORDER_INDEX, default=0): vol.All(
            _STRICT_INT, vol.Range(min=0)
        ),
        vol.Optional(const.DATA_ITEM_IS_ACTIVE, default=True): bool,
        vol.Optional(const.DATA_ITEM_RECURRENCE): normalize_recurrence_rule,
    },
    extra=vol.ALLOW_EXTRA,
)

_TEMPLATE_FIELD_ERRORS = {
    const.DATA_TEMPLATE_TITLE: const.ERROR_TEMPLATE_TITLE_REQUIRED,
    const.DATA_TEMPLATE_AUDIENCE_SCOPE: const.ERROR_TEMPLATE_AUDIENCE_SCOPE_INVALID,
}

_ITEM_FIELD_ERRORS = {
    const.DATA_ITEM_TEXT: const.ERROR_ITEM_TEXT_REQUIRED,
    const.DATA_ITEM_ORDER_INDEX: const.ERROR_ITEM_ORDER_INDEX_INVALID,
}


def validate_template_inputs(user_input: dict[str, Any]) -> dict[str, str]:
    """Validate a checklist template before saving.

    Returns:
        {field: ERROR_* key}, empty when valid
    """
    try:
        TEMPLATE_SCHEMA(user_input)
    except vol.MultipleInvalid as err:
        return _map_errors(
            err.errors, _TEMPLATE_FIELD_ERRORS, const.ERROR_TEMPLATE_TITLE_REQUIRED
        )
    return {}


def normalize_item_inputs(user_input: dict[str, Any]) -> dict[str, Any]:
    """Validate an item and return it with defaults and a normalized rule.

    Raises:
        vol.Invalid: If any field is invalid
    """
    return ITEM_SCHEMA(user_input)


def validate_item_inputs(user_input: dict[str, Any]) -> dict[str, str]:
    """Validate a checklist item (and its recurrence rule) before saving.

    Recurrence problems are reported under the item's recurrence key.

    Returns:
        {field: ERROR_* key}, empty when valid
    """
    errors: dict[str, str] = {}
    rule_errors = validate_recurrence_rule(user_input.get(const.DATA_ITEM_RECURRENCE))
    if rule_errors:
        # One key per form field; the first rule problem is enough to show
        errors[const.DATA_ITEM_RECURRENCE] = next(iter(rule_errors.values()))

    item_input = {
        key: value
        for key, value in user_input.items()
        if key != const.DATA_ITEM_RECURRENCE
    }
    try:
        ITEM_SCHEMA(item_input)
    except vol.MultipleInvalid as err:
        errors.update(
            _map_errors(err.errors, _ITEM_FIELD_ERRORS, const.ERROR_ITEM_TEXT_REQUIRED)
        )
    return errors


def _map_errors(
    invalids: list[vol.Invalid], field_errors: dict[str, str], default_key: str
) -> dict[str, str]:
    """Translate voluptuous errors into {field: error key}."""
    errors: dict[str, str] = {}
    for invalid in invalids:
        field = str(invalid.path[0]) if invalid.path else const.DATA_RULE_TYPE
        errors.setdefault(field, field_errors.get(field, default_key))
    return errors
