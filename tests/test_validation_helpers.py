"""Tests for configuration-time validation of rules, templates and items."""

import pytest
import voluptuous as vol

from opsrules import const
from opsrules.helpers import validation_helpers as vh
from tests.helpers import every_x_days, monthly, specific_date, weekly

# ============================================================================
# Recurrence rules
# ============================================================================


class TestValidateRecurrenceRule:
    """Incomplete rules are refused before they are saved."""

    @pytest.mark.parametrize(
        "rule",
        [
            None,
            {const.DATA_RULE_TYPE: const.RECURRENCE_DAILY},
            weekly(0),
            weekly(6),
            monthly(31),
            every_x_days(2),
            every_x_days(7, "2024-01-01"),
            specific_date("2024-03-15"),
        ],
    )
    def test_valid_rules(self, rule) -> None:
        """Complete rules produce no errors."""
        assert vh.validate_recurrence_rule(rule) == {}

    @pytest.mark.parametrize(
        ("rule", "field", "error"),
        [
            (weekly(None), "day_of_week", const.ERROR_RULE_DAY_OF_WEEK_REQUIRED),
            (weekly(7), "day_of_week", const.ERROR_RULE_DAY_OF_WEEK_REQUIRED),
            (monthly(None), "day_of_month", const.ERROR_RULE_DAY_OF_MONTH_REQUIRED),
            (monthly(0), "day_of_month", const.ERROR_RULE_DAY_OF_MONTH_REQUIRED),
            (every_x_days(None), "interval_days", const.ERROR_RULE_INTERVAL_INVALID),
            (every_x_days(1), "interval_days", const.ERROR_RULE_INTERVAL_INVALID),
            (
                every_x_days(3, "first monday"),
                "start_date",
                const.ERROR_RULE_START_DATE_INVALID,
            ),
            (
                specific_date(None),
                "specific_date",
                const.ERROR_RULE_SPECIFIC_DATE_REQUIRED,
            ),
            ({const.DATA_RULE_TYPE: "yearly"}, "type", const.ERROR_RULE_TYPE_INVALID),
            ({}, "type", const.ERROR_RULE_TYPE_INVALID),
        ],
    )
    def test_invalid_rules(self, rule, field: str, error: str) -> None:
        """Each incomplete rule reports the field to fix."""
        assert vh.validate_recurrence_rule(rule) == {field: error}

    def test_normalize_coerces_and_drops_foreign_keys(self) -> None:
        """Numbers are coerced, keys of other rule types removed."""
        rule = {
            const.DATA_RULE_TYPE: const.RECURRENCE_WEEKLY,
            const.DATA_RULE_DAY_OF_WEEK: "2",
            const.DATA_RULE_DAY_OF_MONTH: 15,
        }
        assert vh.normalize_recurrence_rule(rule) == {
            const.DATA_RULE_TYPE: const.RECURRENCE_WEEKLY,
            const.DATA_RULE_DAY_OF_WEEK: 2,
        }

    def test_normalize_dates_to_iso(self) -> None:
        """Day-first dates are stored as ISO."""
        assert vh.normalize_recurrence_rule(specific_date("15/03/2024")) == {
            const.DATA_RULE_TYPE: const.RECURRENCE_SPECIFIC_DATE,
            const.DATA_RULE_SPECIFIC_DATE: "2024-03-15",
        }

    def test_normalize_rejects_non_mapping(self) -> None:
        """A rule must be a dict."""
        with pytest.raises(vol.Invalid):
            vh.normalize_recurrence_rule(["weekly"])


# ============================================================================
# Templates
# ============================================================================


class TestTemplateInputs:
    """Template form validation."""

    def test_valid(self) -> None:
        """Title plus a known scope."""
        assert (
            vh.validate_template_inputs(
                {
                    const.DATA_TEMPLATE_TITLE: "Morning routine",
                    const.DATA_TEMPLATE_AUDIENCE_SCOPE: const.ROLE_CONSULTOR,
                }
            )
            == {}
        )

    def test_defaults(self) -> None:
        """Scope defaults to any role and templates start active."""
        result = vh.TEMPLATE_SCHEMA({const.DATA_TEMPLATE_TITLE: "  Closing  "})
        assert result[const.DATA_TEMPLATE_TITLE] == "Closing"
        assert result[const.DATA_TEMPLATE_AUDIENCE_SCOPE] == const.AUDIENCE_SCOPE_ANY_ROLE
        assert result[const.DATA_TEMPLATE_IS_ACTIVE] is True

    def test_blank_title(self) -> None:
        """A blank title is refused."""
        assert vh.validate_template_inputs({const.DATA_TEMPLATE_TITLE: "   "}) == {
            const.DATA_TEMPLATE_TITLE: const.ERROR_TEMPLATE_TITLE_REQUIRED
        }

    def test_unknown_scope(self) -> None:
        """Scopes outside the role list are refused."""
        errors = vh.validate_template_inputs(
            {
                const.DATA_TEMPLATE_TITLE: "Morning routine",
                const.DATA_TEMPLATE_AUDIENCE_SCOPE: "cliente",
            }
        )
        assert errors == {
            const.DATA_TEMPLATE_AUDIENCE_SCOPE: const.ERROR_TEMPLATE_AUDIENCE_SCOPE_INVALID
        }


# ============================================================================
# Items
# ============================================================================


class TestItemInputs:
    """Item form validation, recurrence included."""

    def test_valid_item(self) -> None:
        """Text and a complete rule."""
        assert (
            vh.validate_item_inputs(
                {const.DATA_ITEM_TEXT: "Update CRM", const.DATA_ITEM_RECURRENCE: weekly(2)}
            )
            == {}
        )

    def test_incomplete_rule_reported_under_recurrence(self) -> None:
        """A weekly rule without a day blocks the save."""
        errors = vh.validate_item_inputs(
            {const.DATA_ITEM_TEXT: "Update CRM", const.DATA_ITEM_RECURRENCE: weekly(None)}
        )
        assert errors == {
            const.DATA_ITEM_RECURRENCE: const.ERROR_RULE_DAY_OF_WEEK_REQUIRED
        }

    def test_item_field_errors(self) -> None:
        """Missing text and negative order are both reported."""
        errors = vh.validate_item_inputs({const.DATA_ITEM_ORDER_INDEX: -1})
        assert errors == {
            const.DATA_ITEM_TEXT: const.ERROR_ITEM_TEXT_REQUIRED,
            const.DATA_ITEM_ORDER_INDEX: const.ERROR_ITEM_ORDER_INDEX_INVALID,
        }

    def test_normalize_item(self) -> None:
        """Defaults are filled and the rule normalized."""
        result = vh.normalize_item_inputs(
            {
                const.DATA_ITEM_TEXT: " Call leads ",
                const.DATA_ITEM_RECURRENCE: every_x_days("3", "2024-01-01"),
            }
        )
        assert result[const.DATA_ITEM_TEXT] == "Call leads"
        assert result[const.DATA_ITEM_ORDER_INDEX] == 0
        assert result[const.DATA_ITEM_IS_ACTIVE] is True
        assert result[const.DATA_ITEM_RECURRENCE] == {
            const.DATA_RULE_TYPE: const.RECURRENCE_EVERY_X_DAYS,
            const.DATA_RULE_INTERVAL_DAYS: 3,
            const.DATA_RULE_START_DATE: "2024-01-01",
        }

    def test_normalize_item_rejects_bad_rule(self) -> None:
        """normalize_item_inputs raises where validate_item_inputs reports."""
        with pytest.raises(vol.Invalid):
            vh.normalize_item_inputs(
                {const.DATA_ITEM_TEXT: "x", const.DATA_ITEM_RECURRENCE: monthly(None)}
            )
