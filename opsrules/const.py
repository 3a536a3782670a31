# File: const.py
"""Constants for the OpsRules engine.

This file centralizes data keys, rule types, roles, audience scopes,
validation error kinds and configuration defaults for consistency across
the engines, helpers and managers.
"""

import logging

# ------------------------------------------------------------------------------------------------
# General / Package Information
# ------------------------------------------------------------------------------------------------
OPSRULES_TITLE = "OpsRules"

# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Recurrence Rules
# ------------------------------------------------------------------------------------------------

# Rule types
RECURRENCE_DAILY = "daily"
RECURRENCE_WEEKLY = "weekly"
RECURRENCE_MONTHLY = "monthly"
RECURRENCE_EVERY_X_DAYS = "every_x_days"
RECURRENCE_SPECIFIC_DATE = "specific_date"

RECURRENCE_TYPES = [
    RECURRENCE_DAILY,
    RECURRENCE_WEEKLY,
    RECURRENCE_MONTHLY,
    RECURRENCE_EVERY_X_DAYS,
    RECURRENCE_SPECIFIC_DATE,
]

# Rule keys
DATA_RULE_TYPE = "type"
DATA_RULE_DAY_OF_WEEK = "day_of_week"
DATA_RULE_DAY_OF_MONTH = "day_of_month"
DATA_RULE_INTERVAL_DAYS = "interval_days"
DATA_RULE_START_DATE = "start_date"
DATA_RULE_SPECIFIC_DATE = "specific_date"

# every_x_days never repeats more often than every other day
MIN_INTERVAL_DAYS = 2

# Weekday numbering: Sunday = 0 ... Saturday = 6
WEEKDAY_SUNDAY = 0
WEEKDAY_SATURDAY = 6
WEEKDAY_LABELS = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

DAY_OF_MONTH_MIN = 1
DAY_OF_MONTH_MAX = 31

# Safety limit for occurrence listings
MAX_OCCURRENCES = 400

# ------------------------------------------------------------------------------------------------
# Checklist Templates / Items
# ------------------------------------------------------------------------------------------------
DATA_TEMPLATE_ID = "id"
DATA_TEMPLATE_TITLE = "title"
DATA_TEMPLATE_IS_ACTIVE = "is_active"
DATA_TEMPLATE_AUDIENCE_SCOPE = "audience_scope"
DATA_TEMPLATE_ITEMS = "items"

DATA_ITEM_ID = "id"
DATA_ITEM_TEMPLATE_ID = "template_id"
DATA_ITEM_TEXT = "text"
DATA_ITEM_IS_ACTIVE = "is_active"
DATA_ITEM_ORDER_INDEX = "order_index"
DATA_ITEM_RECURRENCE = "recurrence"
DATA_ITEM_CREATED_AT = "created_at"

# Assignment overrides
DATA_OVERRIDE_TEMPLATE_ID = "template_id"
DATA_OVERRIDE_USER_ID = "user_id"

# Completion records
DATA_COMPLETION_ITEM_ID = "item_id"
DATA_COMPLETION_USER_ID = "user_id"
DATA_COMPLETION_DATE = "date"
DATA_COMPLETION_DONE = "done"

# Users
DATA_USER_ID = "id"
DATA_USER_NAME = "name"
DATA_USER_ROLE = "role"

# ------------------------------------------------------------------------------------------------
# Roles / Audience Scopes
# ------------------------------------------------------------------------------------------------
ROLE_ADMIN = "admin"
ROLE_GESTOR = "gestor"
ROLE_CONSULTOR = "consultor"
ROLE_SECRETARIA = "secretaria"

USER_ROLES = [ROLE_ADMIN, ROLE_GESTOR, ROLE_CONSULTOR, ROLE_SECRETARIA]

# A global template is visible to every role unless scoped to one
AUDIENCE_SCOPE_ANY_ROLE = "any_role"
AUDIENCE_SCOPES = [AUDIENCE_SCOPE_ANY_ROLE, *USER_ROLES]
DEFAULT_AUDIENCE_SCOPE = AUDIENCE_SCOPE_ANY_ROLE

# ------------------------------------------------------------------------------------------------
# Progress
# ------------------------------------------------------------------------------------------------
DATA_PROGRESS_COMPLETED = "completed"
DATA_PROGRESS_TOTAL = "total"
DATA_PROGRESS_PERCENT = "percent"

# ------------------------------------------------------------------------------------------------
# Cutoff Periods
# ------------------------------------------------------------------------------------------------
DATA_CUTOFF_ID = "id"
DATA_CUTOFF_NAME = "name"
DATA_CUTOFF_START_DATE = "start_date"
DATA_CUTOFF_END_DATE = "end_date"
DATA_CUTOFF_COMPETENCE_MONTH = "competence_month"

CUTOFF_REQUIRED_FIELDS = [
    DATA_CUTOFF_NAME,
    DATA_CUTOFF_START_DATE,
    DATA_CUTOFF_END_DATE,
    DATA_CUTOFF_COMPETENCE_MONTH,
]

# Validation error kinds (first violated rule wins, checked in this order)
CUTOFF_ERROR_MISSING_FIELD = "missing_field"
CUTOFF_ERROR_INVALID_ORDERING = "invalid_ordering"
CUTOFF_ERROR_COMPETENCE_BEFORE_END = "competence_before_end"
CUTOFF_ERROR_OVERLAPS_EXISTING = "overlaps_existing"

# Fallback competence policy: last day of each month that still belongs to
# the following competence month
DEFAULT_CUTOFF_DAY = 19
DEFAULT_MONTHLY_CUTOFF_DAYS: dict[int, int] = {
    1: 19,
    2: 18,
    3: 19,
    4: 19,
    5: 19,
    6: 17,
    7: 19,
    8: 19,
    9: 19,
    10: 19,
    11: 19,
    12: 19,
}

# ------------------------------------------------------------------------------------------------
# Configuration Validation Error Keys
# ------------------------------------------------------------------------------------------------
ERROR_RULE_TYPE_INVALID = "rule_type_invalid"
ERROR_RULE_DAY_OF_WEEK_REQUIRED = "rule_day_of_week_required"
ERROR_RULE_DAY_OF_MONTH_REQUIRED = "rule_day_of_month_required"
ERROR_RULE_INTERVAL_INVALID = "rule_interval_invalid"
ERROR_RULE_START_DATE_INVALID = "rule_start_date_invalid"
ERROR_RULE_SPECIFIC_DATE_REQUIRED = "rule_specific_date_required"
ERROR_TEMPLATE_TITLE_REQUIRED = "template_title_required"
ERROR_TEMPLATE_AUDIENCE_SCOPE_INVALID = "template_audience_scope_invalid"
ERROR_ITEM_TEXT_REQUIRED = "item_text_required"
ERROR_ITEM_ORDER_INDEX_INVALID = "item_order_index_invalid"

# Display
DISPLAY_UNKNOWN = "Unknown"
