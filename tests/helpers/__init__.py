"""Test helpers for OpsRules tests.

    from tests.helpers import make_item, make_period, weekly, USER_ANA
"""

from tests.helpers.constants import (
    TEMPLATE_ANA_ONLY,
    TEMPLATE_MORNING,
    TEMPLATE_OFFICE,
    TEMPLATE_RETIRED,
    USER_ANA,
    USER_BRUNO,
    USER_CARLA,
    USER_GESTOR,
)
from tests.helpers.builders import (
    every_x_days,
    make_item,
    make_period,
    make_user,
    monthly,
    specific_date,
    weekly,
)

__all__ = [
    "TEMPLATE_ANA_ONLY",
    "TEMPLATE_MORNING",
    "TEMPLATE_OFFICE",
    "TEMPLATE_RETIRED",
    "USER_ANA",
    "USER_BRUNO",
    "USER_CARLA",
    "USER_GESTOR",
    "every_x_days",
    "make_item",
    "make_period",
    "make_user",
    "monthly",
    "specific_date",
    "weekly",
]
