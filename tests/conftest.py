"""Shared fixtures for OpsRules tests.

Record builders and ids live in tests/helpers; this module only turns
them into the catalog used across the suite:

    Morning routine  (consultor scope)  morning-crm (weekly, Tuesday)
                                        morning-calls (daily)
                                        morning-old (inactive)
    Office opening   (secretaria scope) office-keys (daily)
    Ana onboarding   (override: Ana)    onboarding-video (2024-01-02 only)
    Retired          (inactive)

2024-01-01 is a Monday, 2024-01-02 a Tuesday.
"""

from typing import Any
from zoneinfo import ZoneInfo

import pytest

from opsrules import const
from opsrules.store import MemoryCompletionStore
from opsrules.utils import dt_utils
from tests.helpers import (
    TEMPLATE_ANA_ONLY,
    TEMPLATE_MORNING,
    TEMPLATE_OFFICE,
    TEMPLATE_RETIRED,
    USER_ANA,
    USER_BRUNO,
    USER_CARLA,
    USER_GESTOR,
    make_item,
    make_user,
    specific_date,
    weekly,
)


@pytest.fixture(autouse=True)
def reset_default_timezone():
    """Keep every test on UTC unless it changes the zone itself."""
    dt_utils.set_default_timezone(ZoneInfo("UTC"))
    yield
    dt_utils.set_default_timezone(ZoneInfo("UTC"))


@pytest.fixture
def users() -> dict[str, dict[str, Any]]:
    """Users keyed by id."""
    return {
        USER_ANA: make_user(USER_ANA, const.ROLE_CONSULTOR, "Ana"),
        USER_BRUNO: make_user(USER_BRUNO, const.ROLE_CONSULTOR, "Bruno"),
        USER_CARLA: make_user(USER_CARLA, const.ROLE_SECRETARIA, "Carla"),
        USER_GESTOR: make_user(USER_GESTOR, const.ROLE_GESTOR, "Gestor"),
    }


@pytest.fixture
def templates() -> list[dict[str, Any]]:
    """Template catalog: role scoped, allow-listed and inactive."""
    return [
        {
            const.DATA_TEMPLATE_ID: TEMPLATE_MORNING,
            const.DATA_TEMPLATE_TITLE: "Morning routine",
            const.DATA_TEMPLATE_IS_ACTIVE: True,
            const.DATA_TEMPLATE_AUDIENCE_SCOPE: const.ROLE_CONSULTOR,
        },
        {
            const.DATA_TEMPLATE_ID: TEMPLATE_OFFICE,
            const.DATA_TEMPLATE_TITLE: "Office opening",
            const.DATA_TEMPLATE_IS_ACTIVE: True,
            const.DATA_TEMPLATE_AUDIENCE_SCOPE: const.ROLE_SECRETARIA,
        },
        {
            const.DATA_TEMPLATE_ID: TEMPLATE_ANA_ONLY,
            const.DATA_TEMPLATE_TITLE: "Ana onboarding",
            const.DATA_TEMPLATE_IS_ACTIVE: True,
        },
        {
            const.DATA_TEMPLATE_ID: TEMPLATE_RETIRED,
            const.DATA_TEMPLATE_TITLE: "Retired checklist",
            const.DATA_TEMPLATE_IS_ACTIVE: False,
        },
    ]


@pytest.fixture
def overrides() -> list[dict[str, Any]]:
    """Ana is the only user of the onboarding template."""
    return [
        {
            const.DATA_OVERRIDE_TEMPLATE_ID: TEMPLATE_ANA_ONLY,
            const.DATA_OVERRIDE_USER_ID: USER_ANA,
        }
    ]


@pytest.fixture
def items() -> list[dict[str, Any]]:
    """Flat item catalog for the templates above."""
    return [
        make_item("morning-calls", TEMPLATE_MORNING, order_index=1),
        make_item("morning-crm", TEMPLATE_MORNING, order_index=0, recurrence=weekly(2)),
        make_item("morning-old", TEMPLATE_MORNING, order_index=2, is_active=False),
        make_item(
            "onboarding-video", TEMPLATE_ANA_ONLY, recurrence=specific_date("2024-01-02")
        ),
        make_item("office-keys", TEMPLATE_OFFICE),
    ]


@pytest.fixture
def store() -> MemoryCompletionStore:
    """Empty completion store."""
    return MemoryCompletionStore()
