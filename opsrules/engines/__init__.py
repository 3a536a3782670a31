"""Engine modules for OpsRules.

Contains pure computation engines:
- recurrence_engine: Whether an obligation is due on a calendar day
- assignment_engine: Which templates a user sees
- completion_engine: Completion toggling and progress aggregation
- cutoff_engine: Cutoff period resolution and write-time validation
"""

# Use relative imports within package to avoid mypy module resolution issues
from .assignment_engine import AssignmentEngine
from .completion_engine import CompletionEngine, ToggleOutcome, completion_key
from .cutoff_engine import (
    CutoffEngine,
    CutoffPeriodValidationError,
    CutoffValidationResult,
)
from .recurrence_engine import (
    RecurrenceEngine,
    describe_rule,
    get_item_anchor,
    is_due,
    is_item_due,
)

__all__ = [
    "AssignmentEngine",
    "CompletionEngine",
    "CutoffEngine",
    "CutoffPeriodValidationError",
    "CutoffValidationResult",
    "RecurrenceEngine",
    "ToggleOutcome",
    "completion_key",
    "describe_rule",
    "get_item_anchor",
    "is_due",
    "is_item_due",
]
