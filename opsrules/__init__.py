"""OpsRules - temporal rule resolution for the operations dashboard.

Decides, for a calendar date:
- which recurring checklist templates a user sees
- which checklist items are due under their recurrence rules
- whether each item is done, and the day's completion progress
- which configured cutoff period (competence month) a transaction falls in

Everything here is pure evaluation over snapshots supplied by the caller;
persistence, authentication and UI live in the surrounding application.
"""

from .engines import (
    AssignmentEngine,
    CompletionEngine,
    CutoffEngine,
    CutoffPeriodValidationError,
    CutoffValidationResult,
    RecurrenceEngine,
    ToggleOutcome,
    is_due,
    is_item_due,
)
from .helpers.competence_helpers import calculate_competence_month
from .managers import ChecklistManager
from .store import (
    CompletionStore,
    CompletionStoreError,
    CutoffPeriodRegistry,
    MemoryCompletionStore,
)

__version__ = "0.1.0"

__all__ = [
    "AssignmentEngine",
    "ChecklistManager",
    "CompletionEngine",
    "CompletionStore",
    "CompletionStoreError",
    "CutoffEngine",
    "CutoffPeriodRegistry",
    "CutoffPeriodValidationError",
    "CutoffValidationResult",
    "MemoryCompletionStore",
    "RecurrenceEngine",
    "ToggleOutcome",
    "calculate_competence_month",
    "is_due",
    "is_item_due",
]
