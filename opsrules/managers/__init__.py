"""Managers for OpsRules.

Managers hold catalog snapshots and a store, and call the pure engines.
"""

from .checklist_manager import ChecklistManager

__all__ = ["ChecklistManager"]
