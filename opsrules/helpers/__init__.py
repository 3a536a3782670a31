"""Helper modules for OpsRules.

- validation_helpers: Configuration-time schemas for rules, templates, items
- competence_helpers: Competence month policy layered on cutoff periods
"""
