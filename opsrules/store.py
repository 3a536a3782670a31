# File: store.py
"""Storage seam for OpsRules.

The engines never persist anything themselves. This module defines what
they need from the persistence layer and ships in-memory implementations
used by tests, scripts and single-process deployments:

- CompletionStore: protocol for (item_id, user_id, date) → done records
- MemoryCompletionStore: dict-backed store with atomic upsert per key
- CutoffPeriodRegistry: cutoff period list whose writes validate and apply
  inside one critical section, so overlapping periods can never be stored
  by two concurrent writers
"""

from __future__ import annotations

import copy
import threading
from typing import TYPE_CHECKING, Any, Protocol
import uuid

from . import const
from .engines.completion_engine import completion_key
from .engines.cutoff_engine import CutoffEngine, CutoffPeriodValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from .type_defs import CompletionRecord, CutoffPeriod


class CompletionStoreError(Exception):
    """Raised by a completion store when a read or write fails."""


class CompletionStore(Protocol):
    """What the completion engine needs from a record store.

    set_done must be an atomic upsert keyed by (item_id, user_id, date):
    at most one record per key, overwritten in place, never deleted.
    """

    def get_done(self, item_id: str, user_id: str, on_date: str | date) -> bool:
        """Return the done flag, False when no record exists."""
        ...

    def set_done(
        self, item_id: str, user_id: str, on_date: str | date, done: bool
    ) -> None:
        """Create or overwrite the record for the key."""
        ...


class MemoryCompletionStore:
    """Dict-backed CompletionStore.

    Keys are normalized with completion_key(), so "2024-01-05" and
    date(2024, 1, 5) address the same record.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._records: dict[tuple[str, str, str], bool] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_records(
        cls, records: Iterable[CompletionRecord | dict[str, Any]]
    ) -> MemoryCompletionStore:
        """Build a store from a snapshot of completion records.

        Later records win when the snapshot holds duplicates for one key.
        Records with an unparseable date are skipped.
        """
        store = cls()
        for record in records:
            try:
                key = completion_key(
                    record[const.DATA_COMPLETION_ITEM_ID],
                    record[const.DATA_COMPLETION_USER_ID],
                    record[const.DATA_COMPLETION_DATE],
                )
            except (KeyError, ValueError) as err:
                const.LOGGER.warning("Skipping malformed completion record: %s", err)
                continue
            store._records[key] = bool(record.get(const.DATA_COMPLETION_DONE, False))
        return store

    def get_done(self, item_id: str, user_id: str, on_date: str | date) -> bool:
        """Return the done flag, False when no record exists."""
        try:
            key = completion_key(item_id, user_id, on_date)
        except ValueError as err:
            raise CompletionStoreError(str(err)) from err
        return self._records.get(key, False)

    def set_done(
        self, item_id: str, user_id: str, on_date: str | date, done: bool
    ) -> None:
        """Create or overwrite the record for the key."""
        try:
            key = completion_key(item_id, user_id, on_date)
        except ValueError as err:
            raise CompletionStoreError(str(err)) from err
        with self._lock:
            self._records[key] = bool(done)

    def records(self) -> list[CompletionRecord]:
        """Return every stored record (for persistence or inspection)."""
        return [
            {
                const.DATA_COMPLETION_ITEM_ID: item_id,
                const.DATA_COMPLETION_USER_ID: user_id,
                const.DATA_COMPLETION_DATE: on_date,
                const.DATA_COMPLETION_DONE: done,
            }
            for (item_id, user_id, on_date), done in self._records.items()
        ]

    def __len__(self) -> int:
        """Return the number of stored records."""
        return len(self._records)


class CutoffPeriodRegistry:
    """In-memory cutoff period configuration with validated writes.

    Every write runs CutoffEngine.validate and the mutation under the same
    lock. A rejected write leaves the registry untouched.
    """

    def __init__(
        self, periods: Iterable[CutoffPeriod | dict[str, Any]] | None = None
    ) -> None:
        """Initialize the registry.

        Args:
            periods: Initial snapshot, trusted as already validated.
                Overlaps found in it are logged, not rejected.
        """
        self._periods: list[dict[str, Any]] = [dict(p) for p in periods or []]
        self._lock = threading.Lock()

        for first_id, second_id in CutoffEngine.find_overlaps(self._periods):
            const.LOGGER.warning(
                "Stored cutoff periods %s and %s overlap", first_id, second_id
            )

    def snapshot(self) -> list[CutoffPeriod]:
        """Return a deep copy of the current periods."""
        with self._lock:
            return copy.deepcopy(self._periods)  # type: ignore[return-value]

    def get(self, period_id: str) -> CutoffPeriod | None:
        """Return a copy of one period, or None if unknown."""
        with self._lock:
            index = self._index_of(period_id)
            if index is None:
                return None
            return dict(self._periods[index])  # type: ignore[return-value]

    def add(self, period: CutoffPeriod | dict[str, Any]) -> CutoffPeriod:
        """Validate and append a new period.

        An id is generated when the period has none.

        Raises:
            ValueError: If a period with the same id is already stored
            CutoffPeriodValidationError: If any validation rule fails
        """
        candidate = dict(period)
        candidate.setdefault(const.DATA_CUTOFF_ID, str(uuid.uuid4()))

        with self._lock:
            if self._index_of(candidate[const.DATA_CUTOFF_ID]) is not None:
                raise ValueError(
                    f"Cutoff period already exists: {candidate[const.DATA_CUTOFF_ID]}"
                )
            result = CutoffEngine.validate(candidate, self._periods)
            if not result.ok:
                const.LOGGER.warning(
                    "Rejected cutoff period '%s': %s",
                    candidate.get(const.DATA_CUTOFF_NAME),
                    result.error,
                )
                raise CutoffPeriodValidationError(result)
            self._periods.append(candidate)

        const.LOGGER.debug("Added cutoff period %s", candidate[const.DATA_CUTOFF_ID])
        return dict(candidate)  # type: ignore[return-value]

    def update(self, period_id: str, updates: dict[str, Any]) -> CutoffPeriod:
        """Merge updates into an existing period after validating the result.

        Raises:
            KeyError: If no period has this id
            CutoffPeriodValidationError: If the merged period is invalid
        """
        with self._lock:
            index = self._index_of(period_id)
            if index is None:
                raise KeyError(f"Cutoff period not found: {period_id}")

            candidate = {**self._periods[index], **updates}
            candidate[const.DATA_CUTOFF_ID] = period_id
            others = self._periods[:index] + self._periods[index + 1 :]
            result = CutoffEngine.validate(candidate, others)
            if not result.ok:
                const.LOGGER.warning(
                    "Rejected update of cutoff period %s: %s", period_id, result.error
                )
                raise CutoffPeriodValidationError(result)
            self._periods[index] = candidate

        return dict(candidate)  # type: ignore[return-value]

    def delete(self, period_id: str) -> None:
        """Remove a period.

        Raises:
            KeyError: If no period has this id
        """
        with self._lock:
            index = self._index_of(period_id)
            if index is None:
                raise KeyError(f"Cutoff period not found: {period_id}")
            del self._periods[index]

    def resolve(self, on_date: str | date) -> CutoffPeriod | None:
        """Resolve against the current snapshot."""
        return CutoffEngine.resolve(self.snapshot(), on_date)  # type: ignore[return-value]

    def _index_of(self, period_id: str) -> int | None:
        for index, period in enumerate(self._periods):
            if period.get(const.DATA_CUTOFF_ID) == period_id:
                return index
        return None
