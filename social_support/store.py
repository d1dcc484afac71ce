# social_support/store.py
from __future__ import annotations
import logging
from dataclasses import replace
from typing import Any
from collections.abc import Mapping

from .persistence import SnapshotStore
from .record import FormData, form_data_from_dict
from .schema import Section, TOTAL_STEPS

logger = logging.getLogger(__name__)

class FormStateStore:
    """
    Owns the single record and its progress metadata for one wizard session.

    Every mutation swaps in a new frozen FormData, so a reader holding the
    previous value never sees a half-applied update.
    """

    def __init__(self, persistence: SnapshotStore | None = None) -> None:
        self.persistence = persistence
        self._data = FormData()

    @property
    def data(self) -> FormData:
        return self._data

    # --- Mutation ---

    def update_section(self, section: Section, fields: Mapping[str, Any]) -> None:
        """Merges `fields` into one section. No validation happens here.

        An unknown field name raises TypeError.
        """
        current = self._data.get_section(section)
        self._data = self._data.with_section(section, replace(current, **dict(fields)))

    def set_current_step(self, step: int) -> None:
        if not 1 <= step <= TOTAL_STEPS:
            raise ValueError(f"Step must be between 1 and {TOTAL_STEPS}, got {step}")
        self._data = replace(self._data, current_step=step)

    def mark_step_completed(self, step: int) -> None:
        if self._data.is_step_completed(step):
            return
        self._data = replace(self._data, completed_steps=self._data.completed_steps + (step,))

    def reset_all(self) -> None:
        self._data = FormData()
        if self.persistence is not None:
            self.persistence.clear()

    def load_from(self, snapshot: Mapping[str, Any] | FormData) -> None:
        """Replaces everything with a snapshot.

        Raises SnapshotFormatError for a malformed snapshot; the current state
        is left untouched in that case.
        """
        if isinstance(snapshot, FormData):
            self._data = snapshot
            return
        self._data = form_data_from_dict(snapshot)

    # --- Persistence ---

    def save_progress(self) -> bool:
        if self.persistence is None:
            return False
        return self.persistence.save(self._data)

    def restore(self) -> bool:
        """Loads the persisted snapshot, if any. Returns whether one was restored."""
        if self.persistence is None:
            return False
        snapshot = self.persistence.load()
        if snapshot is None:
            return False
        self.load_from(snapshot)
        logger.info(f"Restored saved progress at step {snapshot.current_step}.")
        return True
