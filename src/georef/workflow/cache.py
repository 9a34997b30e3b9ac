"""Read-through cache of the patient collection."""

from __future__ import annotations

import logging
from typing import Callable

from ..models.domain import Patient

logger = logging.getLogger(__name__)


class PatientCollection:
    """Holds the last fetched patient list until invalidated.

    Nothing mutates the list in place: every write goes to the backend and
    is followed by ``invalidate()``, so the next ``get()`` refetches.
    """

    def __init__(self, fetch: Callable[[], list[Patient]]) -> None:
        self._fetch = fetch
        self._patients: list[Patient] | None = None
        self.version = 0

    @property
    def is_stale(self) -> bool:
        return self._patients is None

    def get(self) -> list[Patient]:
        if self._patients is None:
            self._patients = list(self._fetch())
            self.version += 1
            logger.debug(f"Fetched {len(self._patients)} patients (version {self.version})")
        return self._patients

    def invalidate(self) -> None:
        self._patients = None
