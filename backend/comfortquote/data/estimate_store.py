"""In-memory estimate store.

Holds every saved estimate in insertion order. Lookups by ``estimate_id``
return the most recently saved record, since the same home description
always produces the same ID.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from comfortquote.exceptions import EstimateNotFoundError
from comfortquote.models.estimate import StoredEstimate

if TYPE_CHECKING:
    from comfortquote.models.estimate import EstimateResult

logger = logging.getLogger(__name__)


class EstimateStore:
    """Repository for generated estimates.

    Created once per application and injected where needed. Safe to share
    between request threads.
    """

    def __init__(self) -> None:
        self._estimates: list[StoredEstimate] = []
        self._lock = threading.Lock()

    def save(
        self,
        estimate: EstimateResult,
        *,
        is_homeowner: bool,
        company_id: str | None = None,
        contractor_id: str | None = None,
    ) -> StoredEstimate:
        """Attach ownership to an estimate and store it."""
        stored = StoredEstimate(
            **estimate.model_dump(),
            company_id=company_id or None,
            contractor_id=contractor_id or None,
            is_homeowner=is_homeowner,
        )
        with self._lock:
            self._estimates.append(stored)
        logger.debug(
            "Saved estimate %s (submission %s)", stored.estimate_id, stored.submission_id
        )
        return stored

    def find(self, estimate_id: str) -> StoredEstimate | None:
        """Return the latest estimate saved under ``estimate_id``, or None."""
        with self._lock:
            for stored in reversed(self._estimates):
                if stored.estimate_id == estimate_id:
                    return stored
        return None

    def get(self, estimate_id: str) -> StoredEstimate:
        """Like ``find`` but raises EstimateNotFoundError when missing."""
        stored = self.find(estimate_id)
        if stored is None:
            raise EstimateNotFoundError(estimate_id)
        return stored

    def list_for_company(self, company_id: str) -> list[StoredEstimate]:
        with self._lock:
            return [e for e in self._estimates if e.company_id == company_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._estimates)
