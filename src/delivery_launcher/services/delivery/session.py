"""Per-order controller state: current classification, selection and submission guard."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from ...models.domain import ClassificationResult, Selection

logger = logging.getLogger(__name__)


class SubmissionInProgressError(RuntimeError):
    """Raised when a shipment submission is already running for the order."""


class DeliverySession:
    """State of the launch-delivery panel for one order.

    Refreshes are last-write-wins: only the result of the most recently started
    refresh can be committed. At most one submission runs at a time.
    """

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        self._lock = threading.Lock()
        self._submission_lock = threading.Lock()
        self._generation = 0
        self.result: Optional[ClassificationResult] = None
        self.selection: Optional[Selection] = None
        self.zone_code: Optional[str] = None

    def begin_refresh(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def commit(
        self,
        token: int,
        result: ClassificationResult,
        *,
        zone_code: Optional[str] = None,
        selection: Optional[Selection] = None,
    ) -> bool:
        with self._lock:
            if token != self._generation:
                logger.info(
                    f"Discarding stale options for order {self.order_id} "
                    f"(refresh {token}, latest {self._generation})"
                )
                return False
            self.result = result
            self.zone_code = zone_code
            self.selection = selection
            return True

    def select(
        self,
        selection: Optional[Selection],
        *,
        for_result: Optional[ClassificationResult] = None,
    ) -> bool:
        """Set the selection; with ``for_result``, only while that result is still current."""
        with self._lock:
            if for_result is not None and self.result is not for_result:
                return False
            self.selection = selection
            return True

    @property
    def submitting(self) -> bool:
        return self._submission_lock.locked()

    @contextmanager
    def submission(self) -> Iterator[None]:
        if not self._submission_lock.acquire(blocking=False):
            raise SubmissionInProgressError(
                f"A delivery launch is already in progress for order {self.order_id}."
            )
        try:
            yield
        finally:
            self._submission_lock.release()


class SessionRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[str, DeliverySession] = {}

    def get(self, order_id: str) -> DeliverySession:
        with self._lock:
            session = self._sessions.get(order_id)
            if session is None:
                session = DeliverySession(order_id)
                self._sessions[order_id] = session
            return session

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


sessions = SessionRegistry()
