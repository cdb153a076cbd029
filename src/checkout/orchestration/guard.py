"""Per-subject checkout exclusion.

Two checkouts for the same subject would otherwise read the same cart and
both record an order from it. The guard lets one attempt run at a time for a
subject; attempts for different subjects never wait on each other.

The exclusion is process-local. Deployments running several workers must
route a subject's checkouts to one worker or replace the guard with a
database or distributed lock offering the same ``hold()`` contract.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import TypeVar

import structlog

from checkout.orchestration.errors import ConcurrentCheckoutError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class LockMode(Enum):
    WAIT = "wait"
    REJECT = "reject"


class _Slot:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class CheckoutGuard:
    def __init__(self, mode: LockMode | str = LockMode.WAIT, wait_timeout: float = 10.0) -> None:
        self.mode = LockMode(mode)
        self.wait_timeout = wait_timeout
        self._slots: dict[str, _Slot] = {}
        self._registry_lock = threading.Lock()

    def _checkout_slot(self, subject_id: str) -> _Slot:
        with self._registry_lock:
            slot = self._slots.get(subject_id)
            if slot is None:
                slot = self._slots[subject_id] = _Slot()
            slot.users += 1
            return slot

    def _return_slot(self, subject_id: str, slot: _Slot) -> None:
        with self._registry_lock:
            slot.users -= 1
            if slot.users == 0:
                self._slots.pop(subject_id, None)

    @contextmanager
    def hold(self, subject_id: str) -> Iterator[None]:
        """Hold the subject's checkout lock for the duration of the block."""
        slot = self._checkout_slot(subject_id)
        if self.mode is LockMode.REJECT:
            acquired = slot.lock.acquire(blocking=False)
        else:
            acquired = slot.lock.acquire(timeout=self.wait_timeout)

        if not acquired:
            self._return_slot(subject_id, slot)
            logger.info("Checkout rejected, another attempt is in progress", subject_id=subject_id)
            raise ConcurrentCheckoutError(
                f"A checkout for {subject_id} is already in progress",
                subject_id=subject_id,
            )

        try:
            yield
        finally:
            slot.lock.release()
            self._return_slot(subject_id, slot)

    def run(self, subject_id: str, attempt: Callable[[], T]) -> T:
        """Run ``attempt`` with exclusive access for the subject."""
        with self.hold(subject_id):
            return attempt()

    def is_held(self, subject_id: str) -> bool:
        with self._registry_lock:
            slot = self._slots.get(subject_id)
            return slot is not None and slot.lock.locked()
