"""
Lock Manager for the order store.

Hands out one lock per order so mutations of the same order are serialized
while different orders proceed in parallel.

LOCK ORDERING CONSTRAINTS:
==========================
The _meta_lock is NON-REENTRANT and only guards the lock dictionary. It is
never held while an order lock is acquired.

Order of acquisition when more than one lock is needed:
1. creation_lock (global, id and order number assignment)
2. order lock (per order)

No I/O and no listener callbacks may run while holding any of these locks.
"""

from __future__ import annotations

import threading

from shared.config.logging import get_logger

logger = get_logger(__name__)


class OrderLockManager:
    """
    Manages threading locks for order mutations.

    - Order locks: one lock per order id, created on first use
    - Creation lock: serializes id/order number assignment store-wide

    Locks of orders that reached a terminal state are discarded so the lock
    table does not grow with order history.
    """

    def __init__(self) -> None:
        self._order_locks: dict[str, threading.Lock] = {}

        # Meta-lock for managing the lock dictionary itself
        self._meta_lock = threading.Lock()

        self._creation_lock = threading.Lock()

        # Metrics
        self._locks_discarded = 0

    @property
    def creation_lock(self) -> threading.Lock:
        """Lock for order identity assignment."""
        return self._creation_lock

    @property
    def order_lock_count(self) -> int:
        """Number of order locks currently cached."""
        with self._meta_lock:
            return len(self._order_locks)

    @property
    def locks_discarded_total(self) -> int:
        """Total number of locks discarded since startup."""
        return self._locks_discarded

    def get_order_lock(self, order_id: str) -> threading.Lock:
        """
        Get or create the lock for a specific order.

        Always goes through the meta lock so the dictionary is never read
        while another thread resizes it.
        """
        with self._meta_lock:
            lock = self._order_locks.get(order_id)
            if lock is None:
                lock = threading.Lock()
                self._order_locks[order_id] = lock
            return lock

    def discard(self, order_id: str) -> None:
        """
        Forget the lock of an order that can no longer change.

        A thread still waiting on the discarded lock re-reads the order after
        acquiring it and fails on the terminal check, so dropping it is safe.
        """
        with self._meta_lock:
            if self._order_locks.pop(order_id, None) is not None:
                self._locks_discarded += 1
                logger.debug("Order lock discarded", order_id=order_id)
