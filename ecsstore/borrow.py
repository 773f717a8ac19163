"""Run-time enforcement of shared and unique borrowing rules."""

from __future__ import annotations

import threading

#: Bit signalling that a unique (mutable) borrow is active.
UNIQUE_BIT = 1 << 63

#: Mask selecting the shared-borrow counter.
COUNTER_MASK = UNIQUE_BIT - 1


class BorrowError(RuntimeError):
    """Raised when borrow bookkeeping is violated."""


class AtomicBorrow:
    """A thread-safe borrow state.

    The highest bit records a unique borrow; the remaining bits count
    shared borrows.
    """

    __slots__ = ("_state", "_lock")

    def __init__(self, state: int = 0) -> None:
        if not 0 <= state <= (UNIQUE_BIT | COUNTER_MASK):
            raise ValueError(f"borrow state out of range: {state}")
        self._state = state
        self._lock = threading.Lock()

    @property
    def state(self) -> int:
        """The raw state word."""
        return self._state

    @property
    def shared_count(self) -> int:
        """Number of active shared borrows."""
        return self._state & COUNTER_MASK

    @property
    def is_unique(self) -> bool:
        """Whether a unique borrow is active."""
        return bool(self._state & UNIQUE_BIT)

    def borrow(self) -> bool:
        """Take a shared borrow; return False if a unique borrow is active."""
        with self._lock:
            prev = self._state
            if prev & COUNTER_MASK == COUNTER_MASK:
                raise BorrowError("immutable borrow counter overflowed")
            if prev & UNIQUE_BIT:
                return False
            self._state = prev + 1
            return True

    def borrow_mut(self) -> bool:
        """Take a unique borrow; return False if any borrow is active."""
        with self._lock:
            if self._state != 0:
                return False
            self._state = UNIQUE_BIT
            return True

    def release(self) -> None:
        """Release a shared borrow."""
        with self._lock:
            if self._state == 0:
                raise BorrowError("unbalanced release")
            if self._state & UNIQUE_BIT:
                raise BorrowError("shared release of unique borrow")
            self._state -= 1

    def release_mut(self) -> None:
        """Release a unique borrow."""
        with self._lock:
            if not self._state & UNIQUE_BIT:
                raise BorrowError("unique release of shared borrow")
            self._state &= ~UNIQUE_BIT

    def __repr__(self) -> str:
        return f"AtomicBorrow(shared={self.shared_count}, unique={self.is_unique})"