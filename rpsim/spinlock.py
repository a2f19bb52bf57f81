"""The 32 hardware spinlocks of the single-cycle I/O block."""

from __future__ import annotations


class SpinLock:
    """Thirty-two one-bit locks packed into one word."""

    def __init__(self) -> None:
        self._locks = 0

    def state(self) -> int:
        return self._locks

    def lock_state(self, index: int) -> int:
        """Zero when the lock is free, non-zero when it is held."""
        return self._locks & (1 << index)

    def claim(self, index: int) -> int:
        """Try to take a lock: 0 if already held, otherwise its bit mask."""
        mask = 1 << index
        if self._locks & mask:
            return 0
        self._locks |= mask
        return mask

    def release(self, index: int) -> None:
        self._locks &= ~(1 << index) & 0xFFFF_FFFF