"""Watchdog with scratch registers that survive a soft reset."""

from __future__ import annotations

import logging
from typing import List

from .peripheral import AccessContext, OutOfBoundsError, Peripheral, extract_bit

log = logging.getLogger(__name__)

CTRL = 0x0000
LOAD = 0x0004
REASON = 0x0008
SCRATCH0 = 0x000C
SCRATCH1 = 0x0010
SCRATCH2 = 0x0014
SCRATCH3 = 0x0018
SCRATCH4 = 0x001C
SCRATCH5 = 0x0020
SCRATCH6 = 0x0024
SCRATCH7 = 0x0028

SCRATCH_COUNT = 8
BOOT_ENTRY = 0x1000_0086


class WatchdogResetError(RuntimeError):
    """Raised when software triggers a watchdog reset, which is not modelled."""


def _default_scratch() -> List[int]:
    scratch = [0] * SCRATCH_COUNT
    scratch[4] = 0xB007C0D3
    scratch[5] = 0x4FF83F2D ^ BOOT_ENTRY
    scratch[6] = 0x20081F50
    scratch[7] = BOOT_ENTRY
    return scratch


class WatchDog(Peripheral):
    """Watchdog control, load, reset reason and scratch registers."""

    def __init__(self) -> None:
        self._set_defaults()
        self.scratch = _default_scratch()

    def _set_defaults(self) -> None:
        self.pause_dbg1 = True
        self.pause_dbg0 = True
        self.pause_jtag = True
        self.enable = False
        self.timer = 0
        self.reason_timer = False
        self.reason_force = True

    def reset(self) -> None:
        """Return every register to its default except the scratch registers."""
        self._set_defaults()

    def _scratch_index(self, address: int) -> int:
        return (address - SCRATCH0) // 4

    def read(self, address: int, ctx: AccessContext) -> int:
        log.debug("Watchdog read from %#x", address)
        if address == CTRL:
            return (
                self.timer
                | (int(self.pause_jtag) << 24)
                | (int(self.pause_dbg0) << 25)
                | (int(self.pause_dbg1) << 26)
                | (int(self.enable) << 30)
            )
        if address == LOAD:
            return 0
        if address == REASON:
            return int(self.reason_timer) | (int(self.reason_force) << 1)
        if SCRATCH0 <= address <= SCRATCH7 and address % 4 == 0:
            return self.scratch[self._scratch_index(address)]
        raise OutOfBoundsError(address)

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        value &= 0xFFFF_FFFF
        log.debug("Watchdog write to %#x with value %#x", address, value)
        if address == CTRL:
            if extract_bit(value, 31):
                raise WatchdogResetError("watchdog reset trigger is not implemented")
            self.enable = extract_bit(value, 30) != 0
            self.pause_jtag = extract_bit(value, 24) != 0
            self.pause_dbg0 = extract_bit(value, 25) != 0
            self.enable = extract_bit(value, 26) != 0
        elif address == LOAD:
            self.timer = value
        elif address == REASON:
            pass  # read-only
        elif SCRATCH0 <= address <= SCRATCH7 and address % 4 == 0:
            self.scratch[self._scratch_index(address)] = value
        else:
            raise OutOfBoundsError(address)