"""One-time-programmable memory with fixed boot flags."""

from __future__ import annotations

import logging

from .peripheral import AccessContext, Peripheral

log = logging.getLogger(__name__)

CRIT0 = 0x038
CRIT0_R7 = 0x03F
CRIT1 = 0x040
CRIT1_R7 = 0x047
BOOT_FLAGS0 = 0x048
BOOT_FLAGS0_R2 = 0x04A
BOOT_FLAGS1 = 0x04B
BOOT_FLAGS1_R2 = 0x04D

CRIT0_VALUE = 0b01  # ARM cores disabled
CRIT1_VALUE = 0b001000  # boot architecture: RISC-V


class Otp(Peripheral):
    """Read-only OTP: critical flags select a RISC-V boot."""

    def read(self, address: int, ctx: AccessContext) -> int:
        if CRIT0 <= address <= CRIT0_R7:
            return CRIT0_VALUE
        if CRIT1 <= address <= CRIT1_R7:
            return CRIT1_VALUE
        if BOOT_FLAGS0 <= address <= BOOT_FLAGS0_R2 or BOOT_FLAGS1 <= address <= BOOT_FLAGS1_R2:
            return 0
        log.warning("Unimplemented OTP read at address %#X", address)
        return 0

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        """Every OTP location is read-only here; writes are ignored."""