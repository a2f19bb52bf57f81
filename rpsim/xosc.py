"""Crystal oscillator that is always stable."""

from __future__ import annotations

from .peripheral import AccessContext, OutOfBoundsError, Peripheral

CTRL = 0x00
STATUS = 0x04
DORMANT = 0x08
STARTUP = 0x0C
COUNT = 0x10

DORMANT_VAL = 0x636F6D61
WAKE = 0x77616B65

CTRL_ENABLE = 0xFAB << 12
CTRL_DISABLE = 0xD1E << 12

STATUS_STABLE = (1 << 31) | (1 << 12)
MIN_COUNT = 4


class Xosc(Peripheral):
    """Crystal oscillator control registers."""

    def __init__(self) -> None:
        self.ctrl = CTRL_ENABLE
        self.startup = 0x00C4
        self.dormant = WAKE
        self.counter = 0

    def read(self, address: int, ctx: AccessContext) -> int:
        if address == CTRL:
            return self.ctrl
        if address == STATUS:
            return STATUS_STABLE
        if address == DORMANT:
            return WAKE
        if address == STARTUP:
            return self.startup
        if address == COUNT:
            return 0 if self.counter == 0 else 1
        raise OutOfBoundsError(address)

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        if address == CTRL:
            self.ctrl = value
        elif address == STATUS:
            pass
        elif address == DORMANT:
            self.dormant = DORMANT_VAL if value == DORMANT_VAL else WAKE
        elif address == STARTUP:
            self.startup = value
        elif address == COUNT:
            self.counter = max(value & 0xFFFF, MIN_COUNT)
        else:
            raise OutOfBoundsError(address)