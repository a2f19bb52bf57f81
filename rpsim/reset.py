"""Reset controller that reports every block as ready."""

from __future__ import annotations

from .peripheral import AccessContext, OutOfBoundsError, Peripheral

FRCE_ON = 0x0
FRCE_OFF = 0x4
WDSEL = 0x8
DONE = 0xC

ALL_BLOCKS = 0x1FFF_FFFF


class Reset(Peripheral):
    """Reset control registers."""

    def __init__(self) -> None:
        self.frce_on = 0
        self.frce_off = 0
        self.wdsel = 0

    def read(self, address: int, ctx: AccessContext) -> int:
        if address == FRCE_ON:
            return self.frce_on
        if address == FRCE_OFF:
            return self.frce_off
        if address == WDSEL:
            return ALL_BLOCKS if self.wdsel == 0 else self.wdsel
        if address == DONE:
            return ALL_BLOCKS if self.frce_on == 0 else 0
        raise OutOfBoundsError(address)

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        if address == FRCE_ON:
            self.frce_on = value & ALL_BLOCKS
        elif address == FRCE_OFF:
            self.frce_off = value & ALL_BLOCKS
        elif address == WDSEL:
            self.wdsel = value & ALL_BLOCKS
        elif address == DONE:
            pass  # read-only
        else:
            raise OutOfBoundsError(address)