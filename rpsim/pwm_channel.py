"""One PWM slice: counter, compare values and divider."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .peripheral import CLK_SYS_HZ, extract_bit, extract_bits

_M16 = 0xFFFF
DIV_ZERO_TICKS = 256


class DivMode(enum.IntEnum):
    """What advances the counter."""

    DIV = 0  # the fractional divider
    LEVEL = 1  # while the B pin is high
    RISE = 2  # rising edges on the B pin
    FALL = 3  # falling edges on the B pin

    def is_channel_b_input(self) -> bool:
        return self is not DivMode.DIV


@dataclass
class PwmChannel:
    """Registers and counting state of one PWM channel."""

    csr: int = 0
    div: int = 1 << 4
    ctr: int = 0
    cc: int = 0
    top: int = 0xFFFF
    wrapped: bool = False
    _counting_up: bool = field(default=True, init=False, repr=False)

    def advance(self) -> None:
        """Advance the counter by one step, wrapping or turning at TOP."""
        if self.top == 0:
            return

        ph_correct = self.ph_correct()
        if ph_correct and self.ctr == self.top:
            self._counting_up = False
        if (ph_correct and not self._counting_up and self.ctr == 0) or not ph_correct:
            self._counting_up = True

        step = 1 if self._counting_up else -1
        self.ctr = (self.ctr + step) & _M16
        if self.ctr > self.top:
            self.ctr = 0
        if self.ctr == 0:
            self.wrapped = True

    def next_update(self) -> int:
        """System clock ticks until the next counter step."""
        integer = self.div >> 4
        if integer == 0:
            return DIV_ZERO_TICKS
        divisor = integer + (self.div & 0x0F) / 16.0
        seconds = 1.0 / CLK_SYS_HZ / divisor
        return max(1, int(seconds * CLK_SYS_HZ))

    def is_interrupting(self) -> bool:
        return self.wrapped

    def update_csr(self, value: int) -> None:
        """Write the control register; bits 7 and 6 nudge the phase by one."""
        value &= 0xFF
        ph_advance = extract_bit(value, 7)
        ph_ret = extract_bit(value, 6)
        self.csr = value & 0b11_1111

        if ph_advance:
            self.ctr = 0 if self.ctr == self.top else (self.ctr + 1) & _M16
            if self.ctr == 0:
                self.wrapped = True

        if ph_ret:
            self.ctr = self.top if self.ctr == 0 else self.ctr - 1
            if self.ctr == 0:
                self.wrapped = True

    def clear_interrupt(self) -> None:
        self.wrapped = False

    def is_enabled(self) -> bool:
        return extract_bit(self.csr, 0) == 1

    def enable(self) -> None:
        self.csr |= 1

    def disable(self) -> None:
        self.csr &= ~1

    def ph_correct(self) -> bool:
        return extract_bit(self.csr, 1) == 1

    def invert_a(self) -> bool:
        return extract_bit(self.csr, 2) == 1

    def invert_b(self) -> bool:
        return extract_bit(self.csr, 3) == 1

    def output_a(self) -> bool:
        output = self.ctr >= (self.cc & _M16)
        return not output if self.invert_a() else output

    def output_b(self) -> bool:
        output = self.ctr >= ((self.cc >> 16) & _M16)
        return not output if self.invert_b() else output

    def divmode(self) -> DivMode:
        return DivMode(extract_bits(self.csr, 4, 5))