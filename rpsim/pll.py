"""Phase-locked loop that locks immediately."""

from __future__ import annotations

from .peripheral import (
    AccessContext,
    InterruptLines,
    Irq,
    OutOfBoundsError,
    Peripheral,
    extract_bit,
)

CS = 0x00
PWR = 0x04
FBDIV_INT = 0x08
PRIM = 0x0C
INTR = 0x10
INTE = 0x14
INTF = 0x18
INTS = 0x1C

CS_LOCK = 1 << 31
CS_LOCK_N = 1 << 30
PWR_MASK = 0b101101
PRIM_MASK = (0b111 << 16) | (0b111 << 12)

_IRQS = (Irq.PLL_SYS_IRQ, Irq.PLL_USB_IRQ)


class Pll(Peripheral):
    """PLL_SYS (index 0) or PLL_USB (index 1)."""

    def __init__(self, index: int = 0) -> None:
        if index not in (0, 1):
            raise ValueError(f"no PLL with index {index}")
        self.index = index
        self.cs = 1 | CS_LOCK
        self.pwr = PWR_MASK
        self.fbdiv_int = 0
        self.prim = (0x7 << 12) | (0x7 << 16)
        self.interrupt_raw = False
        self.interrupt_enabled = False
        self.interrupt_force = False

    def interrupt_status(self) -> bool:
        return (self.interrupt_raw and self.interrupt_enabled) or self.interrupt_force

    def update_interrupt(self, interrupts: InterruptLines) -> None:
        interrupts.set_irq(_IRQS[self.index], self.interrupt_status())

    def read(self, address: int, ctx: AccessContext) -> int:
        registers = {
            CS: self.cs,
            PWR: self.pwr,
            FBDIV_INT: self.fbdiv_int,
            PRIM: self.prim,
            INTR: int(self.interrupt_raw),
            INTE: int(self.interrupt_enabled),
            INTF: int(self.interrupt_force),
            INTS: int(self.interrupt_status()),
        }
        try:
            return registers[address]
        except KeyError:
            raise OutOfBoundsError(address) from None

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        value &= 0xFFFF_FFFF
        if address == CS:
            # The PLL always reports itself locked.
            self.cs = (value & ~(CS_LOCK | CS_LOCK_N)) | CS_LOCK
        elif address == PWR:
            self.pwr = value & PWR_MASK
        elif address == FBDIV_INT:
            self.pwr = value & 0xFFF
        elif address == PRIM:
            self.prim = value & PRIM_MASK
        elif address == INTR:
            if extract_bit(value, 0) == 1:
                self.interrupt_raw = False
                self.update_interrupt(ctx.interrupts)
        elif address == INTE:
            self.interrupt_enabled = extract_bit(value, 0) == 1
            self.update_interrupt(ctx.interrupts)
        elif address == INTF:
            self.interrupt_force = extract_bit(value, 0) == 1
            self.update_interrupt(ctx.interrupts)
        elif address == INTS:
            pass  # read-only
        else:
            raise OutOfBoundsError(address)