"""The RISC-V machine-mode platform timer of the single-cycle I/O block."""

from __future__ import annotations

from .peripheral import (
    TICKS_1MHZ,
    TICKS_CLK_SYS,
    AccessContext,
    Clock,
    InterruptLines,
    Irq,
    extract_bit,
)

EVENT = "riscv_timer"
_MASK64 = 0xFFFF_FFFF_FFFF_FFFF


class RiscVPlatformTimer:
    """64-bit MTIME counter with an MTIMECMP comparator."""

    def __init__(self) -> None:
        self.ctrl = 0b1101
        self.counter = 0
        self.cmp = _MASK64

    def next_tick(self) -> int:
        """Ticks until the next increment: full speed or once per microsecond."""
        return TICKS_CLK_SYS if extract_bit(self.ctrl, 1) else TICKS_1MHZ

    def update_interrupt(self, interrupts: InterruptLines) -> None:
        interrupts.set_irq(Irq.SIO_IRQ_MTIMECMP, self.cmp == self.counter)

    def update_ctrl(self, ctrl: int, ctx: AccessContext) -> None:
        """Apply a write to MTIME_CTRL: enable, disable or change speed."""
        last_ctrl = self.ctrl
        self.ctrl = ctrl & 0xFF
        if extract_bit(self.ctrl, 0) == 0:
            ctx.clock.cancel(EVENT)
        else:
            self.start(ctx.clock, ctx.interrupts)

        if extract_bit(self.ctrl, 1) != extract_bit(last_ctrl, 1):
            self.reschedule(ctx.clock, ctx.interrupts)

    def reschedule(self, clock: Clock, interrupts: InterruptLines) -> None:
        clock.cancel(EVENT)
        self.start(clock, interrupts)

    def start(self, clock: Clock, interrupts: InterruptLines) -> None:
        """Schedule the next increment unless one is already pending."""
        if clock.is_scheduled(EVENT):
            return

        def tick() -> None:
            self.counter = (self.counter + 1) & _MASK64
            self.update_interrupt(interrupts)
            self.start(clock, interrupts)

        clock.schedule(self.next_tick(), EVENT, tick)