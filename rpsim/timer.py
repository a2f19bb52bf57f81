"""System timers with a 64-bit counter and four alarms each."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List

from .peripheral import (
    TICKS_1MHZ,
    TICKS_CLK_SYS,
    AccessContext,
    Clock,
    InterruptLines,
    Irq,
    OutOfBoundsError,
    Peripheral,
    extract_bit,
)

TIMEHW = 0x00
TIMELW = 0x04
TIMEHR = 0x08
TIMELR = 0x0C
ALARM0 = 0x10
ALARM1 = 0x14
ALARM2 = 0x18
ALARM3 = 0x1C
ARMED = 0x20
TIMERAWH = 0x24
TIMERAWL = 0x28
DBGPAUSE = 0x2C
PAUSE = 0x30
LOCKED = 0x34
SOURCE = 0x38
INTR = 0x3C
INTE = 0x40
INTF = 0x44
INTS = 0x48

ALARM_COUNT = 4
_ALARM_REGISTERS = (ALARM0, ALARM1, ALARM2, ALARM3)
_READ_ONLY = frozenset({INTS, TIMERAWH, TIMERAWL, TIMEHR, TIMELR})

_MASK32 = 0xFFFF_FFFF
_MASK64 = 0xFFFF_FFFF_FFFF_FFFF

_IRQS = (
    (Irq.TIMER0_IRQ_0, Irq.TIMER0_IRQ_1, Irq.TIMER0_IRQ_2, Irq.TIMER0_IRQ_3),
    (Irq.TIMER1_IRQ_0, Irq.TIMER1_IRQ_1, Irq.TIMER1_IRQ_2, Irq.TIMER1_IRQ_3),
)


class CountSource(enum.IntEnum):
    """What drives the timer counter."""

    MHZ_1 = 0
    CLK_SYS = 1

    @property
    def ticks(self) -> int:
        """System clock ticks between two counter increments."""
        return TICKS_1MHZ if self is CountSource.MHZ_1 else TICKS_CLK_SYS


@dataclass
class Alarm:
    """One alarm comparator."""

    time: int = 0
    armed: bool = False
    interrupting: bool = False


class Timer(Peripheral):
    """TIMER0 (index 0) or TIMER1 (index 1)."""

    def __init__(self, index: int = 0) -> None:
        if index not in (0, 1):
            raise ValueError(f"no timer with index {index}")
        self.index = index
        self.counter = 0
        self.alarms: List[Alarm] = [Alarm() for _ in range(ALARM_COUNT)]
        self.interrupt_mask = 0
        self.interrupt_force = 0
        self.is_paused = False
        self.is_locked = False
        self.source = CountSource.MHZ_1

    @property
    def event(self) -> tuple:
        """The clock event key of this timer's tick."""
        return ("timer", self.index)

    def interrupt_raw(self) -> int:
        return sum(1 << i for i, alarm in enumerate(self.alarms) if alarm.interrupting)

    def interrupt_status(self) -> int:
        status = sum(
            1 << i for i, alarm in enumerate(self.alarms) if alarm.armed and alarm.interrupting
        )
        return (status | self.interrupt_force) & self.interrupt_mask

    def update_interrupts(self, interrupts: InterruptLines) -> None:
        for irq, alarm in zip(_IRQS[self.index], self.alarms):
            interrupts.set_irq(irq, alarm.interrupting)

    def start(self, clock: Clock, interrupts: InterruptLines) -> None:
        """Schedule the first counter tick."""
        clock.schedule(self.source.ticks, self.event, lambda: self._tick(clock, interrupts))

    def reschedule(self, clock: Clock, interrupts: InterruptLines) -> None:
        """Drop any pending tick and start again at the current source rate."""
        if clock.is_scheduled(self.event):
            clock.cancel(self.event)
        self.start(clock, interrupts)

    def _tick(self, clock: Clock, interrupts: InterruptLines) -> None:
        if not self.is_paused:
            self.counter = (self.counter + 1) & _MASK64
            low = self.counter & _MASK32
            for alarm in self.alarms:
                if alarm.armed and low == alarm.time:
                    alarm.interrupting = True
            self.update_interrupts(interrupts)
        self.start(clock, interrupts)

    def read(self, address: int, ctx: AccessContext) -> int:
        if address in (TIMEHR, TIMERAWH):
            return (self.counter >> 32) & _MASK32
        if address in (TIMELR, TIMERAWL):
            return self.counter & _MASK32
        if address in _ALARM_REGISTERS:
            return self.alarms[_ALARM_REGISTERS.index(address)].time
        if address == ARMED:
            return sum(1 << i for i, alarm in enumerate(self.alarms) if alarm.armed)
        if address == DBGPAUSE:
            return 0
        if address == PAUSE:
            return int(self.is_paused)
        if address == LOCKED:
            return int(self.is_locked)
        if address == SOURCE:
            return int(self.source)
        if address == INTR:
            return self.interrupt_raw()
        if address == INTE:
            return self.interrupt_mask
        if address == INTF:
            return self.interrupt_force
        if address == INTS:
            return self.interrupt_status()
        if address in (TIMEHW, TIMELW):
            return 0  # write-only
        raise OutOfBoundsError(address)

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        if self.is_locked:
            return
        value &= _MASK32
        if address == TIMEHW:
            self.counter = (self.counter & _MASK32) | (value << 32)
        elif address == TIMELW:
            self.counter = (self.counter & (_MASK64 ^ _MASK32)) | value
        elif address in _ALARM_REGISTERS:
            alarm = self.alarms[_ALARM_REGISTERS.index(address)]
            alarm.time = value
            alarm.armed = True
        elif address == ARMED:
            for i, alarm in enumerate(self.alarms):
                alarm.armed = extract_bit(value, i) == 1
        elif address == PAUSE:
            self.is_paused = extract_bit(value, 0) == 1
        elif address == LOCKED:
            self.is_locked = extract_bit(value, 0) == 1
        elif address == SOURCE:
            try:
                self.source = CountSource(value)
            except ValueError:
                raise ValueError(f"invalid timer count source {value}") from None
            self.reschedule(ctx.clock, ctx.interrupts)
        elif address == INTR:
            for i, alarm in enumerate(self.alarms):
                if extract_bit(value, i):
                    alarm.interrupting = False
        elif address == INTE:
            self.interrupt_mask = value & 0b1111
            self.update_interrupts(ctx.interrupts)
        elif address == INTF:
            self.interrupt_force = value & 0b1111
            self.update_interrupts(ctx.interrupts)
        elif address == DBGPAUSE or address in _READ_ONLY:
            pass
        else:
            raise OutOfBoundsError(address)