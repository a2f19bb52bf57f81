"""Tick generators for the processors, timers, watchdog and RISC-V timer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .peripheral import AccessContext, OutOfBoundsError, Peripheral

CTRL = 0x00
CYCLES = 0x04
COUNT = 0x08

TICK_DEV_OFFSET = 0x0C
TICK_GENERATORS = ("proc0", "proc1", "timer0", "timer1", "watchdog", "riscv")

CTRL_RUNNING = 0b10


@dataclass
class TickGen:
    """One tick generator's registers."""

    ctrl: int = 0
    cycles: int = 0


@dataclass
class Ticks(Peripheral):
    """The bank of tick generators, one register block each."""

    generators: List[TickGen] = field(
        default_factory=lambda: [TickGen() for _ in TICK_GENERATORS]
    )

    def _generator(self, address: int) -> TickGen:
        index = address // TICK_DEV_OFFSET
        if index >= len(self.generators):
            raise OutOfBoundsError(address)
        return self.generators[index]

    def read(self, address: int, ctx: AccessContext) -> int:
        gen = self._generator(address)
        offset = address % TICK_DEV_OFFSET
        if offset == CTRL:
            return gen.ctrl | CTRL_RUNNING
        if offset == CYCLES:
            return gen.cycles
        if offset == COUNT:
            return 0
        raise OutOfBoundsError(address)

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        gen = self._generator(address)
        offset = address % TICK_DEV_OFFSET
        if offset == CTRL:
            gen.ctrl = value & 1
        elif offset == CYCLES:
            gen.cycles = value & 0xFF
        elif offset == COUNT:
            pass  # read-only
        else:
            raise OutOfBoundsError(address)