"""Shared infrastructure for memory-mapped peripherals: errors, clock, FIFOs and IRQ lines."""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable, Deque, Dict, Hashable, Iterator, List, Optional, Tuple

log = logging.getLogger(__name__)

MHZ = 1_000_000
CLK_SYS_HZ = 150 * MHZ

# Clock ticks are counted in system clock cycles.
TICKS_CLK_SYS = 1
TICKS_1MHZ = CLK_SYS_HZ // MHZ


class PeripheralError(Exception):
    """Base class of errors raised by peripheral register accesses."""


class OutOfBoundsError(PeripheralError):
    """Raised when a register offset does not exist in a peripheral."""

    def __init__(self, address: int) -> None:
        super().__init__(f"register offset {address:#x} is out of bounds")
        self.address = address


class Requestor(enum.IntEnum):
    """Bus master that performs an access."""

    PROC0 = 0
    PROC1 = 1
    DMA = 2
    DEBUG = 3


class Irq(enum.IntEnum):
    """Interrupt request numbers."""

    TIMER0_IRQ_0 = 0
    TIMER0_IRQ_1 = 1
    TIMER0_IRQ_2 = 2
    TIMER0_IRQ_3 = 3
    TIMER1_IRQ_0 = 4
    TIMER1_IRQ_1 = 5
    TIMER1_IRQ_2 = 6
    TIMER1_IRQ_3 = 7
    PWM_IRQ_WRAP_0 = 8
    PWM_IRQ_WRAP_1 = 9
    DMA_IRQ_0 = 10
    DMA_IRQ_1 = 11
    DMA_IRQ_2 = 12
    DMA_IRQ_3 = 13
    USBCTRL_IRQ = 14
    PIO0_IRQ_0 = 15
    PIO0_IRQ_1 = 16
    PIO1_IRQ_0 = 17
    PIO1_IRQ_1 = 18
    PIO2_IRQ_0 = 19
    PIO2_IRQ_1 = 20
    IO_IRQ_BANK0 = 21
    IO_IRQ_BANK0_NS = 22
    IO_IRQ_QSPI = 23
    IO_IRQ_QSPI_NS = 24
    SIO_IRQ_FIFO = 25
    SIO_IRQ_BELL = 26
    SIO_IRQ_FIFO_NS = 27
    SIO_IRQ_BELL_NS = 28
    SIO_IRQ_MTIMECMP = 29
    CLOCKS_IRQ = 30
    SPI0_IRQ = 31
    SPI1_IRQ = 32
    UART0_IRQ = 33
    UART1_IRQ = 34
    ADC_IRQ_FIFO = 35
    I2C0_IRQ = 36
    I2C1_IRQ = 37
    OTP_IRQ = 38
    TRNG_IRQ = 39
    PROC0_IRQ_CTI = 40
    PROC1_IRQ_CTI = 41
    PLL_SYS_IRQ = 42
    PLL_USB_IRQ = 43
    POWMAN_IRQ_POW = 44
    POWMAN_IRQ_TIMER = 45


class InterruptLines:
    """The level of every interrupt request line."""

    def __init__(self) -> None:
        self._asserted: set[int] = set()

    def set_irq(self, irq: int, state: bool) -> None:
        """Assert or deassert an interrupt line."""
        if state:
            self._asserted.add(int(irq))
        else:
            self._asserted.discard(int(irq))

    def is_pending(self, irq: int) -> bool:
        return int(irq) in self._asserted

    def pending(self) -> List[int]:
        """All asserted lines, lowest number first."""
        return sorted(self._asserted)


class Fifo:
    """A bounded first-in first-out queue."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._items: Deque[Any] = deque()

    def push(self, value: Any) -> None:
        """Append a value; raise OverflowError when the queue is full."""
        if self.is_full():
            raise OverflowError("FIFO is full")
        self._items.append(value)

    def pop(self) -> Optional[Any]:
        """Remove and return the oldest value, or None when empty."""
        return self._items.popleft() if self._items else None

    def is_empty(self) -> bool:
        return not self._items

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)


class Clock:
    """Discrete event scheduler counted in system clock ticks.

    Each event key holds at most one pending callback; scheduling a key again
    replaces the earlier callback.
    """

    def __init__(self) -> None:
        self.now = 0
        self._events: Dict[Hashable, Tuple[int, int, Callable[[], None]]] = {}
        self._sequence = count()

    def schedule(self, ticks: int, event: Hashable, callback: Callable[[], None]) -> None:
        """Run callback after the given number of ticks."""
        if ticks < 0:
            raise ValueError("ticks must not be negative")
        self._events[event] = (self.now + ticks, next(self._sequence), callback)

    def cancel(self, event: Hashable) -> None:
        self._events.pop(event, None)

    def is_scheduled(self, event: Hashable) -> bool:
        return event in self._events

    def tick(self) -> None:
        """Advance time by one tick and run every event that is due."""
        self.now += 1
        due = sorted(
            ((when, seq, key) for key, (when, seq, _) in self._events.items() if when <= self.now),
        )
        for _, seq, key in due:
            entry = self._events.get(key)
            if entry is None or entry[1] != seq:
                continue
            del self._events[key]
            entry[2]()


@dataclass
class AccessContext:
    """Everything a peripheral may need while serving one register access."""

    requestor: Requestor = Requestor.PROC0
    address: int = 0
    clock: Clock = field(default_factory=Clock)
    interrupts: InterruptLines = field(default_factory=InterruptLines)
    gpio: Any = None
    inspector: Optional[Callable[[Any], None]] = None

    def emit(self, event: Any) -> None:
        """Forward an inspection event to the inspector, if one is attached."""
        if self.inspector is not None:
            self.inspector(event)


class Peripheral(ABC):
    """A block of 32-bit registers addressed by offset."""

    @abstractmethod
    def read(self, address: int, ctx: AccessContext) -> int:
        """Return the value of the register at the offset."""

    @abstractmethod
    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        """Store a value into the register at the offset."""


class Powman(Peripheral):
    """Power manager placeholder: reads as zero and ignores writes."""

    def read(self, address: int, ctx: AccessContext) -> int:
        log.warning("Unimplemented peripheral read at address %#X", ctx.address)
        return 0

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        log.warning(
            "Unimplemented peripheral write at address %#X with value %#X",
            ctx.address,
            value,
        )


def extract_bit(value: int, bit: int) -> int:
    """Return bit number `bit` of value as 0 or 1."""
    return (value >> bit) & 1


def extract_bits(value: int, low: int, high: int) -> int:
    """Return bits low..high (inclusive) of value, shifted down to bit 0."""
    if high < low:
        raise ValueError("high must not be below low")
    return (value >> low) & ((1 << (high - low + 1)) - 1)