# rpsim

rpsim models the memory-mapped peripherals of the RP2350 microcontroller at
register level. Each peripheral accepts 32-bit reads and writes at offsets
within its own register block and changes its state the way the chip's
registers do. A peripheral can raise interrupt lines and schedule work on a
shared clock.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Building blocks

`rpsim.peripheral` holds the shared pieces:

- `Clock` is a scheduler driven one cycle at a time.
  - `schedule(ticks, event, callback)` runs `callback` after `ticks` cycles.
  - Each event key holds at most one pending callback. Scheduling the same key
    again replaces the earlier callback.
  - `cancel(event)` and `is_scheduled(event)` manage a key.
  - `tick()` advances time by one cycle and runs every callback that is due.
- `InterruptLines` holds the interrupt request lines, and `Irq` numbers them.
  - `set_irq(irq, state)` sets or clears a line.
  - `is_pending(irq)` reports whether a line is set.
  - `pending()` lists the lines that are set, lowest number first.
- `AccessContext` is what a register access carries:
  - the requesting bus master (`Requestor`)
  - the address
  - the clock
  - the interrupt lines
  - an optional `inspector` callable, which receives the events that
    peripherals emit
- `Fifo` is a bounded first-in, first-out queue.
  - `push` raises `OverflowError` when the queue is full.
  - `pop` returns `None` when the queue is empty.
- `Peripheral` is the abstract base class. It has `read(address, ctx)` and
  `write(address, value, ctx)`.
- `PeripheralError` is the base error. Its subclass `OutOfBoundsError` is
  raised when a register offset does not exist in a peripheral.
- `extract_bit(value, bit)` and `extract_bits(value, low, high)` are bit-field
  helpers. The range `low` to `high` includes both ends.

Each rate is given as a number of clock cycles:

- `TICKS_CLK_SYS` is 1 cycle.
- `TICKS_1MHZ` is 150 cycles, which is one microsecond at 150 MHz.

## Peripherals

| Module | Classes | Behaviour |
| --- | --- | --- |
| `rpsim.otp` | `Otp` | Read-only. The critical flags select a RISC-V boot with the ARM cores disabled. Writes are ignored. |
| `rpsim.reset` | `Reset` | Force-on, force-off and watchdog-select registers. Reports every block as ready while nothing is forced on. |
| `rpsim.ticks` | `Ticks`, `TickGen` | Six tick generators, each with control and cycles registers. |
| `rpsim.xosc` | `Xosc` | The crystal oscillator always reports itself stable. |
| `rpsim.i2c` | `I2c` | The register file of I2C controller 0 or 1, with clock counts, interrupt mask, DMA levels and status flags. No bus transfers take place. |
| `rpsim.pll` | `Pll` | PLL_SYS or PLL_USB. Always reports lock. Drives its interrupt line. |
| `rpsim.watchdog` | `WatchDog`, `WatchdogResetError` | Control, load, reason and eight scratch registers. `reset()` keeps the scratch registers. Setting the trigger bit raises `WatchdogResetError`. |
| `rpsim.timer` | `Timer`, `Alarm`, `CountSource` | TIMER0 or TIMER1: a 64-bit counter, four alarms, pause, lock and a choice of count source. |
| `rpsim.mtimer` | `RiscVPlatformTimer` | The RISC-V machine-mode timer. Sets `SIO_IRQ_MTIMECMP` when the counter equals the comparator. |
| `rpsim.sha256` | `Sha256` | SHA-256 block fed one word per write, with optional byte swap. The digest becomes valid 57 cycles after 64 bytes arrive. |
| `rpsim.trng` | `Trng`, `TrngGenerated` | Every entropy-data read returns fresh random bits from `secrets` and emits `TrngGenerated` to the inspector. |
| `rpsim.pwm_channel` | `PwmChannel`, `DivMode` | One PWM channel: the counter in normal and phase-correct modes, compare outputs, phase advance and retard, and divider timing. |
| `rpsim.interpolator` | `Interpolator`, `InterpolatorConfig` | Interpolator 0, which blends, or interpolator 1, which clamps. Supports shift and mask, sign extension, add, POP writeback and `set_base01`. |
| `rpsim.mailboxes` | `Mailboxes` | The two inter-core FIFOs, eight deep, with sticky read-on-empty and write-on-full flags. |
| `rpsim.spinlock` | `SpinLock` | Thirty-two spinlocks packed into one word. |
| `rpsim.peripheral` | `Powman` | Placeholder. Reads return zero, writes are ignored, and each access logs a warning. |

Peripherals that come in two instances take an index when they are built, for
example `Timer(1)` or `Pll(0)`. An index other than 0 or 1 raises
`ValueError`.

## Example

Run a timer on the shared clock:

```python
from rpsim.peripheral import AccessContext, Clock, InterruptLines
from rpsim.timer import Timer

clock = Clock()
interrupts = InterruptLines()
ctx = AccessContext(clock=clock, interrupts=interrupts)

timer = Timer(0)
timer.start(clock, interrupts)

for _ in range(150):
    clock.tick()

print(timer.counter)  # 1: one microsecond at the default 1 MHz source
```

Reading an offset that a peripheral does not have raises `OutOfBoundsError`:

```python
from rpsim.peripheral import AccessContext, OutOfBoundsError
from rpsim.reset import Reset

try:
    Reset().read(0x100, AccessContext())
except OutOfBoundsError as error:
    print(hex(error.address))
```

## What the package does not do

rpsim models individual peripherals only. It provides none of the following:

- a processor core or instruction execution
- a system bus or address map that routes accesses to peripherals
- memory or firmware loading
- GPIO pins
- a command-line program

To build a simulator around these models, create the peripherals yourself,
pass them an `AccessContext`, and call `Clock.tick()` in your own loop.