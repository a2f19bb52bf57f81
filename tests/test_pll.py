import pytest

from rpsim import pll as regs
from rpsim.peripheral import AccessContext, Irq, OutOfBoundsError, extract_bit
from rpsim.pll import Pll


@pytest.fixture
def ctx():
    return AccessContext()


def test_default_is_locked(ctx):
    cs = Pll().read(regs.CS, ctx)
    assert extract_bit(cs, 31) == 1
    assert extract_bit(cs, 0) == 1


def test_cs_write_stays_locked(ctx):
    dev = Pll()
    dev.write(regs.CS, (1 << 30) | 0x21, ctx)
    cs = dev.read(regs.CS, ctx)
    assert extract_bit(cs, 31) == 1
    assert extract_bit(cs, 30) == 0
    assert cs & 0xFF == 0x21


def test_pwr_masked(ctx):
    dev = Pll()
    dev.write(regs.PWR, 0xFFFF_FFFF, ctx)
    assert dev.read(regs.PWR, ctx) == 0b101101
    dev.write(regs.PWR, 0, ctx)
    assert dev.read(regs.PWR, ctx) == 0


def test_prim_masked(ctx):
    dev = Pll()
    dev.write(regs.PRIM, 0xFFFF_FFFF, ctx)
    assert dev.read(regs.PRIM, ctx) == regs.PRIM_MASK
    dev.write(regs.PRIM, 0, ctx)
    assert dev.read(regs.PRIM, ctx) == 0


@pytest.mark.parametrize("index,irq", [(0, Irq.PLL_SYS_IRQ), (1, Irq.PLL_USB_IRQ)])
def test_force_raises_line(ctx, index, irq):
    dev = Pll(index)
    dev.write(regs.INTF, 1, ctx)
    assert dev.read(regs.INTS, ctx) == 1
    assert ctx.interrupts.is_pending(irq)
    dev.write(regs.INTF, 0, ctx)
    assert dev.read(regs.INTS, ctx) == 0
    assert not ctx.interrupts.is_pending(irq)


def test_raw_interrupt_enable_and_clear(ctx):
    dev = Pll()
    dev.interrupt_raw = True
    assert dev.read(regs.INTS, ctx) == 0
    dev.write(regs.INTE, 1, ctx)
    assert dev.read(regs.INTE, ctx) == 1
    assert dev.interrupt_status() is True
    assert ctx.interrupts.is_pending(Irq.PLL_SYS_IRQ)
    dev.write(regs.INTR, 1, ctx)
    assert dev.read(regs.INTR, ctx) == 0
    assert not ctx.interrupts.is_pending(Irq.PLL_SYS_IRQ)


def test_ints_read_only(ctx):
    dev = Pll()
    dev.write(regs.INTS, 1, ctx)
    assert dev.read(regs.INTS, ctx) == 0


def test_out_of_bounds(ctx):
    dev = Pll()
    with pytest.raises(OutOfBoundsError):
        dev.read(0x20, ctx)
    with pytest.raises(OutOfBoundsError):
        dev.write(0x20, 0, ctx)


def test_invalid_index():
    with pytest.raises(ValueError):
        Pll(2)