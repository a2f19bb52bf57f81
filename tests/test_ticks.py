import pytest

from rpsim.peripheral import AccessContext, OutOfBoundsError
from rpsim.ticks import COUNT, CTRL, CYCLES, TICK_DEV_OFFSET, TICK_GENERATORS, Ticks


def test_ctrl_reports_running():
    ticks = Ticks()
    ctx = AccessContext()
    assert ticks.read(CTRL, ctx) == 0b10
    ticks.write(CTRL, 0xFF, ctx)
    assert ticks.read(CTRL, ctx) == 0b11


@pytest.mark.parametrize("index", range(len(TICK_GENERATORS)))
def test_cycles_roundtrip_per_generator(index):
    ticks = Ticks()
    ctx = AccessContext()
    base = index * TICK_DEV_OFFSET
    ticks.write(base + CYCLES, 12, ctx)
    assert ticks.read(base + CYCLES, ctx) == 12
    others = [
        ticks.read(i * TICK_DEV_OFFSET + CYCLES, ctx)
        for i in range(len(TICK_GENERATORS))
        if i != index
    ]
    assert others == [0] * (len(TICK_GENERATORS) - 1)


def test_cycles_masked_to_byte():
    ticks = Ticks()
    ctx = AccessContext()
    ticks.write(CYCLES, 0x1FF, ctx)
    assert ticks.read(CYCLES, ctx) == 0xFF


def test_count_reads_zero_and_ignores_writes():
    ticks = Ticks()
    ctx = AccessContext()
    ticks.write(COUNT, 42, ctx)
    assert ticks.read(COUNT, ctx) == 0


def test_out_of_bounds():
    ticks = Ticks()
    beyond = len(TICK_GENERATORS) * TICK_DEV_OFFSET
    with pytest.raises(OutOfBoundsError):
        ticks.read(beyond, AccessContext())
    with pytest.raises(OutOfBoundsError):
        ticks.write(beyond, 0, AccessContext())