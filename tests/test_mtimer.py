from rpsim.mtimer import EVENT, RiscVPlatformTimer
from rpsim.peripheral import (
    TICKS_1MHZ,
    TICKS_CLK_SYS,
    AccessContext,
    Clock,
    InterruptLines,
    Irq,
)


def _ctx():
    return AccessContext(clock=Clock(), interrupts=InterruptLines())


def test_default_speed_is_one_per_microsecond():
    timer = RiscVPlatformTimer()
    assert timer.ctrl == 0b1101
    assert timer.next_tick() == TICKS_1MHZ


def test_start_counts_at_microsecond_rate():
    ctx = _ctx()
    timer = RiscVPlatformTimer()
    timer.start(ctx.clock, ctx.interrupts)
    for _ in range(TICKS_1MHZ - 1):
        ctx.clock.tick()
    assert timer.counter == 0
    ctx.clock.tick()
    assert timer.counter == 1


def test_full_speed_counts_every_tick():
    ctx = _ctx()
    timer = RiscVPlatformTimer()
    timer.update_ctrl(0b11, ctx)
    assert timer.next_tick() == TICKS_CLK_SYS
    for _ in range(5):
        ctx.clock.tick()
    assert timer.counter == 5


def test_disable_cancels_counting():
    ctx = _ctx()
    timer = RiscVPlatformTimer()
    timer.update_ctrl(0b11, ctx)
    ctx.clock.tick()
    timer.update_ctrl(0b10, ctx)
    assert not ctx.clock.is_scheduled(EVENT)
    for _ in range(3):
        ctx.clock.tick()
    assert timer.counter == 1


def test_start_twice_keeps_one_event():
    ctx = _ctx()
    timer = RiscVPlatformTimer()
    timer.update_ctrl(0b11, ctx)
    timer.start(ctx.clock, ctx.interrupts)
    ctx.clock.tick()
    assert timer.counter == 1


def test_compare_match_raises_interrupt():
    ctx = _ctx()
    timer = RiscVPlatformTimer()
    timer.cmp = 2
    timer.update_ctrl(0b11, ctx)
    ctx.clock.tick()
    assert not ctx.interrupts.is_pending(Irq.SIO_IRQ_MTIMECMP)
    ctx.clock.tick()
    assert ctx.interrupts.is_pending(Irq.SIO_IRQ_MTIMECMP)
    ctx.clock.tick()
    assert not ctx.interrupts.is_pending(Irq.SIO_IRQ_MTIMECMP)


def test_counter_wraps_at_64_bits():
    ctx = _ctx()
    timer = RiscVPlatformTimer()
    timer.counter = 0xFFFF_FFFF_FFFF_FFFF
    timer.update_ctrl(0b11, ctx)
    ctx.clock.tick()
    assert timer.counter == 0