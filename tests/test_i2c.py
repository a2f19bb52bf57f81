import pytest

from rpsim import i2c as regs
from rpsim.i2c import I2c
from rpsim.peripheral import AccessContext, InterruptLines, Irq, OutOfBoundsError, extract_bit


@pytest.fixture
def ctx():
    return AccessContext()


def test_component_identification(ctx):
    dev = I2c()
    assert dev.read(regs.IC_COMP_VERSION, ctx) == 0x3230312A
    assert dev.read(regs.IC_COMP_TYPE, ctx) == 0x44570140
    assert dev.read(regs.IC_COMP_PARAM_1, ctx) == 0


@pytest.mark.parametrize(
    "offset", [regs.IC_CON, regs.IC_TAR, regs.IC_ENABLE, regs.IC_STATUS, regs.IC_DMA_CR]
)
def test_unmodelled_registers_read_their_offset(ctx, offset):
    assert I2c().read(offset, ctx) == offset


def test_scl_count_round_trip(ctx):
    dev = I2c()
    dev.write(regs.IC_SS_SCL_HCNT, 0x1234, ctx)
    dev.write(regs.IC_FS_SCL_LCNT, 0x0042, ctx)
    assert dev.read(regs.IC_SS_SCL_HCNT, ctx) == 0x1234
    assert dev.read(regs.IC_FS_SCL_LCNT, ctx) == 0x0042


def test_scl_count_truncated_to_16_bits(ctx):
    dev = I2c()
    dev.write(regs.IC_SS_SCL_LCNT, 0x12345, ctx)
    assert dev.read(regs.IC_SS_SCL_LCNT, ctx) == 0x2345


def test_out_of_bounds(ctx):
    dev = I2c()
    with pytest.raises(OutOfBoundsError):
        dev.read(0x0C, ctx)
    with pytest.raises(OutOfBoundsError):
        dev.write(0xA4, 1, ctx)


def test_read_only_write_ignored(ctx):
    dev = I2c()
    dev.write(regs.IC_COMP_TYPE, 0, ctx)
    assert dev.read(regs.IC_COMP_TYPE, ctx) == regs.COMP_TYPE


def test_spike_length_needs_enable(ctx):
    dev = I2c()
    dev.write(regs.IC_FS_SPKLEN, 5, ctx)
    assert dev.read(regs.IC_FS_SPKLEN, ctx) == 0x07
    dev.write(regs.IC_ENABLE, 1, ctx)
    assert dev.is_enabled()
    dev.write(regs.IC_FS_SPKLEN, 5, ctx)
    assert dev.read(regs.IC_FS_SPKLEN, ctx) == 5


def test_slave_nack_needs_enable(ctx):
    dev = I2c()
    dev.write(regs.IC_SLV_DATA_NACK_ONLY, 1, ctx)
    assert dev.generate_nack is False
    dev.write(regs.IC_ENABLE, 1, ctx)
    dev.write(regs.IC_SLV_DATA_NACK_ONLY, 1, ctx)
    assert dev.generate_nack is True


def test_dma_control(ctx):
    dev = I2c()
    dev.write(regs.IC_DMA_CR, 0b11, ctx)
    assert dev.receive_dma_enabled()
    assert dev.transmit_dma_enabled()
    dev.write(regs.IC_DMA_CR, 0b01, ctx)
    assert dev.receive_dma_enabled()
    assert not dev.transmit_dma_enabled()


def test_dma_levels_round_trip(ctx):
    dev = I2c()
    dev.write(regs.IC_DMA_TDLR, 3, ctx)
    dev.write(regs.IC_DMA_RDLR, 7, ctx)
    assert dev.read(regs.IC_DMA_TDLR, ctx) == 3
    assert dev.read(regs.IC_DMA_RDLR, ctx) == 7


def test_ack_general_call(ctx):
    dev = I2c()
    assert dev.read(regs.IC_ACK_GENERAL_CALL, ctx) == 1
    dev.write(regs.IC_ACK_GENERAL_CALL, 0, ctx)
    assert dev.read(regs.IC_ACK_GENERAL_CALL, ctx) == 0


def test_interrupt_masking_and_line(ctx):
    dev = I2c(1)
    lines = InterruptLines()
    dev.interrupt_raw = 0b101
    dev.write(regs.IC_INTR_MASK, 0b100, ctx)
    assert dev.read(regs.IC_INTR_STAT, ctx) == 0b100
    assert dev.read(regs.IC_RAW_INTR_STAT, ctx) == 0b101
    dev.update_interrupt(lines)
    assert lines.is_pending(Irq.I2C1_IRQ)
    assert not lines.is_pending(Irq.I2C0_IRQ)
    dev.write(regs.IC_INTR_MASK, 0, ctx)
    dev.update_interrupt(lines)
    assert lines.pending() == []


def test_update_status_tracks_fifos():
    dev = I2c()
    dev.update_status()
    assert extract_bit(dev.ic_status, 1) == 0
    assert extract_bit(dev.ic_status, 3) == 0
    dev.rx_fifo.push(1)
    for value in range(regs.FIFO_DEPTH):
        dev.tx_fifo.push(value)
    dev.update_status()
    assert extract_bit(dev.ic_status, 3) == 1
    assert extract_bit(dev.ic_status, 4) == 0
    assert extract_bit(dev.ic_status, 2) == 1
    assert extract_bit(dev.ic_status, 1) == 1


def test_activity_flags_default():
    dev = I2c()
    assert not dev.is_slave_active()
    assert not dev.is_master_active()
    assert not dev.is_enabled()


def test_invalid_index():
    with pytest.raises(ValueError):
        I2c(2)