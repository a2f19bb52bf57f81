"""I2C controller register block."""

from __future__ import annotations

from .peripheral import (
    AccessContext,
    Fifo,
    InterruptLines,
    Irq,
    OutOfBoundsError,
    Peripheral,
    extract_bit,
)

IC_CON = 0x00
IC_TAR = 0x04
IC_SAR = 0x08
IC_DATA_CMD = 0x10
IC_SS_SCL_HCNT = 0x14
IC_SS_SCL_LCNT = 0x18
IC_FS_SCL_HCNT = 0x1C
IC_FS_SCL_LCNT = 0x20
IC_INTR_STAT = 0x2C
IC_INTR_MASK = 0x30
IC_RAW_INTR_STAT = 0x34
IC_RX_TL = 0x38
IC_TX_TL = 0x3C
IC_CLR_INTR = 0x40
IC_CLR_RX_UNDER = 0x44
IC_CLR_RX_OVER = 0x48
IC_CLR_TX_OVER = 0x4C
IC_CLR_RD_REQ = 0x50
IC_CLR_TX_ABRT = 0x54
IC_CLR_RX_DONE = 0x58
IC_CLR_ACTIVITY = 0x5C
IC_CLR_STOP_DET = 0x60
IC_CLR_START_DET = 0x64
IC_CLR_GEN_CALL = 0x68
IC_ENABLE = 0x6C
IC_STATUS = 0x70
IC_TXFLR = 0x74
IC_RXFLR = 0x78
IC_SDA_HOLD = 0x7C
IC_TX_ABRT_SOURCE = 0x80
IC_SLV_DATA_NACK_ONLY = 0x84
IC_DMA_CR = 0x88
IC_DMA_TDLR = 0x8C
IC_DMA_RDLR = 0x90
IC_SDA_SETUP = 0x94
IC_ACK_GENERAL_CALL = 0x98
IC_ENABLE_STATUS = 0x9C
IC_FS_SPKLEN = 0xA0
IC_CLR_RESTART_DET = 0xA8
IC_COMP_PARAM_1 = 0xF4
IC_COMP_VERSION = 0xF8
IC_COMP_TYPE = 0xFC

COMP_VERSION = 0x3230312A
COMP_TYPE = 0x44570140

FIFO_DEPTH = 16

# Registers that are not modelled yet and read back their own offset.
_ECHO_REGISTERS = frozenset(
    {
        IC_CON, IC_TAR, IC_SAR, IC_DATA_CMD, IC_RX_TL, IC_TX_TL, IC_CLR_INTR,
        IC_CLR_RX_UNDER, IC_CLR_RX_OVER, IC_CLR_TX_OVER, IC_CLR_RD_REQ,
        IC_CLR_TX_ABRT, IC_CLR_RX_DONE, IC_CLR_ACTIVITY, IC_CLR_STOP_DET,
        IC_CLR_START_DET, IC_CLR_GEN_CALL, IC_ENABLE, IC_STATUS, IC_TXFLR,
        IC_RXFLR, IC_SDA_HOLD, IC_TX_ABRT_SOURCE, IC_SLV_DATA_NACK_ONLY,
        IC_DMA_CR, IC_SDA_SETUP, IC_ENABLE_STATUS, IC_CLR_RESTART_DET,
    }
)

# Registers whose writes are accepted but have no effect yet.
_IGNORED_WRITES = frozenset(
    {IC_CON, IC_TAR, IC_SAR, IC_DATA_CMD, IC_RX_TL, IC_TX_TL, IC_SDA_HOLD, IC_SDA_SETUP}
)

_READ_ONLY = frozenset(
    {
        IC_INTR_STAT, IC_RAW_INTR_STAT, IC_CLR_INTR, IC_CLR_RX_UNDER, IC_CLR_RX_OVER,
        IC_CLR_TX_OVER, IC_CLR_RD_REQ, IC_CLR_TX_ABRT, IC_CLR_RX_DONE,
        IC_CLR_ACTIVITY, IC_CLR_STOP_DET, IC_CLR_START_DET, IC_CLR_GEN_CALL,
        IC_STATUS, IC_TXFLR, IC_RXFLR, IC_TX_ABRT_SOURCE, IC_ENABLE_STATUS,
        IC_CLR_RESTART_DET, IC_COMP_PARAM_1, IC_COMP_VERSION, IC_COMP_TYPE,
    }
)

_IRQS = (Irq.I2C0_IRQ, Irq.I2C1_IRQ)


def _with_bit(value: int, bit: int, state: bool) -> int:
    return value | (1 << bit) if state else value & ~(1 << bit)


class I2c(Peripheral):
    """One of the two I2C controllers, selected by index."""

    def __init__(self, index: int = 0) -> None:
        if index not in (0, 1):
            raise ValueError(f"no I2C controller with index {index}")
        self.index = index
        self.ctrl = (1 << 6) | (1 << 5) | (0x2 << 1) | (1 << 0)
        self.ic_enable = 0
        self.ic_status = 0b110
        self.target_address = 0x055
        self.slave_address = 0x055
        self.fsclk_hcnt = 0x0006
        self.fsclk_lcnt = 0x000D
        self.ssclk_hcnt = 0x0028
        self.ssclk_lcnt = 0x002F
        self.sda_setup = 0x64
        self.ack_general_call = True
        self.ic_fs_spklen = 0x07
        self.receive_data_level = 0
        self.transmit_data_level = 0
        self.dma_ctrl = 0
        self.generate_nack = False
        self.tx_fifo = Fifo(FIFO_DEPTH)
        self.rx_fifo = Fifo(FIFO_DEPTH)
        self.interrupt_raw = 0
        self.interrupt_mask = 0

    def is_enabled(self) -> bool:
        return extract_bit(self.ic_enable, 0) == 1

    def is_slave_active(self) -> bool:
        return extract_bit(self.ic_status, 6) == 1

    def is_master_active(self) -> bool:
        return extract_bit(self.ic_status, 5) == 1

    def receive_dma_enabled(self) -> bool:
        return extract_bit(self.dma_ctrl, 0) == 1

    def transmit_dma_enabled(self) -> bool:
        return extract_bit(self.dma_ctrl, 1) == 1

    def interrupt(self) -> int:
        """Raw interrupts after masking."""
        return self.interrupt_raw & self.interrupt_mask

    def update_status(self) -> None:
        """Refresh the FIFO flags of the status register."""
        status = self.ic_status
        status = _with_bit(status, 4, self.rx_fifo.is_full())
        status = _with_bit(status, 3, not self.rx_fifo.is_empty())
        status = _with_bit(status, 2, self.tx_fifo.is_full())
        status = _with_bit(status, 1, not self.tx_fifo.is_empty())
        self.ic_status = status & 0xFF

    def update_interrupt(self, interrupts: InterruptLines) -> None:
        interrupts.set_irq(_IRQS[self.index], self.interrupt() != 0)

    def read(self, address: int, ctx: AccessContext) -> int:
        if address in _ECHO_REGISTERS:
            return address
        registers = {
            IC_SS_SCL_HCNT: self.ssclk_hcnt,
            IC_SS_SCL_LCNT: self.ssclk_lcnt,
            IC_FS_SCL_HCNT: self.fsclk_hcnt,
            IC_FS_SCL_LCNT: self.fsclk_lcnt,
            IC_INTR_STAT: self.interrupt(),
            IC_INTR_MASK: self.interrupt_mask,
            IC_RAW_INTR_STAT: self.interrupt_raw,
            IC_DMA_TDLR: self.transmit_data_level,
            IC_DMA_RDLR: self.receive_data_level,
            IC_ACK_GENERAL_CALL: int(self.ack_general_call),
            IC_FS_SPKLEN: self.ic_fs_spklen,
            IC_COMP_PARAM_1: 0,
            IC_COMP_VERSION: COMP_VERSION,
            IC_COMP_TYPE: COMP_TYPE,
        }
        try:
            return registers[address]
        except KeyError:
            raise OutOfBoundsError(address) from None

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        value &= 0xFFFF_FFFF
        if address in _IGNORED_WRITES or address in _READ_ONLY:
            return
        if address == IC_SS_SCL_HCNT:
            self.ssclk_hcnt = value & 0xFFFF
        elif address == IC_SS_SCL_LCNT:
            self.ssclk_lcnt = value & 0xFFFF
        elif address == IC_FS_SCL_HCNT:
            self.fsclk_hcnt = value & 0xFFFF
        elif address == IC_FS_SCL_LCNT:
            self.fsclk_lcnt = value & 0xFFFF
        elif address == IC_INTR_MASK:
            self.interrupt_mask = value
        elif address == IC_ENABLE:
            self.ic_enable = value & 0b111
        elif address == IC_SLV_DATA_NACK_ONLY:
            if self.is_enabled() and not self.is_slave_active():
                self.generate_nack = (value & 1) == 1
        elif address == IC_DMA_CR:
            self.dma_ctrl = value & 0b11
        elif address == IC_DMA_TDLR:
            self.transmit_data_level = value & 0xFF
        elif address == IC_DMA_RDLR:
            self.receive_data_level = value & 0xFF
        elif address == IC_ACK_GENERAL_CALL:
            self.ack_general_call = (value & 1) == 1
        elif address == IC_FS_SPKLEN:
            if self.is_enabled():
                self.ic_fs_spklen = value & 0xFF
        else:
            raise OutOfBoundsError(address)