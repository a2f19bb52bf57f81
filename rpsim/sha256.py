"""SHA-256 accelerator fed one 32-bit word at a time."""

from __future__ import annotations

import hashlib

from .peripheral import AccessContext, OutOfBoundsError, Peripheral

CSR = 0x0000
WDATA = 0x0004
SUM0 = 0x0008
SUM7 = 0x0024

CSR_START = 1 << 0
CSR_WDATA_RDY = 1 << 1
CSR_SUM_VLD = 1 << 2
CSR_ERR_WDATA_NOT_RDY = 1 << 4
CSR_BSWAP = 1 << 12

BLOCK_BYTES = 64
COMPUTE_TICKS = 57
EVENT = "sha256"


def _is_sum(address: int) -> bool:
    return SUM0 <= address <= SUM7 and address % 4 == 0


class Sha256(Peripheral):
    """SHA-256 block: a 64-byte block yields its digest after 57 cycles."""

    def __init__(self) -> None:
        self.bswap = True
        self.dma_size = 2
        self.err_wdata_not_rdy = False
        self.sum_vld = True
        self.wdata_rdy = True
        self.sum = bytes(32)
        self.written_count = 0
        self._core = hashlib.sha256()

    def read(self, address: int, ctx: AccessContext) -> int:
        if address == CSR:
            return (
                (int(self.wdata_rdy) << 1)
                | (int(self.sum_vld) << 2)
                | (int(self.err_wdata_not_rdy) << 4)
                | (self.dma_size << 8)
                | (int(self.bswap) << 16)
            )
        if address == WDATA:
            return 0
        if _is_sum(address):
            if not self.sum_vld:
                return 0
            index = (address - SUM0) // 4
            return int.from_bytes(self.sum[index * 4 : index * 4 + 4], "little")
        raise OutOfBoundsError(address)

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        value &= 0xFFFF_FFFF
        if address == CSR:
            if value & CSR_START:
                self.wdata_rdy = True
                self.sum_vld = True
            if value & CSR_ERR_WDATA_NOT_RDY:
                self.err_wdata_not_rdy = False
            self.dma_size = (value >> 8) & 0b11
            self.bswap = bool(value & CSR_BSWAP)
        elif address == WDATA:
            self._feed(value, ctx)
        elif _is_sum(address):
            pass  # read-only
        else:
            raise OutOfBoundsError(address)

    def _feed(self, value: int, ctx: AccessContext) -> None:
        if not self.wdata_rdy:
            self.err_wdata_not_rdy = True
            return

        data = value.to_bytes(4, "big" if self.bswap else "little")
        self._core.update(data)
        self.written_count += len(data)
        self.sum_vld = False
        if self.written_count < BLOCK_BYTES:
            return

        self.wdata_rdy = False
        ctx.clock.schedule(COMPUTE_TICKS, EVENT, self._finish)

    def _finish(self) -> None:
        self.sum = self._core.digest()
        self._core = hashlib.sha256()
        self.sum_vld = True
        self.written_count = 0
        self.wdata_rdy = True