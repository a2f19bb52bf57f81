"""True random number generator that produces entropy on demand."""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from .peripheral import AccessContext, OutOfBoundsError, Peripheral

RNG_IMR = 0x0100
RNG_ISR = 0x0104
RNG_ICR = 0x0108
TRNG_CONFIG = 0x010C
TRNG_VALID = 0x0110
EHR_DATA0 = 0x0114
EHR_DATA1 = 0x0118
EHR_DATA2 = 0x011C
EHR_DATA3 = 0x0120
EHR_DATA4 = 0x0124
EHR_DATA5 = 0x0128
RND_SOURCE_ENABLE = 0x012C
SAMPLE_CNT1 = 0x0130
AUTOCORR_STATISTIC = 0x0134
TRNG_DEBUG_CONTROL = 0x0138
TRNG_SW_RESET = 0x0140
RNG_DEBUG_EN_INPUT = 0x01B4
TRNG_BUSY = 0x01B8
RST_BITS_COUNTER = 0x01BC
RNG_VERSION = 0x01C0
RNG_BIST_CNTR_0 = 0x01E0
RNG_BIST_CNTR_1 = 0x01E4
RNG_BIST_CNTR_2 = 0x01E8

# Interrupt bits
VN_ERR = 1 << 3
CRNGT_ERR = 1 << 2
AUTOCORR_ERR = 1 << 1
EHR_VALID = 1 << 0

_READ_ONLY = frozenset(
    {
        TRNG_VALID, RNG_ISR, TRNG_BUSY, RNG_VERSION,
        RNG_BIST_CNTR_0, RNG_BIST_CNTR_1, RNG_BIST_CNTR_2,
    }
)
_BIST_REGISTERS = (RNG_BIST_CNTR_0, RNG_BIST_CNTR_1, RNG_BIST_CNTR_2)


def _is_ehr_data(address: int) -> bool:
    return EHR_DATA0 <= address <= EHR_DATA5


@dataclass(frozen=True)
class TrngGenerated:
    """Inspection event: the generator produced a random word."""

    value: int


class Trng(Peripheral):
    """Random number generator registers; every data read yields fresh entropy."""

    def __init__(self) -> None:
        self.interrupt_mask = 0b1111
        # Entropy is available immediately, so EHR_VALID starts set.
        self.interrupt_status = EHR_VALID
        self.config = 0
        self.source_enable = False
        self.sample_cnt1 = 0xFFFF
        self.is_valid = False
        self.is_busy = False
        self.autocorr_fails = 0
        self.autocorr_trys = 0
        self.debug_control = 0
        self.debug_enable = False
        self.bist_cntr = [0, 0, 0]

    def read(self, address: int, ctx: AccessContext) -> int:
        if _is_ehr_data(address):
            value = secrets.randbits(32)
            ctx.emit(TrngGenerated(value))
            return value
        if address in _BIST_REGISTERS:
            return self.bist_cntr[_BIST_REGISTERS.index(address)]
        registers = {
            RNG_IMR: self.interrupt_mask,
            RNG_ISR: self.interrupt_status,
            RNG_ICR: 0,
            TRNG_CONFIG: self.config,
            TRNG_VALID: int(self.is_valid),
            RND_SOURCE_ENABLE: int(self.source_enable),
            SAMPLE_CNT1: self.sample_cnt1,
            AUTOCORR_STATISTIC: (self.autocorr_trys | (self.autocorr_fails << 14)) & 0xFFFF_FFFF,
            TRNG_DEBUG_CONTROL: self.debug_control,
            TRNG_SW_RESET: 0,
            RNG_DEBUG_EN_INPUT: int(self.debug_enable),
            TRNG_BUSY: int(self.is_busy),
            RST_BITS_COUNTER: 0,
            RNG_VERSION: 0,
        }
        try:
            return registers[address]
        except KeyError:
            raise OutOfBoundsError(address) from None

    def write(self, address: int, value: int, ctx: AccessContext) -> None:
        value &= 0xFFFF_FFFF
        if address == RNG_IMR:
            self.interrupt_mask = value & 0xFF
        elif address == RNG_ICR:
            # AUTOCORR_ERR can only be cleared by a reset.
            self.interrupt_status &= ~(value & (VN_ERR | CRNGT_ERR | EHR_VALID)) & 0xFF
        elif address == TRNG_CONFIG:
            self.config = value & 0xFF
        elif address == RND_SOURCE_ENABLE:
            self.source_enable = bool(value & 1)
        elif address == SAMPLE_CNT1:
            self.sample_cnt1 = value
        elif address == AUTOCORR_STATISTIC:
            self.autocorr_fails = (value >> 14) & 0xFFFF
            self.autocorr_trys = value & 0xFFFF
        elif address == TRNG_DEBUG_CONTROL:
            self.debug_control = value & 0xFF
        elif address == RNG_DEBUG_EN_INPUT:
            self.debug_enable = bool(value & 1)
        elif address in (TRNG_SW_RESET, RST_BITS_COUNTER):
            pass  # entropy is generated on the fly, nothing to reset
        elif address in _READ_ONLY or _is_ehr_data(address):
            pass
        else:
            raise OutOfBoundsError(address)