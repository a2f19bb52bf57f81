"""The two-lane interpolators of the single-cycle I/O block."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

_M32 = 0xFFFF_FFFF


def _to_i32(value: int) -> int:
    value &= _M32
    return value - (1 << 32) if value & 0x8000_0000 else value


def _saturate_i32(value: int) -> int:
    return max(-(1 << 31), min((1 << 31) - 1, value))


@dataclass
class InterpolatorConfig:
    """The fields of one lane's control register."""

    shift: int = 0
    mask_lsb: int = 0
    mask_msb: int = 0
    signed: bool = False
    cross_input: bool = False
    cross_result: bool = False
    add_raw: bool = False
    force_msb: int = 0
    blend: bool = False
    clamp: bool = False
    over_f0: bool = False
    over_f1: bool = False
    over_f: bool = False

    @classmethod
    def from_word(cls, value: int) -> "InterpolatorConfig":
        return cls(
            shift=value & 0b11111,
            mask_lsb=(value >> 5) & 0b11111,
            mask_msb=(value >> 10) & 0b11111,
            signed=bool((value >> 15) & 1),
            cross_input=bool((value >> 16) & 1),
            cross_result=bool((value >> 17) & 1),
            add_raw=bool((value >> 18) & 1),
            force_msb=(value >> 19) & 0b11,
            blend=bool((value >> 21) & 1),
            clamp=bool((value >> 22) & 1),
            over_f0=bool((value >> 23) & 1),
            over_f1=bool((value >> 24) & 1),
            over_f=bool((value >> 25) & 1),
        )

    def to_word(self) -> int:
        return (
            (self.shift & 0b11111)
            | ((self.mask_lsb & 0b11111) << 5)
            | ((self.mask_msb & 0b11111) << 10)
            | (int(self.signed) << 15)
            | (int(self.cross_input) << 16)
            | (int(self.cross_result) << 17)
            | (int(self.add_raw) << 18)
            | ((self.force_msb & 0b11) << 19)
            | (int(self.blend) << 21)
            | (int(self.clamp) << 22)
            | (int(self.over_f0) << 23)
            | (int(self.over_f1) << 24)
            | (int(self.over_f) << 25)
        )


def _msb_mask(mask_msb: int) -> int:
    return _M32 if mask_msb == 31 else (1 << (mask_msb + 1)) - 1


class Interpolator:
    """Interpolator 0 (which can blend) or 1 (which can clamp)."""

    def __init__(self, index: int = 0) -> None:
        if index not in (0, 1):
            raise ValueError(f"no interpolator with index {index}")
        self.index = index
        self.accum: List[int] = [0, 0]
        self.base: List[int] = [0, 0, 0]
        self.ctrl: List[int] = [0, 0]
        self.result: List[int] = [0, 0, 0]
        self.sm_result: List[int] = [0, 0]

    def update(self) -> None:
        """Recompute the lane results and overflow flags from the current state."""
        ctrl0 = InterpolatorConfig.from_word(self.ctrl[0])
        ctrl1 = InterpolatorConfig.from_word(self.ctrl[1])

        do_clamp = ctrl0.clamp and self.index == 1
        do_blend = ctrl0.blend and self.index == 0

        ctrl0.clamp = do_clamp
        ctrl0.blend = do_blend
        ctrl1.clamp = False
        ctrl1.blend = False
        ctrl1.over_f0 = False
        ctrl1.over_f1 = False
        ctrl1.over_f = False

        input0 = (self.accum[1] if ctrl0.cross_input else self.accum[0]) & _M32
        input1 = (self.accum[0] if ctrl1.cross_input else self.accum[1]) & _M32

        msbmask0 = _msb_mask(ctrl0.mask_msb)
        msbmask1 = _msb_mask(ctrl1.mask_msb)
        mask0 = msbmask0 & ~((1 << ctrl0.mask_lsb) - 1) & _M32
        mask1 = msbmask1 & ~((1 << ctrl1.mask_lsb) - 1) & _M32

        shifted0 = input0 >> ctrl0.shift
        shifted1 = input1 >> ctrl1.shift
        uresult0 = shifted0 & mask0
        uresult1 = shifted1 & mask1

        overf0 = (shifted0 & ~msbmask0 & _M32) != 0
        overf1 = (shifted1 & ~msbmask1 & _M32) != 0

        sextmask0 = (_M32 << ctrl0.mask_msb) & _M32 if uresult0 & (1 << ctrl0.mask_msb) else 0
        sextmask1 = (_M32 << ctrl1.mask_msb) & _M32 if uresult1 & (1 << ctrl1.mask_msb) else 0

        result0 = uresult0 | sextmask0 if ctrl0.signed else uresult0
        result1 = uresult1 | sextmask1 if ctrl1.signed else uresult1

        base0, base1, base2 = (b & _M32 for b in self.base)

        addresult0 = (base0 + (input0 if ctrl0.add_raw else result0)) & _M32
        addresult1 = (base1 + (input1 if ctrl1.add_raw else result1)) & _M32
        addresult2 = (base2 + result0 + (0 if do_blend else result1)) & _M32

        if ctrl0.signed:
            if _to_i32(result0) < _to_i32(base0):
                clamp0 = base0
            elif _to_i32(result0) > _to_i32(base1):
                clamp0 = base1
            else:
                clamp0 = result0
        else:
            clamp0 = base0 if result0 < base0 else (base1 if result0 > base1 else result0)

        alpha1 = result1 & 0xFF
        if ctrl1.signed:
            diff = _to_i32(_to_i32(base1) - _to_i32(base0))
            step = _saturate_i32((alpha1 * diff) // 256)
            blend1 = (_to_i32(base0) + step) & _M32
        else:
            step = _saturate_i32((alpha1 * ((base1 - base0) & _M32)) // 256)
            blend1 = (base0 + step) & _M32

        self.sm_result = [result0, result1]

        force = ctrl0.force_msb << 28
        if do_blend:
            self.result[0] = alpha1
        else:
            self.result[0] = ((clamp0 if do_clamp else addresult0) | force) & _M32
        self.result[1] = ((blend1 if do_blend else addresult1) | force) & _M32
        self.result[2] = addresult2

        ctrl0.over_f0 = overf0
        ctrl0.over_f1 = overf1
        ctrl0.over_f = overf0 or overf1
        self.ctrl[0] = ctrl0.to_word()
        self.ctrl[1] = ctrl1.to_word()

    def writeback(self) -> None:
        """Write the lane results back into the accumulators (a POP)."""
        ctrl0 = InterpolatorConfig.from_word(self.ctrl[0])
        ctrl1 = InterpolatorConfig.from_word(self.ctrl[1])
        self.accum[0] = self.result[1] if ctrl0.cross_result else self.result[0]
        self.accum[1] = self.result[0] if ctrl1.cross_result else self.result[1]
        self.update()

    def set_base01(self, value: int) -> None:
        """Load BASE0 from the low half and BASE1 from the high half at once."""
        ctrl0 = InterpolatorConfig.from_word(self.ctrl[0])
        ctrl1 = InterpolatorConfig.from_word(self.ctrl[1])
        do_blend = ctrl0.blend and self.index == 0

        input0 = value & 0xFFFF
        input1 = (value >> 16) & 0xFFFF
        sext0 = -(1 << 15) if input0 & (1 << 15) else 0
        sext1 = -(1 << 15) if input1 & (1 << 15) else 0

        signed0 = ctrl1.signed if do_blend else ctrl0.signed
        base0 = input0 | sext0 if signed0 else input0
        base1 = input1 | sext1 if ctrl1.signed else input1

        self.base[0] = base0 & _M32
        self.base[1] = base1 & _M32
        self.update()