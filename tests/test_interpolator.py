import pytest

from rpsim.interpolator import Interpolator, InterpolatorConfig

MASK_MSB_31 = 31 << 10
SIGNED = 1 << 15
CROSS_RESULT = 1 << 17
BLEND = 1 << 21
CLAMP = 1 << 22


@pytest.mark.parametrize(
    "word",
    [0, 0x1F, 31 << 10, SIGNED | BLEND | CLAMP, (1 << 26) - 1, (2 << 19) | (7 << 5) | 3],
)
def test_config_round_trip(word):
    assert InterpolatorConfig.from_word(word).to_word() == word


def test_config_fields():
    config = InterpolatorConfig.from_word(MASK_MSB_31 | SIGNED | (3 << 19))
    assert config.mask_msb == 31
    assert config.signed is True
    assert config.force_msb == 3
    assert config.clamp is False


def test_invalid_index():
    with pytest.raises(ValueError):
        Interpolator(2)


def test_zero_state_stays_zero():
    interp = Interpolator()
    interp.update()
    assert interp.result == [0, 0, 0]
    assert interp.sm_result == [0, 0]
    assert interp.ctrl == [0, 0]


def test_lane_adds_base():
    interp = Interpolator()
    interp.ctrl = [MASK_MSB_31, MASK_MSB_31]
    interp.accum = [5, 7]
    interp.base = [10, 20, 0]
    interp.update()
    assert interp.sm_result == [5, 7]
    assert interp.result[0] == interp.base[0] + interp.accum[0]
    assert interp.result[1] == interp.base[1] + interp.accum[1]
    assert interp.result[2] == interp.accum[0] + interp.accum[1]


def test_writeback_moves_results_to_accumulators():
    interp = Interpolator()
    interp.ctrl = [MASK_MSB_31, MASK_MSB_31]
    interp.accum = [1, 2]
    interp.base = [3, 4, 0]
    interp.update()
    before = list(interp.result)
    interp.writeback()
    assert interp.accum == before[:2]


def test_cross_result_swaps_lane():
    interp = Interpolator()
    interp.ctrl = [MASK_MSB_31 | CROSS_RESULT, MASK_MSB_31]
    interp.accum = [1, 2]
    interp.base = [100, 200, 0]
    interp.update()
    before = list(interp.result)
    interp.writeback()
    assert interp.accum == [before[1], before[1]]


def test_overflow_flags():
    interp = Interpolator()
    interp.ctrl = [3 << 10, MASK_MSB_31]
    interp.accum = [0x10, 0]
    interp.update()
    config = InterpolatorConfig.from_word(interp.ctrl[0])
    assert config.over_f0 is True
    assert config.over_f is True
    assert config.over_f1 is False


def test_clamp_only_on_interpolator_one():
    results = []
    for index in (0, 1):
        interp = Interpolator(index)
        interp.ctrl = [MASK_MSB_31 | CLAMP, MASK_MSB_31]
        interp.accum = [50, 0]
        interp.base = [10, 20, 0]
        interp.update()
        results.append(interp.result[0])
        assert InterpolatorConfig.from_word(interp.ctrl[0]).clamp is (index == 1)
    assert results[1] == 20
    assert results[0] > 20


def test_blend_only_on_interpolator_zero():
    interp = Interpolator(0)
    interp.ctrl = [BLEND | MASK_MSB_31, MASK_MSB_31]
    interp.accum = [0, 128]
    interp.base = [0, 256, 0]
    interp.update()
    assert interp.result[0] == 128
    assert interp.result[1] == interp.result[0]

    other = Interpolator(1)
    other.ctrl = [BLEND | MASK_MSB_31, MASK_MSB_31]
    other.accum = [0, 128]
    other.base = [0, 256, 0]
    other.update()
    assert other.result[1] == other.base[1] + other.accum[1]


def test_force_msb():
    interp = Interpolator()
    interp.ctrl = [MASK_MSB_31 | (1 << 19), MASK_MSB_31]
    interp.accum = [2, 0]
    interp.update()
    assert interp.result[0] >> 28 == 1
    assert interp.result[0] & 0x0FFF_FFFF == interp.accum[0]


def test_set_base01_unsigned():
    interp = Interpolator()
    interp.set_base01(0x0003_0002)
    assert interp.base[:2] == [2, 3]


def test_set_base01_signed_extends():
    interp = Interpolator()
    interp.ctrl = [SIGNED, SIGNED]
    interp.set_base01(0xFFFF_8000)
    assert interp.base[0] == 0xFFFF_8000
    assert interp.base[1] == 0xFFFF_FFFF