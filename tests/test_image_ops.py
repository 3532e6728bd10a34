import numpy as np
import pytest

from uw_color_correct import image_ops
from uw_color_correct.image_ops import (
    BufferShapeError,
    apply_adjustments,
    apply_contrast,
    apply_params,
    apply_zone_tone,
    contrast_factor,
    curve_lut,
    luminance,
    tone_zones,
)
from uw_color_correct.params import DEFAULT_PARAMS, AdjustmentParams


def _pixel(r, g, b, a=255):
    return np.array([[[r, g, b, a]]], dtype=np.uint8)


def _random_rgba(h=16, w=12, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8)


def test_default_params_are_identity():
    img = _random_rgba()
    res = apply_adjustments(img, DEFAULT_PARAMS)
    assert res is not img
    assert np.array_equal(res, img)


def test_source_is_not_mutated():
    img = _random_rgba()
    before = img.copy()
    apply_adjustments(img, AdjustmentParams(temperature=40, contrast=-30, shadows=50))
    assert np.array_equal(img, before)


def test_alpha_passes_through():
    img = _random_rgba(seed=3)
    params = AdjustmentParams(temperature=80, saturation=-60, highlights=40, selective_blue=-50)
    res = apply_adjustments(img, params)
    assert np.array_equal(res[..., 3], img[..., 3])


def test_temperature_warms_red_and_cools_blue():
    res = apply_adjustments(_pixel(100, 100, 100), AdjustmentParams(temperature=50))
    # 50/100 * 30 = 15 levels
    assert res[0, 0, :3].tolist() == [115, 100, 85]


def test_tint_only_moves_green():
    res = apply_adjustments(_pixel(100, 100, 100), AdjustmentParams(tint=-100))
    assert res[0, 0, :3].tolist() == [100, 70, 100]


def test_full_desaturation_collapses_to_luminance():
    rgb = np.array([[[200.0, 50.0, 50.0]]])
    lum = luminance(rgb)[0, 0]
    assert lum == pytest.approx(94.85)

    res = apply_adjustments(_pixel(200, 50, 50), AdjustmentParams(saturation=-100))
    assert res[0, 0, :3].tolist() == [95, 95, 95]


def test_contrast_pivots_on_mid_grey():
    res = apply_adjustments(_pixel(128, 128, 128), AdjustmentParams(contrast=100))
    assert res[0, 0, :3].tolist() == [128, 128, 128]

    rgb = np.array([[[128.0, 128.0, 128.0]]])
    assert np.array_equal(apply_contrast(rgb, -100), rgb)


def test_contrast_factor_is_one_at_zero():
    assert contrast_factor(0) == pytest.approx(1.0)
    assert contrast_factor(100) > 1.0
    assert contrast_factor(-100) < 1.0


@pytest.mark.parametrize(
    "field",
    [
        "temperature",
        "tint",
        "contrast",
        "saturation",
        "highlights",
        "midtones",
        "shadows",
        "whites",
        "blacks",
    ],
)
@pytest.mark.parametrize("value", [-100, 100])
def test_every_control_stays_in_range(field, value):
    rng = np.random.default_rng(7)
    rgb = rng.uniform(0.0, 255.0, size=(32, 32, 3))
    rgb[0, 0] = 0.0
    rgb[0, 1] = 255.0
    out = apply_params(rgb, AdjustmentParams(**{field: value}))
    assert out.min() >= 0.0
    assert out.max() <= 255.0


def test_extreme_temperature_clamps_channels():
    res = apply_adjustments(_pixel(250, 128, 10), AdjustmentParams(temperature=100))
    assert res[0, 0, :3].tolist() == [255, 128, 0]


def test_tone_zone_boundaries():
    shadows, midtones, highlights = tone_zones(np.array([0.7, 0.2999, 0.3]))
    assert highlights.tolist() == [True, False, False]
    assert shadows.tolist() == [False, True, False]
    assert midtones.tolist() == [False, False, True]


def test_tone_zones_are_exclusive():
    norm = np.linspace(0.0, 1.0, 101)
    shadows, midtones, highlights = tone_zones(norm)
    total = shadows.astype(int) + midtones.astype(int) + highlights.astype(int)
    assert np.all(total == 1)


def test_zone_tone_scales_only_its_zone():
    rgb = np.array([[[200.0, 200.0, 200.0], [128.0, 128.0, 128.0], [50.0, 50.0, 50.0]]])
    out = apply_zone_tone(rgb, highlights=-50, midtones=0, shadows=100)
    # 200 is a highlight, 128 a midtone, 50 a shadow
    assert np.allclose(out[0, 0], 100.0)
    assert np.allclose(out[0, 1], 128.0)
    assert np.allclose(out[0, 2], 100.0)


def test_zone_tone_boundaries(monkeypatch):
    # 178.5 / 255 == 0.7 and 76.5 / 255 == 0.3 exactly; 76.0 sits just below.
    monkeypatch.setattr(image_ops, "luminance", lambda rgb: np.array([[178.5, 76.5, 76.0]]))
    rgb = np.full((1, 3, 3), 100.0)
    out = apply_zone_tone(rgb, highlights=20, midtones=-20, shadows=50)
    assert np.allclose(out[0, 0], 120.0)
    assert np.allclose(out[0, 1], 80.0)
    assert np.allclose(out[0, 2], 150.0)


def test_blacks_lift_dark_pixels_and_leave_midtones():
    img = np.concatenate([_pixel(0, 0, 0), _pixel(128, 128, 128)], axis=1)
    res = apply_adjustments(img, AdjustmentParams(blacks=50))
    # 0.5 * 0.30 * 255 = 38.25
    assert res[0, 0, :3].tolist() == [38, 38, 38]
    assert res[0, 1, :3].tolist() == [128, 128, 128]


def test_whites_pull_down_bright_pixels():
    res = apply_adjustments(_pixel(255, 255, 255), AdjustmentParams(whites=-100))
    assert res[0, 0, 0] < 255
    assert res[0, 0, 0] == res[0, 0, 1] == res[0, 0, 2]


def test_identity_curve_lut():
    assert np.allclose(curve_lut((0, 25, 50, 75, 100)), np.arange(256))


def test_rgb_curve_lifts_quarter_tones():
    params = AdjustmentParams(rgb_curve=(0, 50, 50, 75, 100))
    res = apply_adjustments(_pixel(51, 0, 255), params)
    # 51 sits at 0.8 of the first segment: 0.8 * 127.5 = 102
    assert res[0, 0, :3].tolist() == [102, 0, 255]


def test_channel_curve_touches_only_its_channel():
    params = AdjustmentParams(red_curve=(0, 25, 50, 75, 60))
    res = apply_adjustments(_pixel(255, 255, 255), params)
    assert res[0, 0, :3].tolist() == [153, 255, 255]


def test_selective_color_ignores_neutral_pixels():
    img = _pixel(120, 120, 120)
    params = AdjustmentParams(selective_blue=-100, saturation_red=100)
    assert np.array_equal(apply_adjustments(img, params), img)


def test_selective_blue_pulls_blue_toward_complement():
    res = apply_adjustments(_pixel(0, 0, 255), AdjustmentParams(selective_blue=-100))
    r, g, b = res[0, 0, :3].tolist()
    assert r > 100 and g > 100
    assert b < 200


def test_selective_blue_leaves_red_pixels_alone():
    img = _pixel(220, 30, 20)
    assert np.array_equal(apply_adjustments(img, AdjustmentParams(selective_blue=-100)), img)


def test_band_saturation_desaturates_reds():
    res = apply_adjustments(_pixel(200, 50, 50), AdjustmentParams(saturation_red=-100))
    assert res[0, 0, :3].tolist() == [95, 95, 95]


def test_writes_into_provided_buffer():
    img = _random_rgba()
    out = np.zeros_like(img)
    res = apply_adjustments(img, AdjustmentParams(contrast=20), out=out)
    assert res is out
    assert np.array_equal(out[..., 3], img[..., 3])


def test_output_buffer_shape_mismatch():
    img = _random_rgba(8, 8)
    with pytest.raises(BufferShapeError):
        apply_adjustments(img, DEFAULT_PARAMS, out=np.zeros((8, 9, 4), dtype=np.uint8))


def test_output_buffer_must_not_alias_source():
    img = _random_rgba(8, 8)
    with pytest.raises(BufferShapeError):
        apply_adjustments(img, DEFAULT_PARAMS, out=img)


def test_rejects_non_rgba_input():
    with pytest.raises(BufferShapeError):
        apply_adjustments(np.zeros((4, 4, 3), dtype=np.uint8), DEFAULT_PARAMS)
    with pytest.raises(TypeError):
        apply_adjustments(np.zeros((4, 4, 4), dtype=np.float32), DEFAULT_PARAMS)


def test_empty_buffer_is_a_no_op():
    img = np.zeros((0, 0, 4), dtype=np.uint8)
    res = apply_adjustments(img, AdjustmentParams(temperature=30, shadows=20))
    assert res.shape == (0, 0, 4)
