from dataclasses import fields, replace

import pytest

from uw_color_correct.params import (
    CURVE_FIELDS,
    DEFAULT_PARAMS,
    IDENTITY_CURVE,
    SELECTIVE_BANDS,
    AdjustmentParams,
    is_identity_curve,
    normalize_curve,
)
from uw_color_correct.presets import find_preset, presets, reset_params


def test_defaults_are_neutral():
    p = AdjustmentParams()
    assert p.is_identity()
    assert not p.has_selective()
    for name in CURVE_FIELDS:
        assert getattr(p, name) == IDENTITY_CURVE


def test_out_of_range_controls_are_clamped():
    p = AdjustmentParams(temperature=150, shadows=-101, selective_cyan=250)
    assert p.temperature == 100.0
    assert p.shadows == -100.0
    assert p.selective_cyan == 100.0


def test_replace_reclamps():
    p = replace(DEFAULT_PARAMS, contrast=900)
    assert p.contrast == 100.0


def test_curves_are_clamped_and_sized():
    assert normalize_curve((-5, 25, 50, 75, 120)) == (0.0, 25.0, 50.0, 75.0, 100.0)
    with pytest.raises(ValueError):
        normalize_curve((0, 50, 100))
    p = AdjustmentParams(red_curve=[0, 30, 60, 90, 140])
    assert p.curve("red") == (0.0, 30.0, 60.0, 90.0, 100.0)


def test_is_identity_curve():
    assert is_identity_curve([0, 25, 50, 75, 100])
    assert not is_identity_curve([0, 25, 50, 75, 99])


def test_band_accessors():
    p = AdjustmentParams(selective_green=12, saturation_magenta=-8)
    assert p.selective("green") == 12.0
    assert p.band_saturation("magenta") == -8.0
    assert p.has_selective()


def test_builtin_presets():
    names = [p.name for p in presets()]
    assert names == ["Tropical Blue", "Deep Sea", "Coral Reef"]


def test_presets_are_complete_records():
    for preset in presets():
        assert isinstance(preset.params, AdjustmentParams)
        # Fields a preset does not mention are neutral, so applying it replaces everything.
        assert preset.params.midtones == 0.0
        assert preset.params.whites == 0.0
        assert all(getattr(preset.params, name) == IDENTITY_CURVE for name in CURVE_FIELDS)


def test_deep_sea_values():
    deep = find_preset("Deep Sea")
    assert deep is not None
    p = deep.params
    assert (p.temperature, p.tint, p.contrast, p.saturation) == (25, -15, 30, 15)
    assert (p.highlights, p.shadows) == (-25, 35)
    assert (p.selective_blue, p.selective_cyan) == (-30, -25)
    assert (p.saturation_red, p.saturation_yellow) == (40, 20)


def test_find_preset_unknown():
    assert find_preset("Kelp Forest") is None


def test_reset_params_restores_every_field():
    p = reset_params()
    for f in fields(p):
        assert getattr(p, f.name) == getattr(DEFAULT_PARAMS, f.name)
    for band in SELECTIVE_BANDS:
        assert p.selective(band) == 0.0
