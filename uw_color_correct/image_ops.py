from __future__ import annotations

from typing import Sequence

import numpy as np

from .params import CURVE_INPUT_LEVELS, SELECTIVE_BANDS, AdjustmentParams, is_identity_curve


ArrayF = np.ndarray

# White balance shift (in 8-bit levels) at a slider value of +/-100.
WB_SHIFT = 30.0

HIGHLIGHTS_THRESHOLD = 0.7
SHADOWS_THRESHOLD = 0.3

# Whites/blacks lift (fraction of full scale) at +/-100.
WHITES_BLACKS_AMOUNT = 0.30

# Hue centre and half-width in degrees, reference colour in 8-bit RGB.
BANDS: dict[str, tuple[float, float, tuple[float, float, float]]] = {
    "red": (0.0, 30.0, (255.0, 0.0, 0.0)),
    "orange": (30.0, 20.0, (255.0, 128.0, 0.0)),
    "yellow": (60.0, 25.0, (255.0, 255.0, 0.0)),
    "green": (120.0, 45.0, (0.0, 255.0, 0.0)),
    "cyan": (180.0, 30.0, (0.0, 255.0, 255.0)),
    "blue": (240.0, 40.0, (0.0, 0.0, 255.0)),
    "magenta": (300.0, 30.0, (255.0, 0.0, 255.0)),
}

# Fraction of the way toward the band's target colour at +/-100.
SELECTIVE_TINT_AMOUNT = 0.5


class BufferShapeError(ValueError):
    pass


def _check_rgba8(rgba8: np.ndarray) -> None:
    if not isinstance(rgba8, np.ndarray):
        raise TypeError(f"Expected numpy array, got {type(rgba8).__name__}")
    if rgba8.dtype != np.uint8:
        raise TypeError(f"Expected uint8 image, got {rgba8.dtype}")
    if rgba8.ndim != 3 or rgba8.shape[2] != 4:
        raise BufferShapeError(f"Expected HxWx4 RGBA buffer, got shape {rgba8.shape}")


def _clip(values: ArrayF) -> ArrayF:
    return np.clip(values, 0.0, 255.0)


def _to_uint8(rgb: ArrayF) -> np.ndarray:
    # Round half to even, like a canvas' clamped byte array.
    return np.rint(_clip(rgb)).astype(np.uint8)


def luminance(rgb: ArrayF) -> ArrayF:
    # Rec.601 luma on 0..255 values
    return 0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]


def tone_zones(norm_lum: ArrayF) -> tuple[ArrayF, ArrayF, ArrayF]:
    """Split normalized luminance into (shadows, midtones, highlights) masks.

    Highlights own 0.7 and above, midtones own [0.3, 0.7), shadows the rest.
    Every pixel belongs to exactly one zone.
    """
    norm_lum = np.asarray(norm_lum, dtype=np.float64)
    highlights = norm_lum >= HIGHLIGHTS_THRESHOLD
    shadows = norm_lum < SHADOWS_THRESHOLD
    midtones = ~highlights & ~shadows
    return shadows, midtones, highlights


def apply_temperature(rgb: ArrayF, temperature: float) -> ArrayF:
    # Warm (+) pushes red up and blue down, cool (-) the reverse.
    t = float(temperature)
    if t == 0.0:
        return rgb
    shift = t / 100.0 * WB_SHIFT
    out = rgb.copy()
    out[..., 0] = _clip(rgb[..., 0] + shift)
    out[..., 2] = _clip(rgb[..., 2] - shift)
    return out


def apply_tint(rgb: ArrayF, tint: float) -> ArrayF:
    t = float(tint)
    if t == 0.0:
        return rgb
    out = rgb.copy()
    out[..., 1] = _clip(rgb[..., 1] + t / 100.0 * WB_SHIFT)
    return out


def contrast_factor(contrast: float) -> float:
    c = float(contrast) / 100.0 * 2.55
    return (259.0 * (c + 255.0)) / (255.0 * (259.0 - c))


def apply_contrast(rgb: ArrayF, contrast: float) -> ArrayF:
    # Pivots around 128, so mid grey never moves.
    if float(contrast) == 0.0:
        return rgb
    factor = contrast_factor(contrast)
    return _clip(factor * (rgb - 128.0) + 128.0)


def apply_saturation(rgb: ArrayF, saturation: float) -> ArrayF:
    s = float(saturation)
    if s == 0.0:
        return rgb
    factor = 1.0 + s / 100.0
    gray = luminance(rgb)[..., None]
    return _clip(gray + factor * (rgb - gray))


def apply_zone_tone(rgb: ArrayF, highlights: float, midtones: float, shadows: float) -> ArrayF:
    hi = float(highlights)
    mid = float(midtones)
    sh = float(shadows)
    if hi == 0.0 and mid == 0.0 and sh == 0.0:
        return rgb

    norm = luminance(rgb) / 255.0
    sh_mask, mid_mask, hi_mask = tone_zones(norm)

    out = rgb.copy()
    for mask, value in ((hi_mask, hi), (mid_mask, mid), (sh_mask, sh)):
        if value == 0.0 or not mask.any():
            continue
        out[mask] = _clip(rgb[mask] * (1.0 + value / 100.0))
    return out


def apply_whites_blacks(rgb: ArrayF, whites: float, blacks: float) -> ArrayF:
    w = float(whites)
    b = float(blacks)
    if w == 0.0 and b == 0.0:
        return rgb

    norm = luminance(rgb) / 255.0
    blacks_mask = np.clip((0.35 - norm) * 3.0, 0.0, 1.0)
    whites_mask = np.clip((norm - 0.65) * 3.0, 0.0, 1.0)

    scale = WHITES_BLACKS_AMOUNT * 255.0
    lift = blacks_mask * (b / 100.0 * scale) + whites_mask * (w / 100.0 * scale)
    return _clip(rgb + lift[..., None])


def _curve_nodes(values: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    xs = np.asarray(CURVE_INPUT_LEVELS, dtype=np.float64) / 100.0 * 255.0
    ys = np.clip(np.asarray(values, dtype=np.float64), 0.0, 100.0) / 100.0 * 255.0
    return xs, ys


def curve_lut(values: Sequence[float]) -> np.ndarray:
    """256-entry lookup table for a 5-point curve, linear between the points."""
    xs, ys = _curve_nodes(values)
    grid = np.arange(256, dtype=np.float64)
    return np.interp(grid, xs, ys)


def apply_curve(channel: ArrayF, values: Sequence[float]) -> ArrayF:
    xs, ys = _curve_nodes(values)
    return np.interp(channel, xs, ys)


def apply_curves(
    rgb: ArrayF,
    rgb_curve: Sequence[float],
    red_curve: Sequence[float],
    green_curve: Sequence[float],
    blue_curve: Sequence[float],
) -> ArrayF:
    out = rgb
    if not is_identity_curve(rgb_curve):
        out = _clip(apply_curve(out, rgb_curve))

    per_channel = [(0, red_curve), (1, green_curve), (2, blue_curve)]
    if all(is_identity_curve(c) for _, c in per_channel):
        return out

    out = out.copy()
    for idx, values in per_channel:
        if is_identity_curve(values):
            continue
        out[..., idx] = _clip(apply_curve(out[..., idx], values))
    return out


def hue_and_saturation(rgb: ArrayF) -> tuple[ArrayF, ArrayF]:
    """HSV hue in degrees [0, 360) and HSV saturation in [0, 1]."""
    r = rgb[..., 0]
    g = rgb[..., 1]
    b = rgb[..., 2]
    mx = np.max(rgb, axis=-1)
    mn = np.min(rgb, axis=-1)
    chroma = mx - mn
    safe = np.where(chroma > 0.0, chroma, 1.0)

    hue = np.where(
        mx == r,
        np.mod((g - b) / safe, 6.0),
        np.where(mx == g, (b - r) / safe + 2.0, (r - g) / safe + 4.0),
    )
    hue = np.where(chroma > 0.0, hue * 60.0, 0.0)
    sat = np.where(mx > 0.0, chroma / np.where(mx > 0.0, mx, 1.0), 0.0)
    return hue, sat


def band_mask(hue: ArrayF, sat: ArrayF, band: str) -> ArrayF:
    center, width, _ = BANDS[band]
    delta = np.abs(hue - center)
    delta = np.minimum(delta, 360.0 - delta)
    mask = np.clip(1.0 - delta / width, 0.0, 1.0)
    mask = mask * mask * (3.0 - 2.0 * mask)
    # Neutral pixels have no meaningful hue; fade the effect in with saturation.
    return mask * np.clip(sat * 2.0, 0.0, 1.0)


def apply_selective_color(rgb: ArrayF, params: AdjustmentParams) -> ArrayF:
    if not params.has_selective():
        return rgb

    # Masks come from the colours entering this step so bands never cascade.
    hue, sat = hue_and_saturation(rgb)
    out = rgb.copy()
    for band in SELECTIVE_BANDS:
        tint = params.selective(band)
        band_sat = params.band_saturation(band)
        if tint == 0.0 and band_sat == 0.0:
            continue
        mask = band_mask(hue, sat, band)[..., None]

        if tint:
            ref = np.array(BANDS[band][2], dtype=np.float64)
            target = ref if tint > 0 else 255.0 - ref
            amount = abs(tint) / 100.0 * SELECTIVE_TINT_AMOUNT
            out = _clip(out + mask * amount * (target - out))

        if band_sat:
            gray = luminance(out)[..., None]
            out = _clip(gray + (1.0 + mask * (band_sat / 100.0)) * (out - gray))
    return out


def apply_params(rgb: ArrayF, params: AdjustmentParams) -> ArrayF:
    """Run the full adjustment chain on float RGB values in 0..255.

    The order is fixed; every step is skipped outright when its control sits
    at zero (or identity, for curves).
    """
    out = rgb
    if params.temperature:
        out = apply_temperature(out, params.temperature)
    if params.tint:
        out = apply_tint(out, params.tint)
    if params.contrast:
        out = apply_contrast(out, params.contrast)
    if params.saturation:
        out = apply_saturation(out, params.saturation)
    if params.highlights or params.midtones or params.shadows:
        out = apply_zone_tone(out, params.highlights, params.midtones, params.shadows)
    if params.whites or params.blacks:
        out = apply_whites_blacks(out, params.whites, params.blacks)
    out = apply_curves(out, params.rgb_curve, params.red_curve, params.green_curve, params.blue_curve)
    out = apply_selective_color(out, params)
    return out


def apply_adjustments(
    rgba8: np.ndarray,
    params: AdjustmentParams,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """Render *params* over an RGBA8 buffer into a new buffer (or into *out*).

    Alpha is copied through untouched and the source is never modified.
    """
    _check_rgba8(rgba8)
    if out is not None:
        if not isinstance(out, np.ndarray) or out.shape != rgba8.shape or out.dtype != np.uint8:
            got = getattr(out, "shape", None)
            raise BufferShapeError(f"Output buffer {got} does not match source {rgba8.shape}")
        if np.shares_memory(out, rgba8):
            raise BufferShapeError("Output buffer must not alias the source buffer")

    rgb = rgba8[..., :3].astype(np.float64)
    rgb = apply_params(rgb, params)

    result = out if out is not None else np.empty_like(rgba8)
    result[..., :3] = _to_uint8(rgb)
    result[..., 3] = rgba8[..., 3]
    return result
