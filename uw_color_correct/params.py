from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterable, Sequence


Curve = tuple[float, float, float, float, float]

CURVE_INPUT_LEVELS: Curve = (0.0, 25.0, 50.0, 75.0, 100.0)
IDENTITY_CURVE: Curve = CURVE_INPUT_LEVELS

CONTROL_MIN = -100.0
CONTROL_MAX = 100.0
CURVE_MIN = 0.0
CURVE_MAX = 100.0

SELECTIVE_BANDS: tuple[str, ...] = ("red", "orange", "yellow", "green", "cyan", "blue", "magenta")

CURVE_FIELDS: tuple[str, ...] = ("rgb_curve", "red_curve", "green_curve", "blue_curve")


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(value)))


def normalize_curve(values: Iterable[float]) -> Curve:
    pts = tuple(clamp(v, CURVE_MIN, CURVE_MAX) for v in values)
    if len(pts) != len(CURVE_INPUT_LEVELS):
        raise ValueError(f"Curve needs {len(CURVE_INPUT_LEVELS)} values, got {len(pts)}")
    return pts  # type: ignore[return-value]


def is_identity_curve(values: Sequence[float]) -> bool:
    return tuple(float(v) for v in values) == IDENTITY_CURVE


@dataclass(frozen=True)
class AdjustmentParams:
    temperature: float = 0.0
    tint: float = 0.0
    contrast: float = 0.0
    saturation: float = 0.0
    highlights: float = 0.0
    midtones: float = 0.0
    shadows: float = 0.0
    whites: float = 0.0
    blacks: float = 0.0
    red_curve: Curve = IDENTITY_CURVE
    green_curve: Curve = IDENTITY_CURVE
    blue_curve: Curve = IDENTITY_CURVE
    rgb_curve: Curve = IDENTITY_CURVE
    selective_red: float = 0.0
    selective_orange: float = 0.0
    selective_yellow: float = 0.0
    selective_green: float = 0.0
    selective_cyan: float = 0.0
    selective_blue: float = 0.0
    selective_magenta: float = 0.0
    saturation_red: float = 0.0
    saturation_orange: float = 0.0
    saturation_yellow: float = 0.0
    saturation_green: float = 0.0
    saturation_cyan: float = 0.0
    saturation_blue: float = 0.0
    saturation_magenta: float = 0.0

    def __post_init__(self) -> None:
        # Silent correction: slider and curve values never leave their ranges.
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in CURVE_FIELDS:
                object.__setattr__(self, f.name, normalize_curve(value))
            else:
                object.__setattr__(self, f.name, clamp(value, CONTROL_MIN, CONTROL_MAX))

    def curve(self, channel: str) -> Curve:
        return getattr(self, f"{channel}_curve")

    def selective(self, band: str) -> float:
        return getattr(self, f"selective_{band}")

    def band_saturation(self, band: str) -> float:
        return getattr(self, f"saturation_{band}")

    def has_selective(self) -> bool:
        return any(self.selective(b) or self.band_saturation(b) for b in SELECTIVE_BANDS)

    def is_identity(self) -> bool:
        return self == DEFAULT_PARAMS


DEFAULT_PARAMS = AdjustmentParams()
