from __future__ import annotations

from dataclasses import dataclass

from .params import DEFAULT_PARAMS, AdjustmentParams


@dataclass(frozen=True)
class FilterPreset:
    name: str
    params: AdjustmentParams


def presets() -> list[FilterPreset]:
    # Each preset is a complete parameter record; applying one replaces everything.
    return [
        FilterPreset(
            name="Tropical Blue",
            params=AdjustmentParams(
                temperature=15,
                tint=-10,
                contrast=20,
                saturation=25,
                highlights=-15,
                shadows=20,
                selective_blue=-20,
                selective_cyan=-15,
                saturation_red=30,
                saturation_orange=25,
            ),
        ),
        FilterPreset(
            name="Deep Sea",
            params=AdjustmentParams(
                temperature=25,
                tint=-15,
                contrast=30,
                saturation=15,
                highlights=-25,
                shadows=35,
                selective_blue=-30,
                selective_cyan=-25,
                saturation_red=40,
                saturation_yellow=20,
            ),
        ),
        FilterPreset(
            name="Coral Reef",
            params=AdjustmentParams(
                temperature=10,
                tint=-5,
                contrast=15,
                saturation=35,
                highlights=-10,
                shadows=15,
                selective_blue=-15,
                saturation_red=25,
                saturation_orange=30,
                saturation_yellow=20,
            ),
        ),
    ]


def find_preset(name: str, available: list[FilterPreset] | None = None) -> FilterPreset | None:
    for preset in available if available is not None else presets():
        if preset.name == name:
            return preset
    return None


def reset_params() -> AdjustmentParams:
    return DEFAULT_PARAMS
