from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Callable, Iterable

from .params import CURVE_INPUT_LEVELS, IDENTITY_CURVE, Curve, clamp, normalize_curve


ScreenPoint = tuple[float, float]
BezierSegment = tuple[ScreenPoint, ScreenPoint, ScreenPoint, ScreenPoint]

DEFAULT_SIZE = 200.0
DEFAULT_PADDING = 20.0
HIT_RADIUS = 8.0


class CurveState(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class CurvePoint:
    x: float
    y: float


class CurveModel:
    """Five fixed-x control points edited by dragging them vertically.

    Holds the geometry, hit-testing and Idle/Dragging state of the curve
    editor without touching Qt, so a view only forwards pointer positions.
    """

    def __init__(
        self,
        values: Iterable[float] = IDENTITY_CURVE,
        *,
        size: float = DEFAULT_SIZE,
        padding: float = DEFAULT_PADDING,
        hit_radius: float = HIT_RADIUS,
        on_change: Callable[[Curve], None] | None = None,
    ) -> None:
        if size <= 2 * padding:
            raise ValueError(f"Canvas size {size} leaves no room inside padding {padding}")
        self.size = float(size)
        self.padding = float(padding)
        self.hit_radius = float(hit_radius)
        self.on_change = on_change

        self._points: list[CurvePoint] = []
        self._state = CurveState.IDLE
        self._dragging_index = -1
        self.hovered_index = -1
        self.set_values(values)

    @property
    def points(self) -> list[CurvePoint]:
        return list(self._points)

    def values(self) -> Curve:
        return tuple(p.y for p in self._points)  # type: ignore[return-value]

    def set_values(self, values: Iterable[float]) -> None:
        # External sync (e.g. a preset was applied); does not notify.
        ys = normalize_curve(values)
        self._points = [CurvePoint(x, y) for x, y in zip(CURVE_INPUT_LEVELS, ys)]

    def reset(self) -> None:
        self.set_values(IDENTITY_CURVE)
        self._state = CurveState.IDLE
        self._dragging_index = -1
        self._emit()

    @property
    def state(self) -> CurveState:
        return self._state

    @property
    def dragging_index(self) -> int:
        return self._dragging_index

    def is_active(self, index: int) -> bool:
        return index == self.hovered_index or index == self._dragging_index

    @property
    def _span(self) -> float:
        return self.size - 2 * self.padding

    def to_coord(self, v: float) -> float:
        return self.padding + v / 100 * self._span

    def to_coord_y(self, v: float) -> float:
        # Screen Y grows downward while curve values grow upward.
        return self.size - self.padding - v / 100 * self._span

    def from_coord(self, coord: float) -> float:
        return clamp((coord - self.padding) / self._span * 100, 0.0, 100.0)

    def from_coord_y(self, coord: float) -> float:
        return clamp((self.size - self.padding - coord) / self._span * 100, 0.0, 100.0)

    def point_position(self, index: int) -> ScreenPoint:
        p = self._points[index]
        return self.to_coord(p.x), self.to_coord_y(p.y)

    def screen_points(self) -> list[ScreenPoint]:
        return [self.point_position(i) for i in range(len(self._points))]

    def contains(self, x: float, y: float) -> bool:
        return 0.0 <= x <= self.size and 0.0 <= y <= self.size

    def hit_test(self, x: float, y: float) -> int:
        if not self.contains(x, y):
            return -1
        for i, (px, py) in enumerate(self.screen_points()):
            if math.hypot(x - px, y - py) <= self.hit_radius:
                return i
        return -1

    def press(self, x: float, y: float) -> bool:
        if self._state is CurveState.DRAGGING:
            return False
        index = self.hit_test(x, y)
        if index < 0:
            return False
        self._state = CurveState.DRAGGING
        self._dragging_index = index
        return True

    def move(self, x: float, y: float) -> bool:
        """Handle pointer motion; returns True when the curve values changed."""
        if not self.contains(x, y):
            # The view keeps the mouse grab while a button is held, so leaving
            # the canvas mid-drag arrives here rather than as a leave event.
            if self._state is CurveState.DRAGGING:
                self.leave()
            return False

        if self._state is CurveState.DRAGGING:
            i = self._dragging_index
            self._points[i] = CurvePoint(self._points[i].x, self.from_coord_y(y))
            self._emit()
            return True

        self.hovered_index = self.hit_test(x, y)
        return False

    def release(self) -> None:
        self._state = CurveState.IDLE
        self._dragging_index = -1

    def leave(self) -> None:
        self.hovered_index = -1
        self.release()

    def bezier_segments(self) -> list[BezierSegment]:
        """Cubic segments through the points with horizontal-midpoint handles."""
        pts = self.screen_points()
        segments: list[BezierSegment] = []
        for (ax, ay), (bx, by) in zip(pts, pts[1:]):
            half = (bx - ax) / 2
            segments.append(((ax, ay), (ax + half, ay), (bx - half, by), (bx, by)))
        return segments

    def readout(self) -> tuple[int, int] | None:
        index = self._dragging_index if self._dragging_index >= 0 else self.hovered_index
        if index < 0:
            return None
        p = self._points[index]
        return int(p.x), int(round(p.y))

    def _emit(self) -> None:
        if self.on_change is not None:
            self.on_change(self.values())

