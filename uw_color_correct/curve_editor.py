from __future__ import annotations

from typing import Sequence

from PySide6 import QtCore, QtGui, QtWidgets

from .config import APP_CONFIG
from .curve_model import CurveModel, CurveState
from .params import IDENTITY_CURVE, Curve


CHANNEL_COLORS: dict[str, str] = {
    "rgb": "#ffffff",
    "red": "#ef4444",
    "green": "#22c55e",
    "blue": "#3b82f6",
}

_POINT_RADIUS = 4.0
_POINT_RADIUS_ACTIVE = 6.0


class _CurveCanvas(QtWidgets.QWidget):
    interacted = QtCore.Signal()

    def __init__(self, model: CurveModel, color: QtGui.QColor, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self._model = model
        self._color = color
        side = int(model.size)
        self.setFixedSize(side, side)
        self.setMouseTracking(True)
        self.setCursor(QtCore.Qt.CursorShape.CrossCursor)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        m = self._model
        size = m.size
        pad = m.padding
        grid = (size - 2 * pad) / 4

        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), QtGui.QColor("#0f172a"))

        grid_pen = QtGui.QPen(QtGui.QColor("#334155"), 1)
        grid_pen.setDashPattern([2.0, 2.0])
        painter.setPen(grid_pen)
        for i in range(5):
            c = pad + i * grid
            painter.drawLine(QtCore.QPointF(c, pad), QtCore.QPointF(c, size - pad))
            painter.drawLine(QtCore.QPointF(pad, c), QtCore.QPointF(size - pad, c))

        diag_pen = QtGui.QPen(QtGui.QColor("#475569"), 1)
        diag_pen.setDashPattern([4.0, 4.0])
        painter.setPen(diag_pen)
        painter.drawLine(QtCore.QPointF(pad, size - pad), QtCore.QPointF(size - pad, pad))

        segments = m.bezier_segments()
        if segments:
            curve = QtGui.QPainterPath()
            curve.moveTo(*segments[0][0])
            for _, c1, c2, end in segments:
                curve.cubicTo(QtCore.QPointF(*c1), QtCore.QPointF(*c2), QtCore.QPointF(*end))

            fill = QtGui.QPainterPath()
            fill.moveTo(pad, size - pad)
            fill.lineTo(*segments[0][0])
            fill.connectPath(curve)
            fill.lineTo(size - pad, size - pad)
            fill.closeSubpath()
            fill_color = QtGui.QColor(self._color)
            fill_color.setAlpha(25)
            painter.fillPath(fill, fill_color)

            painter.setPen(QtGui.QPen(self._color, 2))
            painter.setBrush(QtCore.Qt.BrushStyle.NoBrush)
            painter.drawPath(curve)

        for i, (x, y) in enumerate(m.screen_points()):
            active = m.is_active(i)
            r = _POINT_RADIUS_ACTIVE if active else _POINT_RADIUS
            painter.setPen(QtCore.Qt.PenStyle.NoPen)
            painter.setBrush(QtGui.QColor(0, 0, 0, 76))
            painter.drawEllipse(QtCore.QPointF(x + 1, y + 1), r, r)
            painter.setBrush(QtGui.QColor("#0f172a"))
            painter.setPen(QtGui.QPen(self._color, 2))
            painter.drawEllipse(QtCore.QPointF(x, y), r, r)
            if active:
                painter.setPen(QtCore.Qt.PenStyle.NoPen)
                painter.setBrush(self._color)
                painter.drawEllipse(QtCore.QPointF(x, y), 2.0, 2.0)

        painter.setPen(QtGui.QColor("#94a3b8"))
        font = painter.font()
        font.setPixelSize(10)
        painter.setFont(font)
        painter.drawText(QtCore.QPointF(pad - 3, size - 5), "0")
        painter.drawText(QtCore.QPointF(size - pad - 9, size - 5), "255")
        painter.save()
        painter.translate(10, size - pad + 3)
        painter.rotate(-90)
        painter.drawText(QtCore.QPointF(0, 0), "0")
        painter.restore()
        painter.save()
        painter.translate(10, pad + 9)
        painter.rotate(-90)
        painter.drawText(QtCore.QPointF(0, 0), "255")
        painter.restore()
        painter.end()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() != QtCore.Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        if self._model.press(pos.x(), pos.y()):
            self.update()
            self.interacted.emit()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:
        pos = event.position()
        before = self._model.hovered_index
        was_state = self._model.state
        changed = self._model.move(pos.x(), pos.y())
        hovered = self._model.hovered_index
        if self._model.state is CurveState.IDLE:
            shape = QtCore.Qt.CursorShape.PointingHandCursor if hovered >= 0 else QtCore.Qt.CursorShape.CrossCursor
            self.setCursor(shape)
        if changed or hovered != before or self._model.state is not was_state:
            self.update()
            self.interacted.emit()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:
        self._model.release()
        self.update()

    def leaveEvent(self, event: QtCore.QEvent) -> None:
        self._model.leave()
        self.setCursor(QtCore.Qt.CursorShape.CrossCursor)
        self.update()
        self.interacted.emit()
        super().leaveEvent(event)


class CurveEditor(QtWidgets.QWidget):
    curveChanged = QtCore.Signal(list)  # five output levels, 0..100

    def __init__(
        self,
        curve: Sequence[float] = IDENTITY_CURVE,
        channel: str = "rgb",
        label: str = "RGB Curve",
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        if channel not in CHANNEL_COLORS:
            raise ValueError(f"Unknown curve channel: {channel!r}")
        self._channel = channel

        self.model = CurveModel(
            curve,
            size=APP_CONFIG.curve_canvas_size,
            padding=APP_CONFIG.curve_padding,
            on_change=self._on_model_changed,
        )

        color = QtGui.QColor(CHANNEL_COLORS[channel])

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        header = QtWidgets.QHBoxLayout()
        header.setContentsMargins(0, 0, 0, 0)
        header.setSpacing(8)
        self.title_label = QtWidgets.QLabel(label)
        self.badge = QtWidgets.QLabel(channel.upper())
        self.badge.setStyleSheet(
            f"QLabel {{ color: {color.name()}; border: 1px solid {color.name()}; border-radius: 3px; padding: 0 4px; }}"
        )
        self.reset_btn = QtWidgets.QToolButton()
        self.reset_btn.setText("Reset")
        header.addWidget(self.title_label)
        header.addWidget(self.badge)
        header.addStretch(1)
        header.addWidget(self.reset_btn)
        layout.addLayout(header)

        self.canvas = _CurveCanvas(self.model, color, self)
        layout.addWidget(self.canvas, 0, QtCore.Qt.AlignmentFlag.AlignHCenter)

        self.readout_label = QtWidgets.QLabel("")
        self.readout_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        hint = QtWidgets.QLabel("Drag control points to adjust the curve")
        hint.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        hint.setObjectName("HintLabel")
        layout.addWidget(self.readout_label)
        layout.addWidget(hint)

        self.reset_btn.clicked.connect(self.reset)
        self.canvas.interacted.connect(self.update_readout)

    @property
    def channel(self) -> str:
        return self._channel

    def values(self) -> Curve:
        return self.model.values()

    def set_values(self, values: Sequence[float], *, emit: bool = False) -> None:
        self.model.set_values(values)
        self.canvas.update()
        self.update_readout()
        if emit:
            self._on_model_changed(self.model.values())

    def reset(self) -> None:
        self.model.reset()
        self.canvas.update()
        self.update_readout()

    def update_readout(self) -> None:
        reading = self.model.readout()
        if reading is None:
            self.readout_label.setText("")
            return
        x, y = reading
        self.readout_label.setText(f"Input: {x} → Output: {y}")

    def _on_model_changed(self, values: Curve) -> None:
        self.curveChanged.emit(list(values))
