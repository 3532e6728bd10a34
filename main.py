from __future__ import annotations

import sys
import traceback
from dataclasses import replace
from pathlib import Path

import numpy as np
from PySide6 import QtCore, QtGui, QtWidgets

from uw_color_correct.config import APP_CONFIG
from uw_color_correct.curve_editor import CurveEditor
from uw_color_correct.image_ops import apply_adjustments
from uw_color_correct.imaging import ImageLoadError, LoadedImage, export_filename, load_image, save_png
from uw_color_correct.log import get_logger, setup_logging
from uw_color_correct.params import DEFAULT_PARAMS, AdjustmentParams
from uw_color_correct.presets import FilterPreset, presets, reset_params
from uw_color_correct.theme import apply_underwater_theme


logger = get_logger("main")


# (field, label, left caption, right caption)
BASIC_CONTROLS = [
    ("temperature", "Temperature", "Cool", "Warm"),
    ("tint", "Tint", "Magenta", "Green"),
    ("contrast", "Contrast", "-100", "+100"),
    ("saturation", "Saturation", "-100", "+100"),
]
TONE_CONTROLS = [
    ("highlights", "Highlights", "-100", "+100"),
    ("midtones", "Midtones", "-100", "+100"),
    ("shadows", "Shadows", "-100", "+100"),
    ("whites", "Whites", "-100", "+100"),
    ("blacks", "Blacks", "-100", "+100"),
]
SELECTIVE_CONTROLS = [
    ("selective_red", "Red", "", ""),
    ("selective_orange", "Orange", "", ""),
    ("selective_yellow", "Yellow", "", ""),
    ("selective_green", "Green", "", ""),
    ("selective_cyan", "Cyan", "", ""),
    ("selective_blue", "Blue", "", ""),
    ("selective_magenta", "Magenta", "", ""),
]
BAND_SATURATION_CONTROLS = [
    ("saturation_red", "Red Saturation", "", ""),
    ("saturation_orange", "Orange Saturation", "", ""),
    ("saturation_yellow", "Yellow Saturation", "", ""),
    ("saturation_green", "Green Saturation", "", ""),
    ("saturation_cyan", "Cyan Saturation", "", ""),
    ("saturation_blue", "Blue Saturation", "", ""),
    ("saturation_magenta", "Magenta Saturation", "", ""),
]
CURVE_CONTROLS = [
    ("rgb_curve", "rgb", "RGB Curve"),
    ("red_curve", "red", "Red Curve"),
    ("green_curve", "green", "Green Curve"),
    ("blue_curve", "blue", "Blue Curve"),
]


class _RenderSignals(QtCore.QObject):
    finished = QtCore.Signal(int, object)  # generation, rgba8 ndarray
    failed = QtCore.Signal(int, str)  # generation, error text


class _RenderTask(QtCore.QRunnable):
    def __init__(self, generation: int, preview_rgba8: np.ndarray, params: AdjustmentParams) -> None:
        super().__init__()
        self.generation = generation
        self.preview_rgba8 = preview_rgba8
        self.params = params
        self.signals = _RenderSignals()

    def run(self) -> None:
        try:
            rgba8 = apply_adjustments(self.preview_rgba8, self.params)
            self.signals.finished.emit(self.generation, rgba8)
        except Exception:
            self.signals.failed.emit(self.generation, traceback.format_exc())


def rgba8_to_qimage(rgba8: np.ndarray) -> QtGui.QImage:
    if rgba8.ndim != 3 or rgba8.shape[2] != 4 or rgba8.dtype != np.uint8:
        raise ValueError("Expected HxWx4 uint8 RGBA array")
    h, w, _ = rgba8.shape
    # Detach from the NumPy buffer; QImage would otherwise reference memory it does not own.
    qimg = QtGui.QImage(rgba8.tobytes(), w, h, 4 * w, QtGui.QImage.Format.Format_RGBA8888)
    return qimg.copy()


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Underwater Photo Editor")

        self._loaded: LoadedImage | None = None
        self._params = DEFAULT_PARAMS
        self._show_before = False
        self._zoom = 100
        self._base_pixmap: QtGui.QPixmap | None = None
        self._presets: list[FilterPreset] = presets()

        self._settings = QtCore.QSettings(APP_CONFIG.settings_org, APP_CONFIG.settings_app)

        self._apply_timer = QtCore.QTimer(self)
        self._apply_timer.setSingleShot(True)
        self._apply_timer.timeout.connect(self._apply_current)

        self._thread_pool = QtCore.QThreadPool.globalInstance()
        # Single worker; stale generations are dropped so the latest edit wins.
        self._thread_pool.setMaxThreadCount(1)
        self._render_generation = 0

        self._sliders: dict[str, tuple[QtWidgets.QSlider, QtWidgets.QLabel]] = {}
        self._curve_editors: dict[str, CurveEditor] = {}

        root = QtWidgets.QWidget()
        self.setCentralWidget(root)
        root_layout = QtWidgets.QVBoxLayout(root)
        root_layout.setContentsMargins(0, 0, 0, 0)
        root_layout.setSpacing(0)

        root_layout.addWidget(self._build_header())

        body = QtWidgets.QHBoxLayout()
        body.setContentsMargins(0, 0, 0, 0)
        body.setSpacing(0)
        body.addWidget(self._build_canvas_area(), 1)
        body.addWidget(self._build_sidebar())
        root_layout.addLayout(body, 1)

        self._apply_current()

    def _build_header(self) -> QtWidgets.QWidget:
        header = QtWidgets.QFrame()
        header.setObjectName("Header")
        layout = QtWidgets.QHBoxLayout(header)
        layout.setContentsMargins(16, 10, 16, 10)
        layout.setSpacing(8)

        title = QtWidgets.QLabel("Underwater Photo Editor")
        title.setObjectName("SectionTitle")
        layout.addWidget(title)
        layout.addStretch(1)

        self.load_btn = QtWidgets.QPushButton("Open…")
        self.before_btn = QtWidgets.QPushButton("Show Before")
        self.before_btn.setCheckable(True)
        self.reset_btn = QtWidgets.QPushButton("Reset")
        self.export_btn = QtWidgets.QPushButton("Export")
        self.export_btn.setObjectName("PrimaryButton")
        self.export_btn.setEnabled(False)

        for btn in (self.load_btn, self.before_btn, self.reset_btn, self.export_btn):
            layout.addWidget(btn)

        self.load_btn.clicked.connect(self._on_load)
        self.before_btn.toggled.connect(self._on_before_toggled)
        self.reset_btn.clicked.connect(self._on_reset)
        self.export_btn.clicked.connect(self._on_export)
        return header

    def _build_canvas_area(self) -> QtWidgets.QWidget:
        area = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(area)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.image_label = QtWidgets.QLabel("Open an underwater photo to begin")
        self.image_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.image_label.setMinimumSize(640, 480)

        self.scroll = QtWidgets.QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.scroll.setWidget(self.image_label)
        layout.addWidget(self.scroll, 1)

        zoom_row = QtWidgets.QHBoxLayout()
        zoom_row.setContentsMargins(0, 8, 0, 8)
        zoom_row.setSpacing(12)
        self.zoom_out_btn = QtWidgets.QToolButton()
        self.zoom_out_btn.setText("−")
        self.zoom_in_btn = QtWidgets.QToolButton()
        self.zoom_in_btn.setText("+")
        self.zoom_label = QtWidgets.QLabel(f"{self._zoom}%")
        self.zoom_label.setMinimumWidth(60)
        self.zoom_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        zoom_row.addStretch(1)
        zoom_row.addWidget(self.zoom_out_btn)
        zoom_row.addWidget(self.zoom_label)
        zoom_row.addWidget(self.zoom_in_btn)
        zoom_row.addStretch(1)
        layout.addLayout(zoom_row)

        self.zoom_out_btn.clicked.connect(lambda: self._set_zoom(self._zoom - APP_CONFIG.zoom_step))
        self.zoom_in_btn.clicked.connect(lambda: self._set_zoom(self._zoom + APP_CONFIG.zoom_step))
        self._set_zoom_controls_visible(False)
        return area

    def _build_sidebar(self) -> QtWidgets.QWidget:
        sidebar = QtWidgets.QFrame()
        sidebar.setObjectName("Sidebar")
        sidebar.setFixedWidth(320)
        outer = QtWidgets.QVBoxLayout(sidebar)
        outer.setContentsMargins(0, 0, 0, 0)

        scroll = QtWidgets.QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QtWidgets.QFrame.Shape.NoFrame)
        content = QtWidgets.QWidget()
        scroll.setWidget(content)
        outer.addWidget(scroll)

        layout = QtWidgets.QVBoxLayout(content)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        presets_title = QtWidgets.QLabel("Underwater Presets")
        presets_title.setObjectName("SectionTitle")
        layout.addWidget(presets_title)
        for preset in self._presets:
            btn = QtWidgets.QPushButton(preset.name)
            btn.clicked.connect(lambda _checked=False, p=preset: self._apply_preset(p))
            layout.addWidget(btn)

        self.tabs = QtWidgets.QTabWidget()
        self.tabs.addTab(self._slider_page(BASIC_CONTROLS), "Basic")
        self.tabs.addTab(self._slider_page(TONE_CONTROLS), "Tone")
        self.tabs.addTab(self._curves_page(), "Curves")
        self.tabs.addTab(self._color_page(), "Color")
        layout.addWidget(self.tabs, 1)
        return sidebar

    def _slider_page(self, controls: list[tuple[str, str, str, str]]) -> QtWidgets.QWidget:
        page = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(page)
        layout.setContentsMargins(0, 12, 0, 0)
        layout.setSpacing(14)
        for field, label, left, right in controls:
            layout.addWidget(self._slider_block(field, label, left, right))
        layout.addStretch(1)
        return page

    def _color_page(self) -> QtWidgets.QWidget:
        page = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(page)
        layout.setContentsMargins(0, 12, 0, 0)
        layout.setSpacing(10)

        title = QtWidgets.QLabel("Selective Color Tinting")
        title.setObjectName("SectionTitle")
        layout.addWidget(title)
        for field, label, left, right in SELECTIVE_CONTROLS:
            layout.addWidget(self._slider_block(field, label, left, right))

        title = QtWidgets.QLabel("Saturation by Color")
        title.setObjectName("SectionTitle")
        layout.addWidget(title)
        for field, label, left, right in BAND_SATURATION_CONTROLS:
            layout.addWidget(self._slider_block(field, label, left, right))

        layout.addStretch(1)
        return page

    def _curves_page(self) -> QtWidgets.QWidget:
        page = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(page)
        layout.setContentsMargins(0, 12, 0, 0)
        layout.setSpacing(16)
        for field, channel, label in CURVE_CONTROLS:
            editor = CurveEditor(getattr(self._params, field), channel=channel, label=label)
            editor.curveChanged.connect(lambda values, f=field: self._on_curve_changed(f, values))
            self._curve_editors[field] = editor
            layout.addWidget(editor)
        layout.addStretch(1)
        return page

    def _slider_block(self, field: str, label: str, left: str, right: str) -> QtWidgets.QWidget:
        block = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(block)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)
        layout.addWidget(QtWidgets.QLabel(label))

        slider, value_label = self._make_slider(-100, 100, int(round(getattr(self._params, field))))
        layout.addWidget(slider)

        captions = QtWidgets.QHBoxLayout()
        captions.setContentsMargins(0, 0, 0, 0)
        left_label = QtWidgets.QLabel(left)
        right_label = QtWidgets.QLabel(right)
        for lab in (left_label, right_label):
            lab.setObjectName("HintLabel")
        captions.addWidget(left_label)
        captions.addStretch(1)
        captions.addWidget(value_label)
        captions.addStretch(1)
        captions.addWidget(right_label)
        layout.addLayout(captions)

        slider.valueChanged.connect(lambda v, f=field: self._on_slider_changed(f, v))
        self._sliders[field] = (slider, value_label)
        return block

    def _make_slider(self, min_v: int, max_v: int, value: int) -> tuple[QtWidgets.QSlider, QtWidgets.QLabel]:
        s = QtWidgets.QSlider(QtCore.Qt.Orientation.Horizontal)
        s.setRange(min_v, max_v)
        s.setValue(value)
        s.setSingleStep(1)
        lab = QtWidgets.QLabel(str(value))
        lab.setObjectName("ValueLabel")
        lab.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        return s, lab

    def _on_load(self) -> None:
        start_dir = str(self._settings.value("lastImageDir", str(Path.home())))
        fn, _ = QtWidgets.QFileDialog.getOpenFileName(
            self,
            "Open Underwater Photo",
            start_dir,
            "Images (*.png *.jpg *.jpeg *.tif *.tiff *.bmp *.webp);;All Files (*)",
        )
        if not fn:
            return

        try:
            loaded = load_image(fn)
        except ImageLoadError as e:
            # Keep whatever was showing before; a failed decode never reaches the pipeline.
            QtWidgets.QMessageBox.critical(self, "Failed to open image", str(e))
            return

        self._settings.setValue("lastImageDir", str(Path(fn).parent))
        self._loaded = loaded
        self.export_btn.setEnabled(True)
        self._set_zoom_controls_visible(True)
        self._apply_current()

    def _on_export(self) -> None:
        if not self._loaded:
            return

        default_dir = Path(str(self._settings.value("lastImageDir", str(Path.home()))))
        fn, _ = QtWidgets.QFileDialog.getSaveFileName(
            self,
            "Export Image",
            str(default_dir / export_filename(self._loaded.path.stem)),
            "PNG (*.png)",
        )
        if not fn:
            return

        rgba8 = apply_adjustments(self._loaded.original_rgba8, self._params)
        try:
            save_png(rgba8, fn)
        except OSError as e:
            logger.error("Export to %s failed: %s", fn, e)
            QtWidgets.QMessageBox.critical(self, "Export failed", str(e))

    def _on_reset(self) -> None:
        self._params = reset_params()
        self._sync_widgets_from_state()
        self._schedule_apply()

    def _apply_preset(self, preset: FilterPreset) -> None:
        logger.debug("Applying preset %s", preset.name)
        self._params = preset.params
        self._sync_widgets_from_state()
        self._schedule_apply()

    def _on_before_toggled(self, checked: bool) -> None:
        self._show_before = checked
        self.before_btn.setText("Show After" if checked else "Show Before")
        self._apply_current()

    def _on_slider_changed(self, field: str, value: int) -> None:
        self._sliders[field][1].setText(str(value))
        self._params = replace(self._params, **{field: float(value)})
        self._schedule_apply()

    def _on_curve_changed(self, field: str, values: list) -> None:
        self._params = replace(self._params, **{field: tuple(float(v) for v in values)})
        self._schedule_apply()

    def _sync_widgets_from_state(self) -> None:
        # Block signals so a wholesale replacement does not echo back field by field.
        for field, (slider, value_label) in self._sliders.items():
            value = int(round(getattr(self._params, field)))
            slider.blockSignals(True)
            slider.setValue(value)
            slider.blockSignals(False)
            value_label.setText(str(value))
        for field, editor in self._curve_editors.items():
            editor.set_values(getattr(self._params, field))

    def _schedule_apply(self) -> None:
        self._apply_timer.start(APP_CONFIG.render_debounce_ms)

    def _apply_current(self) -> None:
        if not self._loaded:
            self.image_label.setText("Open an underwater photo to begin")
            self.image_label.setPixmap(QtGui.QPixmap())
            self._base_pixmap = None
            return

        self._render_generation += 1
        gen = self._render_generation

        if self._show_before:
            self._show_rgba8(self._loaded.preview_rgba8)
            return

        task = _RenderTask(generation=gen, preview_rgba8=self._loaded.preview_rgba8, params=self._params)
        task.signals.finished.connect(self._on_render_finished)
        task.signals.failed.connect(self._on_render_failed)
        self._thread_pool.start(task)

    def _on_render_finished(self, generation: int, rgba8: object) -> None:
        if generation != self._render_generation:
            return
        self._show_rgba8(rgba8)  # type: ignore[arg-type]

    def _on_render_failed(self, generation: int, err: str) -> None:
        logger.error("Render %d failed:\n%s", generation, err)
        if generation != self._render_generation:
            return
        QtWidgets.QMessageBox.critical(self, "Render Error", err)

    def _show_rgba8(self, rgba8: np.ndarray) -> None:
        self._base_pixmap = QtGui.QPixmap.fromImage(rgba8_to_qimage(rgba8))
        self._refit_pixmap()

    def _set_zoom(self, zoom: int) -> None:
        self._zoom = max(APP_CONFIG.zoom_min, min(APP_CONFIG.zoom_max, zoom))
        self.zoom_label.setText(f"{self._zoom}%")
        self.zoom_out_btn.setEnabled(self._zoom > APP_CONFIG.zoom_min)
        self.zoom_in_btn.setEnabled(self._zoom < APP_CONFIG.zoom_max)
        self._refit_pixmap()

    def _set_zoom_controls_visible(self, visible: bool) -> None:
        for w in (self.zoom_out_btn, self.zoom_label, self.zoom_in_btn):
            w.setVisible(visible)

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:
        super().resizeEvent(event)
        self._refit_pixmap()

    def _refit_pixmap(self) -> None:
        if not self._base_pixmap or self._base_pixmap.isNull():
            return
        viewport = self.scroll.viewport().size()
        if viewport.width() <= 10 or viewport.height() <= 10:
            return
        # Fit to the viewport first, then apply zoom on top.
        fitted = self._base_pixmap.size().scaled(viewport, QtCore.Qt.AspectRatioMode.KeepAspectRatio)
        target = QtCore.QSize(
            max(1, fitted.width() * self._zoom // 100),
            max(1, fitted.height() * self._zoom // 100),
        )
        scaled = self._base_pixmap.scaled(
            target,
            QtCore.Qt.AspectRatioMode.KeepAspectRatio,
            QtCore.Qt.TransformationMode.SmoothTransformation,
        )
        self.image_label.setPixmap(scaled)


def main() -> int:
    setup_logging(APP_CONFIG.log_level)
    app = QtWidgets.QApplication(sys.argv)

    apply_underwater_theme(app)

    w = MainWindow()
    w.resize(1280, 820)
    w.show()
    logger.info("Started")
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
