from __future__ import annotations

from PySide6 import QtGui, QtWidgets


def apply_underwater_theme(app: QtWidgets.QApplication) -> None:
    """Apply a deep slate theme with a teal accent using Fusion + palette + QSS.

    The curve canvas paints its own background; everything else stays stock Qt.
    """

    app.setStyle("Fusion")

    pal = QtGui.QPalette()

    pal.setColor(QtGui.QPalette.ColorRole.Window, QtGui.QColor(15, 23, 42))
    pal.setColor(QtGui.QPalette.ColorRole.Base, QtGui.QColor(11, 17, 32))
    pal.setColor(QtGui.QPalette.ColorRole.AlternateBase, QtGui.QColor(20, 30, 52))

    pal.setColor(QtGui.QPalette.ColorRole.WindowText, QtGui.QColor(226, 232, 240))
    pal.setColor(QtGui.QPalette.ColorRole.Text, QtGui.QColor(226, 232, 240))
    pal.setColor(QtGui.QPalette.ColorRole.ButtonText, QtGui.QColor(226, 232, 240))
    pal.setColor(QtGui.QPalette.ColorRole.PlaceholderText, QtGui.QColor(148, 163, 184))

    pal.setColor(QtGui.QPalette.ColorRole.Button, QtGui.QColor(30, 41, 59))

    pal.setColor(QtGui.QPalette.ColorRole.Highlight, QtGui.QColor(20, 184, 166))
    pal.setColor(QtGui.QPalette.ColorRole.HighlightedText, QtGui.QColor(255, 255, 255))

    pal.setColor(QtGui.QPalette.ColorRole.ToolTipBase, QtGui.QColor(226, 232, 240))
    pal.setColor(QtGui.QPalette.ColorRole.ToolTipText, QtGui.QColor(15, 23, 42))

    app.setPalette(pal)

    app.setStyleSheet(
        """
        QWidget { background: #0f172a; color: #e2e8f0; }
        QMainWindow { background: #0f172a; }

        QLabel { background: transparent; }
        QLabel#HintLabel, QLabel#ValueLabel { color: #94a3b8; }
        QLabel#SectionTitle { font-weight: 600; }

        QPushButton, QToolButton {
            background: #1e293b;
            border: 1px solid #334155;
            border-radius: 6px;
            padding: 4px 10px;
        }
        QPushButton:hover, QToolButton:hover { background: #273449; border-color: #3f4f66; }
        QPushButton:pressed, QToolButton:pressed { background: #172033; }
        QPushButton:checked, QToolButton:checked { background: #134e4a; border-color: #14b8a6; }
        QPushButton:disabled, QToolButton:disabled { color: #64748b; background: #111827; border-color: #1f2937; }
        QPushButton#PrimaryButton { background: #0d9488; border-color: #14b8a6; color: #ffffff; }
        QPushButton#PrimaryButton:hover { background: #0f766e; }
        QPushButton#PrimaryButton:disabled { background: #1e293b; border-color: #334155; color: #64748b; }

        QTabWidget::pane { border: 0px; }
        QTabBar::tab {
            background: #1e293b;
            color: #94a3b8;
            padding: 5px 10px;
            border: 1px solid #334155;
            border-bottom: none;
            border-top-left-radius: 6px;
            border-top-right-radius: 6px;
        }
        QTabBar::tab:selected { background: #0f172a; color: #e2e8f0; }
        QTabBar::tab:hover { color: #e2e8f0; }

        QFrame#Sidebar { background: #111a2e; border-left: 1px solid #1e293b; }
        QFrame#Header { background: #111a2e; border-bottom: 1px solid #1e293b; }

        QSlider::groove:horizontal { height: 4px; background: #334155; border-radius: 2px; }
        QSlider::sub-page:horizontal { background: #14b8a6; border-radius: 2px; }
        QSlider::add-page:horizontal { background: #1e293b; border-radius: 2px; }
        QSlider::handle:horizontal { width: 14px; margin: -6px 0; border-radius: 7px; background: #e2e8f0; }

        QScrollArea { border: none; }
        QScrollBar:vertical { background: #0b1120; width: 10px; margin: 0px; border: none; }
        QScrollBar::handle:vertical { background: #1e293b; min-height: 24px; border-radius: 5px; }
        QScrollBar::handle:vertical:hover { background: #334155; }
        QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical { height: 0px; }
        QScrollBar::add-page:vertical, QScrollBar::sub-page:vertical { background: none; }
        QScrollBar:horizontal { background: #0b1120; height: 10px; margin: 0px; border: none; }
        QScrollBar::handle:horizontal { background: #1e293b; min-width: 24px; border-radius: 5px; }
        QScrollBar::handle:horizontal:hover { background: #334155; }
        QScrollBar::add-line:horizontal, QScrollBar::sub-line:horizontal { width: 0px; }
        QScrollBar::add-page:horizontal, QScrollBar::sub-page:horizontal { background: none; }

        QMessageBox { background: #0f172a; }
        """
    )
