# sparkline_monitor.py
# Qt shell around the sampling core:
#   • Full window: System / Network / Power tabs with metric cards + sparklines
#   • Compact widget: frameless always-on-top window with one row per metric
#
# Both windows share one MonitorController, which owns the provider, the
# sampler and the ViewModel, and fires one tick per TICK_INTERVAL_MS.
#
# Dependencies: psutil, PyQt5, pyqtgraph
# License: MIT

import logging
import os
import sys
from typing import Dict, List, Optional, Sequence, Tuple

from PyQt5 import QtWidgets, QtCore, QtGui
import pyqtgraph as pg

from . import formatting, preferences
from .core.config import BATTERY, DISK, NETWORK, OPTIONAL_CLASSES, TICK_INTERVAL_MS, MetricsConfig
from .core.sampler import Sampler
from .core.sparkline import build_path, rate_ceiling, MOVE
from .core.state import (
    BATTERY_LEVEL, CPU, DISK_USAGE, DOWN, RAM, UP,
    ViewId, ViewModel, select_view, visible_metrics,
)
from .data_acquisition.provider import PsutilTelemetryProvider

logger = logging.getLogger(__name__)

VIEW_TITLES = [(ViewId.SYSTEM, "System"), (ViewId.NETWORK, "Network"), (ViewId.POWER, "Power")]

CPU_COLOR = (0x3B, 0x82, 0xF6)
RAM_COLOR = (0xEC, 0x48, 0x99)
NET_COLOR = (0x10, 0xB9, 0x81)
UPLOAD_COLOR = (0x06, 0x99, 0x68)
DISK_COLOR = (0xF5, 0x9E, 0x0B)


def _css(rgb: Tuple[int, int, int]) -> str:
    return "rgb({}, {}, {})".format(*rgb)


# ------------------------------- Controller -------------------------------

class MonitorController(QtCore.QObject):
    """
    Owns the ViewModel and drives sampling from a QTimer. Tab selection and
    ticks both arrive on the GUI thread, so the ViewModel needs no locking.
    """
    updated = QtCore.pyqtSignal()

    def __init__(self, provider=None, prefs: Optional[preferences.Preferences] = None, parent=None):
        super().__init__(parent)
        self.prefs = prefs or preferences.load()
        self.provider = provider or PsutilTelemetryProvider()
        self.sampler = Sampler()
        self.state = ViewModel(config=self.prefs.metrics, selected_view=self.prefs.view)

        self.timer = QtCore.QTimer(self)
        self.timer.setInterval(TICK_INTERVAL_MS)
        self.timer.timeout.connect(self.tick)

    def start(self):
        self.tick()
        self.timer.start()

    def tick(self):
        self.sampler.tick(self.provider, self.state)
        self.updated.emit()

    def select_view(self, view: ViewId):
        select_view(self.state, view)
        self.prefs.view = view
        preferences.save(self.prefs)
        self.updated.emit()

    def apply_config(self, config: MetricsConfig):
        logger.info("Metric classes now %s", config.as_dict())
        self.state.set_config(config)
        self.prefs.metrics = config
        preferences.save(self.prefs)
        self.updated.emit()


# ------------------------------- Centered tabs -------------------------------

class CenteredTabBar(QtWidgets.QWidget):
    """A tab bar kept centered, one tab per view; emits the selected ViewId."""
    viewChanged = QtCore.pyqtSignal(object)

    def __init__(self, current: ViewId, parent=None):
        super().__init__(parent)
        self.views: List[ViewId] = []
        self.tabBar = QtWidgets.QTabBar(movable=False, tabsClosable=False)
        self.tabBar.setExpanding(False)
        self.tabBar.setDocumentMode(True)
        self.tabBar.setDrawBase(False)
        for view, title in VIEW_TITLES:
            self.views.append(view)
            self.tabBar.addTab(title)
        self.tabBar.setCurrentIndex(self.views.index(current))
        self.tabBar.currentChanged.connect(self._on_tab_changed)

        top = QtWidgets.QHBoxLayout(self)
        top.setContentsMargins(0, 0, 0, 0)
        top.addStretch(1)
        top.addWidget(self.tabBar, 0, QtCore.Qt.AlignCenter)
        top.addStretch(1)

    def _on_tab_changed(self, i: int):
        self.viewChanged.emit(self.views[i])


# ------------------------------- Axes -------------------------------

class TimeAxisItem(pg.AxisItem):
    """Bottom axis of the overview plot: sample index → age of that sample.

    The newest sample sits at index ``capacity - 1`` and reads "now".
    """
    def __init__(self, capacity: int, tick_seconds: float, **kwargs):
        super().__init__(orientation='bottom', **kwargs)
        self.capacity = max(1, int(capacity))
        self.tick_seconds = float(tick_seconds)

    def age_seconds(self, index: float) -> float:
        return max(0.0, (self.capacity - 1 - float(index)) * self.tick_seconds)

    def tickStrings(self, values, scale, spacing):
        labels = []
        for x in values:
            age = self.age_seconds(x)
            if age < 0.5:
                labels.append("now")
            elif age < 60:
                labels.append(f"-{int(round(age))}s")
            else:
                labels.append(f"-{age / 60.0:g}m")
        return labels


class PercentAxisItem(pg.AxisItem):
    """Left axis of the overview plot; CPU and RAM share the 0-100 scale."""
    def __init__(self, **kwargs):
        super().__init__(orientation='left', **kwargs)
        self.setTickSpacing(major=25, minor=5)

    def tickStrings(self, values, scale, spacing):
        return [f"{v:.0f}%" for v in values]


# ------------------------------- Sparkline -------------------------------

class SparklineWidget(QtWidgets.QWidget):
    """Strokes the polyline from build_path(); geometry is rebuilt every paint."""

    def __init__(self, height: int = 80, color=(255, 255, 255), parent=None):
        super().__init__(parent)
        self.samples: Sequence[float] = ()
        self.max_value = 100.0
        self.pen = pg.mkPen(color=color, width=2)
        self.setFixedHeight(height)
        self.setSizePolicy(QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Fixed)

    def set_data(self, samples: Sequence[float], max_value: float):
        self.samples = samples
        self.max_value = max_value
        self.update()

    def paintEvent(self, e: QtGui.QPaintEvent):
        segments = build_path(self.samples, self.max_value, self.width(), self.height())
        if not segments:
            return
        path = QtGui.QPainterPath()
        for seg in segments:
            if seg.op == MOVE:
                path.moveTo(seg.x, seg.y)
            else:
                path.lineTo(seg.x, seg.y)
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.Antialiasing)
        painter.setPen(self.pen)
        painter.drawPath(path)
        painter.end()


# ------------------------------- Cards -------------------------------

class MetricCard(QtWidgets.QFrame):
    """Colored card: title, big value, optional progress bar, detail, sparklines."""

    def __init__(self, title: str, color, progress: bool = True, n_charts: int = 1,
                 chart_height: int = 80, parent=None):
        super().__init__(parent)
        self.setObjectName("card")
        self.set_color(color)

        lay = QtWidgets.QVBoxLayout(self)
        lay.setContentsMargins(20, 20, 20, 20)
        lay.setSpacing(10)

        self.title = QtWidgets.QLabel(title)
        self.value = QtWidgets.QLabel("—")
        font = self.value.font()
        font.setPointSize(24)
        font.setBold(True)
        self.value.setFont(font)
        self.bar: Optional[QtWidgets.QProgressBar] = None
        if progress:
            self.bar = QtWidgets.QProgressBar()
            self.bar.setRange(0, 100)
            self.bar.setTextVisible(False)
            self.bar.setFixedHeight(8)
        self.detail = QtWidgets.QLabel("")
        self.charts = [SparklineWidget(chart_height) for _ in range(n_charts)]

        lay.addWidget(self.title)
        lay.addWidget(self.value)
        if self.bar is not None:
            lay.addWidget(self.bar)
        lay.addWidget(self.detail)
        lay.addWidget(QtWidgets.QLabel("History (2 min)"))
        for chart in self.charts:
            lay.addWidget(chart)

    def set_color(self, color):
        self.setStyleSheet(
            f"QFrame#card {{ background: {_css(color)}; border-radius: 16px; }}"
            "QFrame#card QLabel { color: white; }"
        )

    def set_percent(self, value: float):
        if self.bar is not None:
            self.bar.setValue(int(round(min(max(value, 0.0), 100.0))))


def _disabled_label(what: str) -> QtWidgets.QLabel:
    lab = QtWidgets.QLabel(f"{what} module not enabled")
    lab.setAlignment(QtCore.Qt.AlignCenter)
    lab.setStyleSheet("color: rgb(107, 124, 147); font-size: 18px; padding: 60px;")
    return lab


# ------------------------------- Full window -------------------------------

class MonitorWindow(QtWidgets.QMainWindow):
    WINDOW_SIZE = (1400, 900)
    OVERVIEW_HEIGHT = 180

    def __init__(self, controller: MonitorController):
        super().__init__()
        self.controller = controller
        self.setWindowTitle("System Monitor")
        self.resize(*self.WINDOW_SIZE)

        state = controller.state
        self.tabs = CenteredTabBar(state.selected_view)
        self.tabs.viewChanged.connect(controller.select_view)
        self.pages = QtWidgets.QStackedWidget()

        # ----- System -----
        self.cpu_card = MetricCard("CPU", CPU_COLOR, chart_height=100)
        self.ram_card = MetricCard("Memory", RAM_COLOR, chart_height=100)
        self.disk_card = MetricCard("Storage", DISK_COLOR)

        self.overview_axis = TimeAxisItem(state.capacity, TICK_INTERVAL_MS / 1000.0)
        self.overview = pg.PlotWidget(axisItems={'bottom': self.overview_axis, 'left': PercentAxisItem()})
        self.overview.showAxis('right', False)
        self.overview.showGrid(x=True, y=True, alpha=0.2)
        self.overview.setYRange(0, 100)
        self.overview.setXRange(0, max(1, state.capacity - 1))
        self.overview.setMouseEnabled(x=False, y=False)
        self.overview.setMenuEnabled(False)
        self.overview.setFixedHeight(self.OVERVIEW_HEIGHT)
        self.cpu_curve = self.overview.plot(pen=pg.mkPen(CPU_COLOR, width=2), name="CPU")
        self.ram_curve = self.overview.plot(pen=pg.mkPen(RAM_COLOR, width=2), name="RAM")

        system = QtWidgets.QWidget()
        sl = QtWidgets.QVBoxLayout(system)
        row = QtWidgets.QHBoxLayout()
        row.setSpacing(20)
        row.addWidget(self.cpu_card)
        row.addWidget(self.ram_card)
        sl.addLayout(row)
        sl.addWidget(self.disk_card)
        sl.addWidget(self.overview)
        sl.addStretch(1)

        # ----- Network -----
        self.net_card = MetricCard("Network", NET_COLOR, progress=False, n_charts=2)
        self.net_off = _disabled_label("Network")
        network = QtWidgets.QWidget()
        nl = QtWidgets.QVBoxLayout(network)
        nl.addWidget(self.net_card)
        nl.addWidget(self.net_off)
        nl.addStretch(1)

        # ----- Power -----
        self.battery_card = MetricCard("Battery", formatting.BATTERY_OK)
        self.battery_off = _disabled_label("Battery")
        power = QtWidgets.QWidget()
        pl = QtWidgets.QVBoxLayout(power)
        pl.addWidget(self.battery_card)
        pl.addWidget(self.battery_off)
        pl.addStretch(1)

        self.page_for_view: Dict[ViewId, int] = {
            ViewId.SYSTEM: self.pages.addWidget(system),
            ViewId.NETWORK: self.pages.addWidget(network),
            ViewId.POWER: self.pages.addWidget(power),
        }

        container = QtWidgets.QWidget()
        v = QtWidgets.QVBoxLayout(container)
        v.setContentsMargins(30, 30, 30, 30)
        v.setSpacing(20)
        title = QtWidgets.QLabel("System Monitor")
        font = title.font()
        font.setPointSize(28)
        font.setBold(True)
        title.setFont(font)
        v.addWidget(title)
        v.addWidget(self.tabs)
        v.addWidget(self.pages, 1)

        btn_layout = QtWidgets.QHBoxLayout()
        btn_layout.addStretch(1)
        self.pref_btn = QtWidgets.QPushButton("Preferences")
        self.pref_btn.clicked.connect(self.open_preferences)
        btn_layout.addWidget(self.pref_btn)
        v.addLayout(btn_layout)
        self.setCentralWidget(container)

        controller.updated.connect(self.refresh)
        self.refresh()

    def open_preferences(self):
        dlg = PreferencesDialog(self.controller.state.config, self)
        if dlg.exec_() == QtWidgets.QDialog.Accepted:
            self.controller.apply_config(dlg.config())

    def refresh(self):
        state = self.controller.state
        r = state.reading
        self.pages.setCurrentIndex(self.page_for_view[state.selected_view])

        cpu_hist = state.history(CPU).as_slice()
        ram_hist = state.history(RAM).as_slice()

        self.cpu_card.value.setText(formatting.percent_text(r.cpu_percent))
        self.cpu_card.set_percent(r.cpu_percent)
        self.cpu_card.charts[0].set_data(cpu_hist, 100.0)

        self.ram_card.value.setText(formatting.percent_text(r.ram_percent))
        self.ram_card.set_percent(r.ram_percent)
        self.ram_card.detail.setText(formatting.memory_text(r.used_mem_mb, r.total_mem_mb))
        self.ram_card.charts[0].set_data(ram_hist, 100.0)

        # Right-align the overview so the newest sample sits at "now"
        offset = state.capacity - len(cpu_hist)
        self.cpu_curve.setData(list(range(offset, offset + len(cpu_hist))), list(cpu_hist))
        offset = state.capacity - len(ram_hist)
        self.ram_curve.setData(list(range(offset, offset + len(ram_hist))), list(ram_hist))

        disk_on = state.is_tracked(DISK_USAGE) and r.disk is not None
        self.disk_card.setVisible(disk_on)
        if disk_on:
            self.disk_card.value.setText(formatting.percent_text(r.disk.percent, 0))
            self.disk_card.set_percent(r.disk.percent)
            self.disk_card.detail.setText(formatting.disk_text(r.disk.used_gib, r.disk.total_gib))
            self.disk_card.charts[0].set_data(state.history(DISK_USAGE).as_slice(), 100.0)

        net_on = state.is_tracked(DOWN) and r.network is not None
        self.net_card.setVisible(net_on)
        self.net_off.setVisible(not net_on)
        if net_on:
            n = r.network
            self.net_card.value.setText(
                f"↓ {formatting.rate_mbps(n.down_mbps)}    ↑ {formatting.rate_mbps(n.up_mbps)}"
            )
            self.net_card.detail.setText(formatting.totals_text(n.total_rx_gib, n.total_tx_gib))
            down = state.history(DOWN).as_slice()
            up = state.history(UP).as_slice()
            self.net_card.charts[0].set_data(down, rate_ceiling(down))
            self.net_card.charts[1].set_data(up, rate_ceiling(up))

        bat_on = state.is_tracked(BATTERY_LEVEL) and r.battery is not None
        self.battery_card.setVisible(bat_on)
        self.battery_off.setVisible(not bat_on)
        if bat_on:
            b = r.battery
            self.battery_card.set_color(formatting.battery_color(b.percent))
            self.battery_card.value.setText(formatting.percent_text(b.percent, 0))
            self.battery_card.set_percent(b.percent)
            self.battery_card.detail.setText(formatting.battery_state(b.charging))
            self.battery_card.charts[0].set_data(state.history(BATTERY_LEVEL).as_slice(), 100.0)


# ------------------------------- Compact widget -------------------------------

class MetricRow(QtWidgets.QFrame):
    def __init__(self, label: str, color, parent=None):
        super().__init__(parent)
        self.setObjectName("row")
        self.set_color(color)
        lay = QtWidgets.QHBoxLayout(self)
        lay.setContentsMargins(8, 8, 8, 8)
        lay.setSpacing(10)
        self.label = QtWidgets.QLabel(label)
        self.value = QtWidgets.QLabel("—")
        lay.addWidget(self.label, 1)
        lay.addWidget(self.value)

    def set_color(self, color):
        self.setStyleSheet(
            f"QFrame#row {{ background: {_css(color)}; border-radius: 8px; }}"
            "QFrame#row QLabel { color: white; }"
        )


class CompactWindow(QtWidgets.QWidget):
    """Small frameless always-on-top window with one row per visible metric."""
    WINDOW_SIZE = (280, 270)

    def __init__(self, controller: MonitorController):
        super().__init__(None, QtCore.Qt.FramelessWindowHint | QtCore.Qt.WindowStaysOnTopHint | QtCore.Qt.Tool)
        self.controller = controller
        self.setWindowTitle("System Monitor")
        self.resize(*self.WINDOW_SIZE)

        self.tabs = CenteredTabBar(controller.state.selected_view)
        self.tabs.viewChanged.connect(controller.select_view)

        self.rows: Dict[str, MetricRow] = {
            CPU: MetricRow("CPU", CPU_COLOR),
            RAM: MetricRow("RAM", RAM_COLOR),
            DISK_USAGE: MetricRow("Storage", DISK_COLOR),
            DOWN: MetricRow("Download", NET_COLOR),
            UP: MetricRow("Upload", UPLOAD_COLOR),
            BATTERY_LEVEL: MetricRow("Battery", formatting.BATTERY_OK),
        }
        self.empty = QtWidgets.QLabel("Module not enabled")
        self.empty.setAlignment(QtCore.Qt.AlignCenter)

        lay = QtWidgets.QVBoxLayout(self)
        lay.setContentsMargins(10, 8, 10, 10)
        lay.setSpacing(6)
        lay.addWidget(self.tabs)
        for row in self.rows.values():
            lay.addWidget(row)
        lay.addWidget(self.empty)
        lay.addStretch(1)

        self._drag_origin: Optional[QtCore.QPoint] = None
        controller.updated.connect(self.refresh)
        self.refresh()

    # Frameless: allow dragging the window by its body
    def mousePressEvent(self, e: QtGui.QMouseEvent):
        if e.button() == QtCore.Qt.LeftButton:
            self._drag_origin = e.globalPos() - self.frameGeometry().topLeft()
        super().mousePressEvent(e)

    def mouseMoveEvent(self, e: QtGui.QMouseEvent):
        if self._drag_origin is not None and e.buttons() & QtCore.Qt.LeftButton:
            self.move(e.globalPos() - self._drag_origin)
        super().mouseMoveEvent(e)

    def mouseReleaseEvent(self, e: QtGui.QMouseEvent):
        self._drag_origin = None
        super().mouseReleaseEvent(e)

    def refresh(self):
        state = self.controller.state
        r = state.reading
        shown = visible_metrics(state)
        for key, row in self.rows.items():
            row.setVisible(key in shown)
        self.empty.setVisible(not shown)

        self.rows[CPU].value.setText(f"{r.cpu_percent:.0f}%")
        self.rows[RAM].value.setText(f"{r.ram_percent:.0f}%")
        if r.disk is not None:
            self.rows[DISK_USAGE].value.setText(
                f"{r.disk.percent:.0f}% ({r.disk.used_gib}/{r.disk.total_gib} GiB)"
            )
        if r.network is not None:
            self.rows[DOWN].value.setText(f"{r.network.down_mbps:.1f} Mb/s")
            self.rows[UP].value.setText(f"{r.network.up_mbps:.1f} Mb/s")
        if r.battery is not None:
            row = self.rows[BATTERY_LEVEL]
            row.set_color(formatting.battery_color(r.battery.percent))
            row.label.setText(f"Battery ({formatting.battery_state(r.battery.charging)})")
            row.value.setText(f"{r.battery.percent:.0f}%")


# ------------------------------- Preferences dialog -------------------------------

class PreferencesDialog(QtWidgets.QDialog):
    """Enable or disable the optional metric classes at runtime."""

    LABELS = {NETWORK: "Network throughput", DISK: "Disk usage", BATTERY: "Battery"}

    def __init__(self, config: MetricsConfig, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Preferences")
        form = QtWidgets.QFormLayout()
        self.checks: Dict[str, QtWidgets.QCheckBox] = {}
        for name in OPTIONAL_CLASSES:
            box = QtWidgets.QCheckBox(self.LABELS[name])
            box.setChecked(config.enabled(name))
            self.checks[name] = box
            form.addRow(box)

        btns = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        lay = QtWidgets.QVBoxLayout(self)
        lay.addLayout(form)
        lay.addWidget(btns)

    def config(self) -> MetricsConfig:
        return MetricsConfig(**{name: box.isChecked() for name, box in self.checks.items()})


# ------------------------------- Entry points -------------------------------

def _setup_logging():
    level = os.environ.get("SPARKLINE_MONITOR_LOG", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run(window_cls):
    _setup_logging()
    app = QtWidgets.QApplication(sys.argv)
    app.setStyle("Fusion")
    controller = MonitorController()
    w = window_cls(controller)
    controller.start()
    w.show()
    sys.exit(app.exec_())


def main():
    _run(MonitorWindow)


def main_widget():
    _run(CompactWindow)

