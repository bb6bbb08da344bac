"""Control panel for the PTU, the instruments and the panorama planner."""
from __future__ import annotations

from typing import Dict

from loguru import logger
from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QDoubleSpinBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from ..config import AxisLimits
from ..planning.session import PlanSession
from .theme import style_color

PRESET_LABELS = {
    "pct_rwac": "RWAC PCT",
    "pct_lwac": "LWAC PCT",
    "park": "Park PanCam",
    "home": "Home PTU",
}


def _angle_spin(limits: AxisLimits, step: float = 0.5) -> QDoubleSpinBox:
    spin = QDoubleSpinBox()
    spin.setRange(limits.min_value, limits.max_value)
    spin.setDecimals(2)
    spin.setSingleStep(step)
    spin.setSuffix(" deg")
    spin.setKeyboardTracking(False)
    return spin


class ControlPanel(QWidget):
    """Widgets bound to a :class:`PlanSession`.

    Widgets only call session entry points; ``refresh`` copies the session back
    into the widgets after every action, so presets and clearing are reflected.
    """

    stateChanged = pyqtSignal()

    def __init__(self, session: PlanSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.session = session
        self._refreshing = False
        self.far_fields: Dict[str, QDoubleSpinBox] = {}
        self.frustum_boxes: Dict[str, QCheckBox] = {}
        self.use_boxes: Dict[str, QCheckBox] = {}
        self.preset_buttons: Dict[str, QPushButton] = {}

        layout = QVBoxLayout(self)
        layout.addWidget(self._build_ptu_group())
        layout.addWidget(self._build_camera_group())
        layout.addWidget(self._build_planner_group())
        layout.addStretch(1)
        self.refresh()
        logger.info("Control panel initialised")

    # PTU ---------------------------------------------------------------------
    def _build_ptu_group(self) -> QGroupBox:
        config = self.session.config
        group = QGroupBox("PTU Controls")
        form = QFormLayout(group)

        self.pan_field = _angle_spin(config.pan_limits)
        self.pan_field.valueChanged.connect(self._on_pan_changed)
        self.tilt_field = _angle_spin(config.tilt_limits)
        self.tilt_field.valueChanged.connect(self._on_tilt_changed)
        form.addRow("Pan", self.pan_field)
        form.addRow("Tilt", self.tilt_field)

        buttons = QHBoxLayout()
        for name in self.session.ptu.preset_names:
            button = QPushButton(PRESET_LABELS.get(name, name))
            button.clicked.connect(lambda _checked=False, preset=name: self._on_preset_clicked(preset))
            self.preset_buttons[name] = button
            buttons.addWidget(button)
        form.addRow(buttons)
        return group

    # Cameras -----------------------------------------------------------------
    def _build_camera_group(self) -> QGroupBox:
        far_range = self.session.config.far_distance_range
        group = QGroupBox("Camera Controls")
        form = QFormLayout(group)
        for spec in self.session.registry:
            far = QDoubleSpinBox()
            far.setRange(far_range.min_value, far_range.max_value)
            far.setSingleStep(0.1)
            far.setDecimals(2)
            far.setSuffix(" m")
            far.setKeyboardTracking(False)
            far.valueChanged.connect(
                lambda value, instrument_id=spec.instrument_id: self._on_far_changed(instrument_id, value)
            )
            self.far_fields[spec.instrument_id] = far
            form.addRow(f"{spec.display_name} distance area", far)

            show = QCheckBox(f"Show {spec.display_name}")
            show.toggled.connect(
                lambda checked, instrument_id=spec.instrument_id: self._on_frustum_toggled(instrument_id, checked)
            )
            self.frustum_boxes[spec.instrument_id] = show
            form.addRow("", show)
        return group

    # Planner -----------------------------------------------------------------
    def _build_planner_group(self) -> QGroupBox:
        config = self.session.config
        group = QGroupBox("Pan Panorama Planner (Fixed Tilt)")
        form = QFormLayout(group)

        self.start_field = _angle_spin(config.start_stop_limits)
        self.start_field.valueChanged.connect(lambda value: self._on_request_changed(start_deg=value))
        self.stop_field = _angle_spin(config.start_stop_limits)
        self.stop_field.valueChanged.connect(lambda value: self._on_request_changed(stop_deg=value))
        self.count_field = QSpinBox()
        self.count_field.setRange(*config.sample_count_range)
        self.count_field.setKeyboardTracking(False)
        self.count_field.valueChanged.connect(lambda value: self._on_request_changed(sample_count=value))
        self.plan_tilt_field = _angle_spin(config.tilt_limits)
        self.plan_tilt_field.valueChanged.connect(lambda value: self._on_request_changed(fixed_tilt_deg=value))

        form.addRow("Pan Start", self.start_field)
        form.addRow("Pan Stop", self.stop_field)
        form.addRow("Number of Images", self.count_field)
        form.addRow("Tilt", self.plan_tilt_field)

        for spec in self.session.registry:
            box = QCheckBox(f"Use {spec.display_name}")
            box.setStyleSheet(f"color: {style_color(spec.style).lighter(160).name()};")
            box.toggled.connect(
                lambda checked, instrument_id=spec.instrument_id: self._on_use_toggled(instrument_id, checked)
            )
            self.use_boxes[spec.instrument_id] = box
            form.addRow("", box)

        self.plan_button = QPushButton("Plan Pano")
        self.plan_button.clicked.connect(self._on_plan_clicked)
        self.clear_button = QPushButton("Clear Pano Plan")
        self.clear_button.clicked.connect(self._on_clear_clicked)
        buttons = QHBoxLayout()
        buttons.addWidget(self.plan_button)
        buttons.addWidget(self.clear_button)
        form.addRow(buttons)

        self.tile_count_label = QLabel()
        form.addRow("Tiles", self.tile_count_label)
        return group

    # ------------------------------------------------------------------
    # Handlers
    def _on_pan_changed(self, value: float) -> None:
        if not self._refreshing:
            self.session.set_pan(value)
            self._changed()

    def _on_tilt_changed(self, value: float) -> None:
        if not self._refreshing:
            self.session.set_tilt(value)
            self._changed()

    def _on_preset_clicked(self, name: str) -> None:
        self.session.apply_preset(name)
        self._changed()

    def _on_far_changed(self, instrument_id: str, value: float) -> None:
        if not self._refreshing:
            self.session.set_far_distance(instrument_id, value)
            self._changed()

    def _on_frustum_toggled(self, instrument_id: str, checked: bool) -> None:
        if not self._refreshing:
            self.session.set_frustum_visible(instrument_id, checked)
            self._changed()

    def _on_request_changed(self, **changes) -> None:
        if not self._refreshing:
            self.session.apply_request_change(**changes)
            self._changed()

    def _on_use_toggled(self, instrument_id: str, checked: bool) -> None:
        if not self._refreshing:
            self.session.set_instrument_active(instrument_id, checked)
            self._changed()

    def _on_plan_clicked(self) -> None:
        self.session.plan()
        self._changed()

    def _on_clear_clicked(self) -> None:
        self.session.clear_plan()
        self._changed()

    def _changed(self) -> None:
        self.refresh()
        self.stateChanged.emit()

    # ------------------------------------------------------------------
    def refresh(self) -> None:
        """Copy the session state into the widgets without re-entering handlers."""
        self._refreshing = True
        try:
            ptu = self.session.ptu.state
            request = self.session.request
            self.pan_field.setValue(ptu.pan_deg)
            self.tilt_field.setValue(ptu.tilt_deg)
            self.start_field.setValue(request.start_deg)
            self.stop_field.setValue(request.stop_deg)
            self.count_field.setValue(request.sample_count)
            self.plan_tilt_field.setValue(request.fixed_tilt_deg)
            for instrument_id, far in self.far_fields.items():
                settings = self.session.state.settings[instrument_id]
                far.setValue(settings.far_distance)
                self.frustum_boxes[instrument_id].setChecked(settings.show_frustum)
            for instrument_id, box in self.use_boxes.items():
                box.setChecked(instrument_id in request.active_instrument_ids)
            self.tile_count_label.setText(str(self.session.state.tile_count))
        finally:
            self._refreshing = False
