"""Plan session: the single entry point the control surface drives."""
from __future__ import annotations

from dataclasses import replace
from typing import Optional

from loguru import logger

from ..config import DEFAULT_CONFIG, RigConfig
from ..models.instruments import InstrumentRegistry, InstrumentSpec, build_default_registry
from ..models.plan_state import InstrumentSettings, PanoramaRequest, PlanSessionState, SessionSnapshot
from ..models.ptu import PanTiltUnit, PTUState
from ..models.scene_assets import SceneAssets
from .planner import PanoramaPlanner, PlanResult

_REQUEST_FIELDS = {"start_deg", "stop_deg", "sample_count", "fixed_tilt_deg", "active_instrument_ids"}


class PlanSession:
    """Owns the PTU, the instrument registry and the accumulated plan.

    All mutation goes through the methods below. Numeric input is clamped to
    the configured limits, so interactive use never raises.
    """

    def __init__(
        self,
        registry: Optional[InstrumentRegistry] = None,
        config: RigConfig = DEFAULT_CONFIG,
        assets: Optional[SceneAssets] = None,
    ) -> None:
        self.config = config
        self.registry = registry if registry is not None else build_default_registry()
        self.assets = assets if assets is not None else SceneAssets()
        self.ptu = PanTiltUnit(self.registry, config)
        self.state = PlanSessionState()
        for spec in self.registry:
            self._init_settings(spec)
        self.planner = PanoramaPlanner(self.ptu, depth_for=self.state.far_distance)

    # ------------------------------------------------------------------
    def register_instrument(self, spec: InstrumentSpec) -> None:
        self.registry.register(spec)
        self._init_settings(spec)

    def _init_settings(self, spec: InstrumentSpec) -> InstrumentSettings:
        # The slider range only bounds user edits; the configured far distance is kept as is.
        settings = InstrumentSettings(far_distance=spec.far_distance)
        self.state.settings[spec.instrument_id] = settings
        return settings

    def settings_for(self, instrument_id: str) -> InstrumentSettings:
        """Settings for a registered instrument, created on first use.

        Raises:
            UnknownInstrument: If ``instrument_id`` is not registered.
        """
        spec = self.registry.get(instrument_id)
        settings = self.state.settings.get(instrument_id)
        if settings is None:
            settings = self._init_settings(spec)
        return settings

    def set_far_distance(self, instrument_id: str, distance: float) -> float:
        settings = self.settings_for(instrument_id)
        settings.far_distance = self.config.far_distance_range.clamp(
            float(distance), name=f"{instrument_id} far distance"
        )
        logger.debug("{} far distance set to {:.2f} m", instrument_id, settings.far_distance)
        return settings.far_distance

    def set_frustum_visible(self, instrument_id: str, visible: bool) -> None:
        self.settings_for(instrument_id).show_frustum = bool(visible)

    # ------------------------------------------------------------------
    @property
    def request(self) -> PanoramaRequest:
        return self.state.current_request

    def apply_request_change(self, **changes) -> PanoramaRequest:
        """Update fields of the current request, clamping numeric values.

        Changing ``fixed_tilt_deg`` also moves the PTU tilt axis, as the tilt
        control is shared between the PTU and the planner.
        """
        unknown = set(changes) - _REQUEST_FIELDS
        if unknown:
            raise TypeError(f"Unknown request field(s): {', '.join(sorted(unknown))}")

        limits = self.config.start_stop_limits
        if "start_deg" in changes:
            changes["start_deg"] = limits.clamp(float(changes["start_deg"]), name="Pan start")
        if "stop_deg" in changes:
            changes["stop_deg"] = limits.clamp(float(changes["stop_deg"]), name="Pan stop")
        if "sample_count" in changes:
            changes["sample_count"] = self.config.clamp_sample_count(changes["sample_count"])
        if "fixed_tilt_deg" in changes:
            changes["fixed_tilt_deg"] = self.ptu.set_tilt(changes["fixed_tilt_deg"]).tilt_deg
        if "active_instrument_ids" in changes:
            changes["active_instrument_ids"] = frozenset(changes["active_instrument_ids"])

        self.state.current_request = replace(self.state.current_request, **changes)
        logger.debug("Request updated: {}", self.state.current_request)
        return self.state.current_request

    def set_instrument_active(self, instrument_id: str, active: bool) -> PanoramaRequest:
        ids = set(self.request.active_instrument_ids)
        if active:
            ids.add(instrument_id)
        else:
            ids.discard(instrument_id)
        return self.apply_request_change(active_instrument_ids=ids)

    # ------------------------------------------------------------------
    def set_pan(self, angle_deg: float) -> PTUState:
        return self.ptu.set_pan(angle_deg)

    def set_tilt(self, angle_deg: float) -> PTUState:
        state = self.ptu.set_tilt(angle_deg)
        self._sync_request_tilt()
        return state

    def apply_preset(self, name: str) -> PTUState:
        state = self.ptu.apply_preset(name)
        self._sync_request_tilt()
        return state

    def home(self) -> PTUState:
        state = self.ptu.home()
        self._sync_request_tilt()
        return state

    def _sync_request_tilt(self) -> None:
        if self.request.fixed_tilt_deg != self.ptu.tilt_deg:
            self.state.current_request = replace(self.request, fixed_tilt_deg=self.ptu.tilt_deg)

    # ------------------------------------------------------------------
    def plan(self) -> PlanResult:
        """Run the current request and append its tiles to the plan."""
        result = self.planner.plan(self.request)
        self.state.extend(list(result.tiles))
        return result

    def clear_plan(self) -> None:
        self.state.reset()
        logger.info("Panorama plan cleared")

    @property
    def tiles(self):
        return tuple(self.state.tiles)

    def snapshot(self) -> SessionSnapshot:
        visible = frozenset(key for key, value in self.state.settings.items() if value.show_frustum)
        return SessionSnapshot(
            ptu=self.ptu.state,
            rig_pose=self.ptu.rig_pose(),
            tiles=tuple(self.state.tiles),
            visible_frustums=visible,
            request=self.request,
        )

