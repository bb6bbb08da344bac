"""Fixed-tilt panorama planning."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from loguru import logger

from ..models.coverage import CoverageTile, make_tile
from ..models.plan_state import PanoramaRequest
from ..models.ptu import PanTiltUnit, pan_pose, world_pose_of


def capture_angles(start_deg: float, stop_deg: float, sample_count: int) -> List[float]:
    """Pan angles for a sweep from ``start_deg`` to ``stop_deg``.

    Counts below two are raised to two. With two samples a sweep that does not
    move yields a single capture. Otherwise the angles are evenly spaced with both
    endpoints included, the last one being exactly ``stop_deg``.
    """
    count = max(2, int(sample_count))
    if count == 2:
        if stop_deg == start_deg:
            return [float(start_deg)]
        return [float(start_deg), float(stop_deg)]

    step = (stop_deg - start_deg) / (count - 1)
    angles = [start_deg + k * step for k in range(count - 1)]
    angles.append(stop_deg)
    return [float(angle) for angle in angles]


@dataclass(slots=True, frozen=True)
class PlanResult:
    """Outcome of one planning pass."""

    capture_angles: Tuple[float, ...]
    tiles: Tuple[CoverageTile, ...]

    @property
    def tiles_per_capture(self) -> int:
        if not self.capture_angles:
            return 0
        return len(self.tiles) // len(self.capture_angles)


class PanoramaPlanner:
    """Sweep the PTU through a request and collect one tile per active instrument.

    ``depth_for`` maps an instrument id to the distance of interest; when it
    returns ``None`` the instrument's configured far distance is used.
    """

    def __init__(
        self,
        ptu: PanTiltUnit,
        depth_for: Optional[Callable[[str], Optional[float]]] = None,
    ) -> None:
        self.ptu = ptu
        self.depth_for = depth_for

    def plan(self, request: PanoramaRequest) -> PlanResult:
        config = self.ptu.config
        count = config.clamp_sample_count(max(2, request.sample_count))
        start = config.start_stop_limits.clamp(request.start_deg, name="Pan start")
        stop = config.start_stop_limits.clamp(request.stop_deg, name="Pan stop")
        angles = capture_angles(start, stop, count)
        specs = self.ptu.registry.list_active(request.active_instrument_ids)

        self.ptu.set_tilt(request.fixed_tilt_deg)
        tiles: List[CoverageTile] = []
        for angle in angles:
            state = self.ptu.set_pan(angle)
            logger.debug("Capture at pan {:.3f} deg, tilt {:.3f} deg", state.pan_deg, state.tilt_deg)
            facing = pan_pose(state, config).position
            for spec in specs:
                depth = self._depth(spec.instrument_id, spec.far_distance)
                pose = world_pose_of(spec, state, config)
                tiles.append(make_tile(spec, pose, depth, facing, state.pan_deg, state.tilt_deg))

        self.ptu.set_pan(0.0)
        logger.info(
            "Planned {} capture(s) from {} to {} deg for {} instrument(s): {} tile(s)",
            len(angles),
            start,
            stop,
            len(specs),
            len(tiles),
        )
        return PlanResult(tuple(angles), tuple(tiles))

    def _depth(self, instrument_id: str, default: float) -> float:
        if self.depth_for is None:
            return default
        depth = self.depth_for(instrument_id)
        return default if depth is None else depth
