"""Panorama request and plan session state objects."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from .coverage import CoverageTile
from .ptu import Pose, PTUState


@dataclass(slots=True, frozen=True)
class PanoramaRequest:
    """A fixed-tilt pan sweep. Start/stop in degrees, both endpoints captured."""

    start_deg: float = 0.0
    stop_deg: float = 0.0
    sample_count: int = 2
    fixed_tilt_deg: float = 0.0
    active_instrument_ids: FrozenSet[str] = frozenset()


@dataclass(slots=True)
class InstrumentSettings:
    """UI-bound per-instrument settings."""

    far_distance: float
    show_frustum: bool = False


@dataclass(slots=True)
class PlanSessionState:
    """Current request plus tiles accumulated across plan passes (capture order)."""

    current_request: PanoramaRequest = field(default_factory=PanoramaRequest)
    tiles: List[CoverageTile] = field(default_factory=list)
    settings: Dict[str, InstrumentSettings] = field(default_factory=dict)

    def reset(self) -> None:
        """Empty the tile collection and restore request defaults, keeping tilt."""
        self.current_request = PanoramaRequest(fixed_tilt_deg=self.current_request.fixed_tilt_deg)
        self.tiles.clear()

    def extend(self, tiles: List[CoverageTile]) -> None:
        self.tiles.extend(tiles)

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    def far_distance(self, instrument_id: str) -> Optional[float]:
        settings = self.settings.get(instrument_id)
        return None if settings is None else settings.far_distance


@dataclass(slots=True, frozen=True, eq=False)
class SessionSnapshot:
    """Read-only view handed to the render loop once per frame."""

    ptu: PTUState
    rig_pose: Pose
    tiles: Tuple[CoverageTile, ...]
    visible_frustums: FrozenSet[str]
    request: PanoramaRequest
