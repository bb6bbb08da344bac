"""Camera instrument specifications and the instrument registry."""
from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from loguru import logger

from ..errors import DuplicateInstrumentId, InvalidFov, UnknownInstrument


@dataclass(slots=True, frozen=True)
class DisplayStyle:
    """How the rendering side should draw tiles for an instrument."""

    color: int = 0x886666
    opacity: float = 0.4
    double_sided: bool = True

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.color >> 16) & 0xFF, (self.color >> 8) & 0xFF, self.color & 0xFF


@dataclass(slots=True, frozen=True)
class InstrumentSpec:
    """Immutable optical and mounting description of one camera.

    Attributes
    ----------
    instrument_id:
        Unique registry key, e.g. ``"lwac"``.
    vertical_fov_deg:
        Full vertical field of view in degrees.
    aspect_ratio:
        Width over height of the image.
    near_distance, far_distance:
        Clip distances in metres. ``far_distance`` is the default distance of
        interest used to size coverage tiles.
    mount_position:
        Offset from the tilt stage origin, metres, in the tilted frame.
    mount_yaw_rad:
        Fixed toe-in about the local vertical axis. Negative turns the view axis
        toward +X (used for the left camera of a stereo pair).
    label:
        Human readable name for the control panel.
    style:
        Tile display style.
    """

    instrument_id: str
    vertical_fov_deg: float
    aspect_ratio: float
    near_distance: float
    far_distance: float
    mount_position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    mount_yaw_rad: float = 0.0
    label: Optional[str] = None
    style: DisplayStyle = field(default_factory=DisplayStyle)

    @property
    def display_name(self) -> str:
        return self.label or self.instrument_id.upper()


def validate_spec(spec: InstrumentSpec) -> None:
    """Reject optical parameters that cannot describe a real camera.

    Raises:
        InvalidFov: If the field of view, aspect ratio or clip distances are
            unusable.
    """
    if not (0.0 < spec.vertical_fov_deg < 180.0) or not math.isfinite(spec.vertical_fov_deg):
        raise InvalidFov(
            f"Instrument {spec.instrument_id!r}: vertical FOV must be in (0, 180) degrees, "
            f"got {spec.vertical_fov_deg}"
        )
    if not spec.aspect_ratio > 0.0:
        raise InvalidFov(f"Instrument {spec.instrument_id!r}: aspect ratio must be positive")
    if not 0.0 < spec.near_distance < spec.far_distance:
        raise InvalidFov(
            f"Instrument {spec.instrument_id!r}: expected 0 < near < far, "
            f"got near={spec.near_distance}, far={spec.far_distance}"
        )


WAC_TOE_IN_RAD = 0.08

DEFAULT_INSTRUMENTS: Tuple[InstrumentSpec, ...] = (
    InstrumentSpec(
        "lwac",
        vertical_fov_deg=38.0,
        aspect_ratio=1.0,
        near_distance=1.0,
        far_distance=2.0,
        mount_position=(-0.25, 0.155, -0.02),
        mount_yaw_rad=-WAC_TOE_IN_RAD,
        label="LWAC",
        style=DisplayStyle(color=0x886666),
    ),
    InstrumentSpec(
        "rwac",
        vertical_fov_deg=38.0,
        aspect_ratio=1.0,
        near_distance=1.0,
        far_distance=2.0,
        mount_position=(0.25, 0.155, -0.02),
        mount_yaw_rad=WAC_TOE_IN_RAD,
        label="RWAC",
        style=DisplayStyle(color=0x668866),
    ),
    InstrumentSpec(
        "hrc",
        vertical_fov_deg=4.88,
        aspect_ratio=1.0,
        near_distance=0.98,
        far_distance=2.02,
        mount_position=(0.154, 0.155, -0.02),
        label="HRC",
        style=DisplayStyle(color=0x666688),
    ),
)


class InstrumentRegistry:
    """Ordered table of instruments keyed by id.

    Registration order is preserved and defines the order in which tiles for
    one capture position are produced.
    """

    def __init__(self, specs: Iterable[InstrumentSpec] = ()) -> None:
        self._specs: Dict[str, InstrumentSpec] = {}
        for spec in specs:
            self.register(spec)

    def register(self, spec: InstrumentSpec) -> None:
        if spec.instrument_id in self._specs:
            raise DuplicateInstrumentId(f"Instrument {spec.instrument_id!r} is already registered")
        validate_spec(spec)
        self._specs[spec.instrument_id] = spec
        logger.info("Registered instrument {}", spec.instrument_id)

    def get(self, instrument_id: str) -> InstrumentSpec:
        try:
            return self._specs[instrument_id]
        except KeyError:
            raise UnknownInstrument(f"Unknown instrument {instrument_id!r}") from None

    def list_active(self, instrument_ids: Iterable[str]) -> List[InstrumentSpec]:
        """Return specs for ``instrument_ids`` in registration order.

        Ids that are not (yet) registered contribute nothing.
        """
        wanted = set(instrument_ids)
        missing = wanted.difference(self._specs)
        if missing:
            logger.warning("Skipping unregistered instruments: {}", ", ".join(sorted(missing)))
        return [spec for key, spec in self._specs.items() if key in wanted]

    @property
    def ids(self) -> List[str]:
        return list(self._specs)

    def __contains__(self, instrument_id: object) -> bool:
        return instrument_id in self._specs

    def __iter__(self) -> Iterator[InstrumentSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


def build_default_registry() -> InstrumentRegistry:
    return InstrumentRegistry(DEFAULT_INSTRUMENTS)
