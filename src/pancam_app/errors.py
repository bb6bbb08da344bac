"""Error kinds raised by the kinematic and planning model."""
from __future__ import annotations


class PanCamError(Exception):
    """Base class for configuration and lookup failures."""


class DuplicateInstrumentId(PanCamError, ValueError):
    """An instrument with the same id is already registered."""


class UnknownInstrument(PanCamError, KeyError):
    """No instrument is registered under the requested id."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class InvalidFov(PanCamError, ValueError):
    """Optical parameters cannot produce a finite footprint."""


class UnknownPreset(PanCamError, KeyError):
    """No PTU preset pose exists under the requested name."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
