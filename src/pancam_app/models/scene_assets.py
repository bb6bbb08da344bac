"""Optional references to visual assets that resolve asynchronously."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from loguru import logger

DEFAULT_ASSET_NAMES = ("body", "masthead", "drill")


@dataclass(slots=True)
class SceneAssets:
    """Named scene nodes supplied by the renderer's asset loader.

    Every name starts pending. ``get`` returns ``None`` until the loader calls
    ``resolve``; a failed load stays absent and records the error. Consumers treat
    an absent asset as contributing nothing.
    """

    names: Iterable[str] = DEFAULT_ASSET_NAMES
    _nodes: Dict[str, Any] = field(default_factory=dict, init=False)
    _errors: Dict[str, str] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        self.names = tuple(self.names)

    def resolve(self, name: str, node: Any) -> None:
        if name not in self.names:
            logger.warning("Ignoring unexpected asset {}", name)
            return
        self._nodes[name] = node
        self._errors.pop(name, None)
        logger.info("Asset {} available", name)

    def fail(self, name: str, error: BaseException | str) -> None:
        self._errors[name] = str(error)
        logger.error("Failed to load asset {}: {}", name, error)

    def get(self, name: str) -> Optional[Any]:
        return self._nodes.get(name)

    def is_available(self, name: str) -> bool:
        return name in self._nodes

    def error(self, name: str) -> Optional[str]:
        return self._errors.get(name)

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(name for name in self.names if name not in self._nodes and name not in self._errors)

    @property
    def is_ready(self) -> bool:
        return all(name in self._nodes for name in self.names)
