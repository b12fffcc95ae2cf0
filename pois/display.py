"""
Display state for the map layer

The map has one center marker, one radius overlay and one POI layer. Each
completed search replaces all three at once; nothing is merged across
searches.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from data_sources.models import Location
from .aggregation import CountsByCategory, counts_as_json
from .categories import CATEGORY_STYLES, CategorizedPoint


@dataclass(frozen=True)
class DisplayState:
    center: Location
    radius_m: float
    points: Tuple[CategorizedPoint, ...]
    counts: CountsByCategory

    def to_dict(self) -> Dict[str, Any]:
        return {
            "center": self.center.to_dict(),
            "radius_m": self.radius_m,
            "pois": [point.to_dict() for point in self.points],
            "counts": counts_as_json(self.counts),
            "styles": {category.value: style.to_dict() for category, style in CATEGORY_STYLES.items()},
        }


class DisplaySink:
    """Session-scoped holder of the current display state."""

    def __init__(self):
        self._current: Optional[DisplayState] = None

    @property
    def current(self) -> Optional[DisplayState]:
        return self._current

    def replace(self, state: DisplayState) -> None:
        self._current = state

    def clear(self) -> None:
        self._current = None
