"""
Provider-facing records
Geographic points, geocoder results and raw Overpass elements
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 coordinate."""
    lat: float
    lon: float

    def __post_init__(self):
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"longitude out of range: {self.lon}")

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


@dataclass(frozen=True)
class Location:
    """Best geocoding match for an address."""
    point: GeoPoint
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {**self.point.to_dict(), "label": self.label}


@dataclass(frozen=True)
class SearchOptions:
    """Category toggles supplied with a search."""
    worship: bool = False
    schools: bool = False
    parks: bool = False
    daycare: bool = False

    def any_enabled(self) -> bool:
        return self.worship or self.schools or self.parks or self.daycare


@dataclass(frozen=True)
class RawEntity:
    """
    An Overpass element as returned with ``out center``.

    Nodes carry ``lat``/``lon``; ways and relations carry ``center``.
    The (type, id) pair is the only identity an element has.
    """
    type: str
    id: int
    lat: Optional[float] = None
    lon: Optional[float] = None
    center: Optional[GeoPoint] = None
    tags: Mapping[str, str] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return f"{self.type}/{self.id}"

    @classmethod
    def from_element(cls, element: Dict[str, Any]) -> "RawEntity":
        """
        Build from one entry of an Overpass JSON ``elements`` list.

        Raises:
            TypeError: element is not a JSON object
            ValueError: missing type or id, or unusable coordinates
        """
        if not isinstance(element, dict):
            raise TypeError(f"element must be an object, got {type(element).__name__}")
        if not element.get("type") or element.get("id") is None:
            raise ValueError("element has no type/id")

        center = None
        raw_center = element.get("center") or {}
        if raw_center.get("lat") is not None and raw_center.get("lon") is not None:
            center = GeoPoint(float(raw_center["lat"]), float(raw_center["lon"]))

        lat = element.get("lat")
        lon = element.get("lon")
        if lat is not None and lon is not None:
            # Range check only; the entity keeps plain floats
            point = GeoPoint(float(lat), float(lon))
            lat, lon = point.lat, point.lon
        else:
            lat = lon = None

        return cls(
            type=str(element["type"]),
            id=int(element["id"]),
            lat=lat,
            lon=lon,
            center=center,
            tags=dict(element.get("tags") or {}),
        )
