"""
Purpose: Geometry-level data structures shared by routing and dispatch.
What it does:
- LngLat: a (longitude, latitude) point, in degrees
- NamedRegion: a named closed polygon (central area, no-fly zones)
- DroneMove: one leg of a drone flight, tagged with the order it serves

Rule: No path search here. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

# angle used by moves that stay in place
HOVER_ANGLE = 999.0


@dataclass(frozen=True)
class LngLat:
    lng: float
    lat: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LngLat:
        return cls(lng=float(data["lng"]), lat=float(data["lat"]))

    def as_pair(self) -> Tuple[float, float]:
        """[lng, lat] ordering, as GeoJSON expects."""
        return (self.lng, self.lat)


@dataclass(frozen=True)
class NamedRegion:
    """
    A closed polygon. The vertex list may or may not repeat the first vertex
    at the end; geofence code treats both the same.
    """
    name: str
    vertices: Tuple[LngLat, ...]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> NamedRegion:
        return cls(
            name=data.get("name", ""),
            vertices=tuple(LngLat.from_dict(vertex) for vertex in data["vertices"]),
        )


@dataclass(frozen=True)
class DroneMove:
    """
    One discrete leg of a round trip.

    tick numbers the moves of one round trip from 0; angle is in degrees
    (0 = east, counter-clockwise) or HOVER_ANGLE.
    """
    order_no: str
    from_position: LngLat
    angle: float
    to_position: LngLat
    tick: int = 0

    @property
    def is_hover(self) -> bool:
        return self.angle == HOVER_ANGLE
