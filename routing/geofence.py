#Purpose: Region geofencing logic for drone moves.
#Answers "is this point / this move allowed" against the day's regions:
#point inside a polygon (ray casting, boundary counts as inside)
#segment crossing a polygon edge
#the central-area rule (once back inside, a leg stays inside)
#Output: plain booleans the path search can prune on.
#No search, no HTTP.

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from routing.models import LngLat, NamedRegion

#moves have a fixed length in degrees
STEP_DISTANCE = 0.00015
#two points are "close" when nearer than one step
CLOSE_DISTANCE = 0.00015

#16 compass directions, 0 = east, counter-clockwise
COMPASS_ANGLES: Tuple[float, ...] = tuple(i * 22.5 for i in range(16))

_EPSILON = 1e-12


def distance_to(a: LngLat, b: LngLat) -> float:
    return math.hypot(a.lng - b.lng, a.lat - b.lat)


def is_close_to(a: LngLat, b: LngLat) -> bool:
    return distance_to(a, b) < CLOSE_DISTANCE


def next_position(start: LngLat, angle: float) -> LngLat:
    radians = math.radians(angle)
    return LngLat(
        lng=start.lng + STEP_DISTANCE * math.cos(radians),
        lat=start.lat + STEP_DISTANCE * math.sin(radians),
    )


def _edges(region: NamedRegion) -> List[Tuple[LngLat, LngLat]]:
    vertices = list(region.vertices)
    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices = vertices[:-1]
    return [(vertices[i], vertices[(i + 1) % len(vertices)]) for i in range(len(vertices))]


def _on_segment(point: LngLat, a: LngLat, b: LngLat) -> bool:
    cross = (b.lng - a.lng) * (point.lat - a.lat) - (b.lat - a.lat) * (point.lng - a.lng)
    if abs(cross) > _EPSILON:
        return False
    return (
        min(a.lng, b.lng) - _EPSILON <= point.lng <= max(a.lng, b.lng) + _EPSILON
        and min(a.lat, b.lat) - _EPSILON <= point.lat <= max(a.lat, b.lat) + _EPSILON
    )


def is_in_region(point: LngLat, region: NamedRegion) -> bool:
    """
    Ray casting; a point on the boundary is inside.
    """
    edges = _edges(region)
    if not edges:
        return False

    inside = False
    for a, b in edges:
        if _on_segment(point, a, b):
            return True
        #edge straddles the horizontal ray through point
        if (a.lat > point.lat) != (b.lat > point.lat):
            crossing_lng = a.lng + (point.lat - a.lat) * (b.lng - a.lng) / (b.lat - a.lat)
            if point.lng < crossing_lng:
                inside = not inside
    return inside


def _orientation(a: LngLat, b: LngLat, c: LngLat) -> int:
    value = (b.lat - a.lat) * (c.lng - b.lng) - (b.lng - a.lng) * (c.lat - b.lat)
    if abs(value) < _EPSILON:
        return 0
    return 1 if value > 0 else 2


def segments_intersect(p1: LngLat, p2: LngLat, q1: LngLat, q2: LngLat) -> bool:
    o1 = _orientation(p1, p2, q1)
    o2 = _orientation(p1, p2, q2)
    o3 = _orientation(q1, q2, p1)
    o4 = _orientation(q1, q2, p2)

    if o1 != o2 and o3 != o4:
        return True

    # collinear special cases
    if o1 == 0 and _on_segment(q1, p1, p2):
        return True
    if o2 == 0 and _on_segment(q2, p1, p2):
        return True
    if o3 == 0 and _on_segment(p1, q1, q2):
        return True
    if o4 == 0 and _on_segment(p2, q1, q2):
        return True
    return False


def crosses_region(start: LngLat, end: LngLat, region: NamedRegion) -> bool:
    return any(segments_intersect(start, end, a, b) for a, b in _edges(region))


@dataclass(frozen=True)
class Geofence:
    """
    The day's regions bundled for move checks.
    central_area may be None when the service publishes none.
    """
    no_fly_zones: Tuple[NamedRegion, ...]
    central_area: Optional[NamedRegion] = None

    @classmethod
    def build(cls, no_fly_zones: Sequence[NamedRegion], central_area: Optional[NamedRegion]) -> "Geofence":
        return cls(no_fly_zones=tuple(no_fly_zones), central_area=central_area)

    def in_no_fly_zone(self, point: LngLat) -> bool:
        return any(is_in_region(point, zone) for zone in self.no_fly_zones)

    def in_central_area(self, point: LngLat) -> bool:
        if self.central_area is None:
            return True
        return is_in_region(point, self.central_area)

    def is_move_allowed(self, start: LngLat, end: LngLat, *, locked_in_central: bool = False) -> bool:
        """
        locked_in_central: the leg has already re-entered the central area,
        so it must not leave it again.
        """
        if locked_in_central and not self.in_central_area(end):
            return False
        for zone in self.no_fly_zones:
            if is_in_region(end, zone) or crosses_region(start, end, zone):
                return False
        return True
