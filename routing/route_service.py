#Purpose: Route computation for downstream use.
#Returns the actual flight path a drone flies for one order:
#base -> restaurant, hover (pickup), restaurant -> base, hover (drop-off)
#Uses routing.geofence for every legality check.
#It is the "I need an actual route" module, while geofence.py is "is this move allowed".

from __future__ import annotations

import heapq
import itertools
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from routing.geofence import (
    COMPASS_ANGLES,
    STEP_DISTANCE,
    Geofence,
    distance_to,
    is_close_to,
    next_position,
)
from routing.models import HOVER_ANGLE, DroneMove, LngLat, NamedRegion

logger = logging.getLogger(__name__)

# (from, angle, to) before an order number is attached
Leg = Tuple[LngLat, float, LngLat]

#positions closer than this share a search cell
_CELL_SIZE = STEP_DISTANCE / 2


class NoPathFound(Exception):
    """Raised when the search cannot reach the target within its expansion budget."""
    pass


class DronePathPlanner:
    """
    Compass-direction A* planner.

    Every move is STEP_DISTANCE long along one of 16 compass angles, ends
    outside every no-fly zone, never cuts a no-fly edge, and never leaves the
    central area once a leg has re-entered it.

    Round trips are cached per (start, restaurant) pair: every order served by
    the same restaurant flies the same geometry, tagged with its own order number.
    """

    def __init__(
        self,
        no_fly_zones: Sequence[NamedRegion],
        central_area: Optional[NamedRegion],
        *,
        max_expansions: int = 200_000,
        heuristic_weight: float = 1.2,
    ):
        if max_expansions <= 0:
            raise ValueError("max_expansions must be > 0")
        self.geofence = Geofence.build(no_fly_zones, central_area)
        self.max_expansions = max_expansions
        self.heuristic_weight = heuristic_weight
        self._round_trips: Dict[Tuple[LngLat, LngLat], List[Leg]] = {}

    # --- Public API ---

    def find_path(self, start: LngLat, goal: LngLat, order_no: str) -> List[DroneMove]:
        """
        One leg, start -> a position close to goal. Empty when start is already close.
        """
        return _tag(self._search(start, goal), order_no)

    def find_total_path(self, start: LngLat, restaurant: LngLat, order_no: str) -> List[DroneMove]:
        """
        Round trip for one order. The first move starts at `start`, the last
        move is a hover close to `start`.
        """
        key = (start, restaurant)
        legs = self._round_trips.get(key)
        if legs is None:
            legs = self._plan_round_trip(start, restaurant)
            self._round_trips[key] = legs
            logger.debug("Planned round trip to %s: %d moves", restaurant, len(legs))
        return _tag(legs, order_no)

    # --- Internal helpers ---

    def _plan_round_trip(self, start: LngLat, restaurant: LngLat) -> List[Leg]:
        outbound = self._search(start, restaurant)
        pickup = outbound[-1][2] if outbound else start

        inbound = self._search(pickup, start)
        drop_off = inbound[-1][2] if inbound else pickup

        return (
            outbound
            + [(pickup, HOVER_ANGLE, pickup)]
            + inbound
            + [(drop_off, HOVER_ANGLE, drop_off)]
        )

    def _search(self, start: LngLat, goal: LngLat) -> List[Leg]:
        if is_close_to(start, goal):
            return []

        geofence = self.geofence
        counter = itertools.count()

        #node: (position, parent node id, angle from parent, cost, has been outside central)
        nodes: List[Tuple[LngLat, int, float, int, bool]] = []
        best_cost: Dict[Tuple[int, int, bool], int] = {}
        closed = set()
        frontier: List[Tuple[float, int, int]] = []

        def push(position: LngLat, parent: int, angle: float, cost: int, been_outside: bool) -> None:
            key = _cell(position, been_outside)
            if cost >= best_cost.get(key, math.inf):
                return
            best_cost[key] = cost
            nodes.append((position, parent, angle, cost, been_outside))
            estimate = cost + self.heuristic_weight * distance_to(position, goal) / STEP_DISTANCE
            heapq.heappush(frontier, (estimate, next(counter), len(nodes) - 1))

        push(start, -1, HOVER_ANGLE, 0, not geofence.in_central_area(start))
        expansions = 0

        while frontier:
            _, _, node_id = heapq.heappop(frontier)
            position, _, _, cost, been_outside = nodes[node_id]
            key = _cell(position, been_outside)
            if key in closed:
                continue
            closed.add(key)

            if is_close_to(position, goal):
                return _reconstruct(nodes, node_id)

            expansions += 1
            if expansions > self.max_expansions:
                break

            locked = been_outside and geofence.in_central_area(position)
            for angle in COMPASS_ANGLES:
                candidate = next_position(position, angle)
                if not geofence.is_move_allowed(position, candidate, locked_in_central=locked):
                    continue
                push(
                    candidate,
                    node_id,
                    angle,
                    cost + 1,
                    been_outside or not geofence.in_central_area(candidate),
                )

        raise NoPathFound(
            f"No path from ({start.lng}, {start.lat}) to ({goal.lng}, {goal.lat}) "
            f"after {expansions} expansions"
        )


def _cell(position: LngLat, been_outside: bool) -> Tuple[int, int, bool]:
    return (round(position.lng / _CELL_SIZE), round(position.lat / _CELL_SIZE), been_outside)


def _reconstruct(nodes: List[Tuple[LngLat, int, float, int, bool]], node_id: int) -> List[Leg]:
    legs: List[Leg] = []
    while True:
        position, parent, angle, _, _ = nodes[node_id]
        if parent < 0:
            break
        legs.append((nodes[parent][0], angle, position))
        node_id = parent
    legs.reverse()
    return legs


def _tag(legs: List[Leg], order_no: str) -> List[DroneMove]:
    return [
        DroneMove(order_no=order_no, from_position=origin, angle=angle, to_position=target, tick=tick)
        for tick, (origin, angle, target) in enumerate(legs)
    ]
