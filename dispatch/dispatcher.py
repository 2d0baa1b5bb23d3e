"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Accepts the day's VALID orders, resolves each one to its restaurant, asks the
path planner for a round trip from the delivery point, and aggregates every
move in input order. Orders are locked to DELIVERED only once the whole batch
has been routed, so a failure leaves every order of the batch untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from dispatch.state_machines.order_state import (
    OrderStateException,
    ensure_deliverable,
    transition_orders_to_delivered,
)
from orders.matching import RestaurantMatcher, RestaurantNotFound
from orders.models import Order, Restaurant
from routing.models import DroneMove, LngLat
from routing.route_service import NoPathFound

logger = logging.getLogger(__name__)

# Appleton Tower: the one physical drop-off point every trip starts and ends at
APPLETON_TOWER = LngLat(lng=-3.186874, lat=55.944494)

# failures that belong to one order; anything else is a bug and always propagates
ORDER_FAILURES = (RestaurantNotFound, NoPathFound, OrderStateException)


class PathPlanner(Protocol):
    def find_total_path(self, start: LngLat, restaurant: LngLat, order_no: str) -> List[DroneMove]:
        ...


@dataclass(frozen=True)
class OrderOutcome:
    """
    Result of routing one order: its moves, or the reason it could not be routed.
    """
    order_no: str
    movements: List[DroneMove] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def delivered(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RoutePlan:
    """
    Output of a routing run, one outcome per input order, input order kept.
    """
    outcomes: List[OrderOutcome]

    @property
    def movements(self) -> List[DroneMove]:
        moves: List[DroneMove] = []
        for outcome in self.outcomes:
            if outcome.delivered:
                moves.extend(outcome.movements)
        return moves

    @property
    def failures(self) -> List[OrderOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.delivered]


class RouteOrchestrator:
    """
    Drives restaurant resolution -> route computation -> status update -> aggregation.

    Single-threaded: one order is resolved and routed before the next begins.
    """

    def __init__(
        self,
        restaurants: Sequence[Restaurant],
        planner: PathPlanner,
        delivery_point: LngLat = APPLETON_TOWER,
    ):
        self.matcher = RestaurantMatcher(restaurants)
        self.planner = planner
        self.delivery_point = delivery_point

    def plan_routes(self, orders: Sequence[Order], *, isolate_failures: bool = False) -> RoutePlan:
        """
        Routes every order and commits DELIVERED for the routed ones.

        isolate_failures=False (default): the first failing order aborts the
        whole batch; nothing is returned and no status changes.
        isolate_failures=True: failing orders are reported in the plan and keep
        their status, the rest are committed.

        Orders already DELIVERED are routed again; callers must not pass a
        finished day back in unless they want its moves twice.
        """
        outcomes: List[OrderOutcome] = []
        routed: List[Order] = []

        for order in orders:
            try:
                movements = self._route_order(order)
            except ORDER_FAILURES as error:
                if not isolate_failures:
                    logger.error("Routing aborted at order %s: %s", order.order_no, error)
                    raise
                logger.warning("Order %s not routed: %s", order.order_no, error)
                outcomes.append(OrderOutcome(order_no=order.order_no, error=error))
                continue

            outcomes.append(OrderOutcome(order_no=order.order_no, movements=movements))
            routed.append(order)

        transition_orders_to_delivered(routed)
        logger.info("Routed %d of %d orders", len(routed), len(outcomes))
        return RoutePlan(outcomes=outcomes)

    def optimize_routes(self, orders: Sequence[Order]) -> List[DroneMove]:
        """
        All-or-nothing routing of a batch; returns every move in input order.
        """
        return self.plan_routes(orders).movements

    def _route_order(self, order: Order) -> List[DroneMove]:
        ensure_deliverable(order)
        restaurant_location = self.matcher.resolve(order)
        movements = list(
            self.planner.find_total_path(self.delivery_point, restaurant_location, order.order_no)
        )
        logger.debug("Order %s: %d moves", order.order_no, len(movements))
        return movements
