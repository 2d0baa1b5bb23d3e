"""
Purpose: The day pipeline (single entry point for a planning run).
What it does:

Sequences the run end-to-end:

- liveness check against the REST service
- one snapshot fetch (restaurants, orders, central area, no-fly zones)
- order validation; only VALID orders go on
- route orchestration (dispatch.RouteOrchestrator)
- the three output artifacts

Every failure before the write step propagates and nothing is written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from datasource.rest_client import DaySnapshot, RestClient, ServiceError
from dispatch.dispatcher import PathPlanner, RouteOrchestrator
from orders.models import Order
from orders.validation import OrderValidator, validate_orders
from routing.models import DroneMove
from routing.route_service import DronePathPlanner

from .config import Settings, default_settings
from .writers import ArtifactPaths, write_day_artifacts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayResult:
    snapshot: DaySnapshot
    valid_orders: List[Order]
    moves: List[DroneMove]
    artifacts: ArtifactPaths


def build_planner(snapshot: DaySnapshot, settings: Settings) -> DronePathPlanner:
    return DronePathPlanner(
        snapshot.no_fly_zones,
        snapshot.central_area,
        max_expansions=settings.planner_max_expansions,
    )


def run_day(
    date: str,
    client: RestClient,
    settings: Optional[Settings] = None,
    *,
    planner: Optional[PathPlanner] = None,
    validator: Optional[OrderValidator] = None,
) -> DayResult:
    """
    Plans one day. `client` is anything with the RestClient methods
    (is_alive, fetch_snapshot); tests pass a fake.
    """
    settings = settings or default_settings()

    # 1. Service must be up before we fetch anything.
    if not client.is_alive():
        raise ServiceError("Service is not responding")

    # 2. One snapshot for the whole run.
    snapshot = client.fetch_snapshot(date)

    # 3. Validate, keep input order.
    valid_orders = validate_orders(snapshot.orders, snapshot.restaurants, validator)

    # 4. Route the valid subset; statuses flip to DELIVERED on the snapshot's own orders.
    planner = planner or build_planner(snapshot, settings)
    orchestrator = RouteOrchestrator(snapshot.restaurants, planner)
    moves = orchestrator.optimize_routes(valid_orders)
    logger.info("Planned %d moves for %d orders", len(moves), len(valid_orders))

    # 5. Persist.
    artifacts = write_day_artifacts(settings.output_dir, date, snapshot.orders, moves)

    return DayResult(snapshot=snapshot, valid_orders=valid_orders, moves=moves, artifacts=artifacts)
