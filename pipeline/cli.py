"""
Command line entry point for the drone delivery day planner.

Usage:
    drone-planner 2023-09-01 https://example-rest-service.net
    python -m pipeline 2023-09-01 https://example-rest-service.net

Exit status: 0 on success, 2 on bad arguments, 1 on any other failure.
"""

import argparse
import logging
import re
import sys
from datetime import date
from typing import List, Optional, Tuple

from datasource.rest_client import RestClient, ServiceError
from dispatch.state_machines.order_state import OrderStateException
from orders.matching import RestaurantNotFound
from routing.route_service import NoPathFound

from .config import Settings
from .errors import ArgumentError
from .runner import run_day

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drone-planner",
        description="Plan one day of drone pizza deliveries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output (in DRONE_OUTPUT_DIR, default ./resultfiles):
  deliveries-DATE.json   outcome per order
  flightpath-DATE.json   every drone move
  drone-DATE.geojson     the day's flight as a LineString
        """
    )
    parser.add_argument("date", help="Day to plan, YYYY-MM-DD")
    parser.add_argument("url", help="Base URL of the REST service, must start with https://")
    return parser


def validate_arguments(day: str, url: str) -> Tuple[str, str]:
    if not DATE_PATTERN.match(day):
        raise ArgumentError("Date error: Date must be in YYYY-MM-DD format")
    try:
        date.fromisoformat(day)
    except ValueError:
        raise ArgumentError(f"Date error: {day} is not a calendar date") from None
    if not url.startswith("https://"):
        raise ArgumentError("URL error: URL must begin with 'https://'")
    return day, url


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as error:
        logging.basicConfig(level=logging.INFO)
        logger.error("Configuration error: %s", error)
        return 1

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        day, url = validate_arguments(args.date, args.url)
    except ArgumentError as error:
        logger.error("%s", error)
        return 2

    client = RestClient(url, timeout=settings.http_timeout_seconds)
    try:
        result = run_day(day, client, settings)
    except ServiceError as error:
        logger.error("Service error: %s", error)
        return 1
    except (RestaurantNotFound, NoPathFound, OrderStateException) as error:
        logger.error("Planning failed, no output written: %s", error)
        return 1
    except OSError as error:
        logger.error("Could not write output: %s", error)
        return 1

    logger.info(
        "Done: %d orders delivered, results in %s",
        len(result.valid_orders), result.artifacts.deliveries.parent,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
