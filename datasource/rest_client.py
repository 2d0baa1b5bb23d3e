#Purpose: The REST service "adapter/client".
#Sole responsibility: talk to the order/restaurant service via HTTP and return domain models.
#Encapsulates service-specific details:
#URL construction (/isAlive, /restaurants, /orders/{date}, ...)
#timeouts and non-200 handling
#parsing response JSON into orders / restaurants / regions
#It should not contain validation or routing rules.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, TypeVar

import requests

from orders.models import Order, OrderStatus, OrderValidationCode, Restaurant
from routing.models import NamedRegion

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ServiceError(Exception):
    """The REST service is down, unreachable, or answered with a bad status or body."""
    pass


@dataclass(frozen=True)
class DaySnapshot:
    """
    Everything the service publishes for one run, fetched once.
    Orders stay mutable (status is written later); the containers are not re-fetched.
    """
    restaurants: List[Restaurant]
    orders: List[Order]
    central_area: Optional[NamedRegion]
    no_fly_zones: List[NamedRegion]


class RestClient:
    """
    REST Adapter / Client

    Constructed once at startup and passed to whoever needs it; there is no
    module-level instance.
    """
    def __init__(self, base_url: str, timeout: float = 10, session: Optional[requests.Session] = None):
        if not base_url:
            raise ValueError("REST service base URL must not be empty")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout #seconds to wait for the service before giving up
        self.session = session or requests.Session()

        #----------------
        # Internal helper methods for URL construction and error handling
        #----------------
    def _get(self, path: str) -> requests.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as error:
            raise ServiceError(f"Failed to fetch data from {url}: {error}") from error

        if response.status_code != 200:
            raise ServiceError(f"Failed to fetch data: HTTP {response.status_code} for URI {url}")
        return response

    def _get_json(self, path: str) -> Any:
        response = self._get(path)
        try:
            return response.json()
        except ValueError as error:
            raise ServiceError(f"Malformed JSON from {response.url}: {error}") from error

    def _get_models(self, path: str, factory: Callable[[Any], T]) -> List[T]:
        data = self._get_json(path)
        try:
            return [factory(item) for item in _as_list(data)]
        except (KeyError, ValueError, TypeError, AttributeError) as error:
            raise ServiceError(f"Malformed payload from {self.base_url}/{path}: {error!r}") from error

        #----------------
        # Public methods, one per endpoint
        #----------------
    def is_alive(self) -> bool:
        """calls /isAlive; the service answers with a bare true/false body"""
        body = self._get("isAlive").text
        return body.strip().lower() == "true"

    def fetch_restaurants(self) -> List[Restaurant]:
        return self._get_models("restaurants", Restaurant.from_dict)

    def fetch_orders(self, date: str) -> List[Order]:
        """
        orders for one calendar day, date as YYYY-MM-DD.
        Status and validation code start over at UNDEFINED: this run decides them.
        """
        orders = self._get_models(f"orders/{date}", Order.from_dict)
        for order in orders:
            order.status = OrderStatus.UNDEFINED
            order.validation_code = OrderValidationCode.UNDEFINED
        return orders

    def fetch_central_area(self) -> NamedRegion:
        regions = self._get_models("centralArea", NamedRegion.from_dict)
        if not regions:
            raise ServiceError(f"Malformed payload from {self.base_url}/centralArea: no region")
        return regions[0]

    def fetch_no_fly_zones(self) -> List[NamedRegion]:
        return self._get_models("noFlyZones", NamedRegion.from_dict)

    def fetch_snapshot(self, date: str) -> DaySnapshot:
        snapshot = DaySnapshot(
            restaurants=self.fetch_restaurants(),
            orders=self.fetch_orders(date),
            central_area=self.fetch_central_area(),
            no_fly_zones=self.fetch_no_fly_zones(),
        )
        logger.info(
            "Fetched %d restaurants, %d orders, %d no-fly zones for %s",
            len(snapshot.restaurants), len(snapshot.orders), len(snapshot.no_fly_zones), date,
        )
        return snapshot


def _as_list(data: Any) -> List[Any]:
    #a single object where an array is expected is read as a one-element array
    if isinstance(data, list):
        return data
    return [data]
