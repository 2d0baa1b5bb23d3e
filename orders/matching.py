"""
Purpose: Decide which restaurant fulfils an order.
What it does:

Finds the first restaurant (in list order) whose menu contains every pizza
of the order. Menus and orders are compared as sets, so duplicate pizzas in
an order need only one menu entry.

The matcher indexes restaurants by pizza once per run, so resolving an order
costs one set intersection instead of a scan over every menu.

Rule: Matching does not plan routes; it only returns a location.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Set

from routing.models import LngLat

from .models import Order, Pizza, Restaurant


class RestaurantNotFound(Exception):
    """
    No restaurant menu covers the order. For an order that already passed
    validation this is a data-consistency fault, not a user error.
    """

    def __init__(self, order_no: str):
        super().__init__(f"Restaurant location for order {order_no} not found")
        self.order_no = order_no


class RestaurantMatcher:
    """
    Resolves orders against a fixed list of restaurants.
    When several restaurants qualify, the one appearing first in the list wins.
    """

    def __init__(self, restaurants: Sequence[Restaurant]):
        self.restaurants: List[Restaurant] = list(restaurants)
        #pizza -> indices of restaurants serving it
        self._index: Dict[Pizza, Set[int]] = {}
        for position, restaurant in enumerate(self.restaurants):
            for pizza in restaurant.menu:
                self._index.setdefault(pizza, set()).add(position)

    def find_restaurant(self, order: Order) -> Restaurant:
        if not self.restaurants:
            raise RestaurantNotFound(order.order_no)

        candidates = set(range(len(self.restaurants)))
        for pizza in order.pizza_set:
            candidates &= self._index.get(pizza, set())
            if not candidates:
                raise RestaurantNotFound(order.order_no)

        return self.restaurants[min(candidates)]

    def resolve(self, order: Order) -> LngLat:
        return self.find_restaurant(order).location


def find_restaurant_location(order: Order, restaurants: Sequence[Restaurant]) -> LngLat:
    """
    One-off convenience wrapper; build a RestaurantMatcher when resolving many orders.
    """
    return RestaurantMatcher(restaurants).resolve(order)
