"""
Purpose: Classify raw orders as VALID or INVALID before routing.
What it does:

Checks one order against the day's restaurants and a small business rule set:
- card number / expiry / CVV shape
- every pizza exists on some menu
- pizza count cap
- single restaurant per order, open on the order day
- total = item prices + delivery charge

The first failing rule decides the OrderValidationCode; the status change goes
through dispatch.state_machines.order_state so it can only move forward.

Rule: No routing and no HTTP here.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Sequence

from dispatch.state_machines.order_state import transition_order_to_validated

from .models import Order, OrderValidationCode, Restaurant

logger = logging.getLogger(__name__)

CARD_NUMBER_PATTERN = re.compile(r"^\d{16}$")
CVV_PATTERN = re.compile(r"^\d{3}$")


@dataclass(frozen=True)
class ValidationPolicy:
    """
    Tunable constants for the default rule set.
    """
    max_pizzas_per_order: int = 4
    delivery_charge_in_pence: int = 100


class OrderValidator:
    """
    Stateless validator; one instance can be reused for the whole day.
    """

    def __init__(self, policy: Optional[ValidationPolicy] = None):
        self.policy = policy or ValidationPolicy()

    def validate(self, order: Order, restaurants: Sequence[Restaurant]) -> Order:
        """
        Sets status + validation_code on the order and returns it.
        """
        code = self.check(order, restaurants)
        transition_order_to_validated(order, code)
        if code != OrderValidationCode.NO_ERROR:
            logger.info("Order %s rejected: %s", order.order_no, code.value)
        return order

    def check(self, order: Order, restaurants: Sequence[Restaurant]) -> OrderValidationCode:
        """
        Pure classification, no mutation.
        """
        card = order.credit_card
        if card is None or not CARD_NUMBER_PATTERN.match(card.credit_card_number):
            return OrderValidationCode.CARD_NUMBER_INVALID
        if not _expiry_is_valid(card.credit_card_expiry, order.order_date):
            return OrderValidationCode.EXPIRY_DATE_INVALID
        if not CVV_PATTERN.match(card.cvv):
            return OrderValidationCode.CVV_INVALID

        menu_items = {pizza for restaurant in restaurants for pizza in restaurant.menu}
        if any(pizza not in menu_items for pizza in order.pizzas):
            return OrderValidationCode.PIZZA_NOT_DEFINED

        if len(order.pizzas) > self.policy.max_pizzas_per_order:
            return OrderValidationCode.MAX_PIZZA_COUNT_EXCEEDED

        suppliers = _single_suppliers(order, restaurants)
        if not suppliers:
            return OrderValidationCode.PIZZA_FROM_MULTIPLE_RESTAURANTS

        if order.order_date is not None and not any(r.is_open_on(order.order_date) for r in suppliers):
            return OrderValidationCode.RESTAURANT_CLOSED

        expected_total = sum(p.price_in_pence for p in order.pizzas) + self.policy.delivery_charge_in_pence
        if order.price_total_in_pence != expected_total:
            return OrderValidationCode.TOTAL_INCORRECT

        return OrderValidationCode.NO_ERROR


def validate_orders(
    orders: Sequence[Order],
    restaurants: Sequence[Restaurant],
    validator: Optional[OrderValidator] = None,
) -> List[Order]:
    """
    Validates every order in place and returns the VALID ones, input order kept.
    """
    validator = validator or OrderValidator()
    valid: List[Order] = []
    for order in orders:
        validator.validate(order, restaurants)
        if order.validation_code == OrderValidationCode.NO_ERROR:
            valid.append(order)
    logger.info("%d of %d orders valid", len(valid), len(orders))
    return valid


def _single_suppliers(order: Order, restaurants: Sequence[Restaurant]) -> List[Restaurant]:
    wanted = order.pizza_set
    return [r for r in restaurants if wanted <= frozenset(r.menu)]


def _expiry_is_valid(expiry: str, order_date: Optional[date]) -> bool:
    try:
        expires = datetime.strptime(expiry, "%m/%y").date()
    except ValueError:
        return False
    if order_date is None:
        return True
    # a card is good until the end of its expiry month
    return (expires.year, expires.month) >= (order_date.year, order_date.month)
