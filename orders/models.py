"""
Purpose: Domain models for the Orders capability.
What it does:
- Defines core data structures:
- Pizza (name, price in pence) - the identity of a menu item
- Restaurant (name, location, opening days, menu)
- Order (order number, date, pizzas, total, card details, status, validation code)

Defines enums/constants:
- OrderStatus = UNDEFINED | VALID | INVALID | DELIVERED
- OrderValidationCode = why an order is (in)valid

Builds models from the JSON shapes served by the REST service (from_dict).

Rule: No HTTP calls, no routing logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from routing.models import LngLat


class OrderStatus(str, Enum):
    UNDEFINED = "UNDEFINED"
    VALID = "VALID"
    INVALID = "INVALID"
    DELIVERED = "DELIVERED"


class OrderValidationCode(str, Enum):
    UNDEFINED = "UNDEFINED"
    NO_ERROR = "NO_ERROR"
    CARD_NUMBER_INVALID = "CARD_NUMBER_INVALID"
    EXPIRY_DATE_INVALID = "EXPIRY_DATE_INVALID"
    CVV_INVALID = "CVV_INVALID"
    TOTAL_INCORRECT = "TOTAL_INCORRECT"
    PIZZA_NOT_DEFINED = "PIZZA_NOT_DEFINED"
    MAX_PIZZA_COUNT_EXCEEDED = "MAX_PIZZA_COUNT_EXCEEDED"
    PIZZA_FROM_MULTIPLE_RESTAURANTS = "PIZZA_FROM_MULTIPLE_RESTAURANTS"
    RESTAURANT_CLOSED = "RESTAURANT_CLOSED"


@dataclass(frozen=True)
class Pizza:
    """
    A menu item. Two pizzas are the same item when name and price match,
    which is what menu containment is tested on.
    """
    name: str
    price_in_pence: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Pizza:
        return cls(name=data["name"], price_in_pence=int(data["priceInPence"]))


@dataclass(frozen=True)
class Restaurant:
    """
    A vendor at a fixed location. The menu is fixed for the whole run.
    """
    name: str
    location: LngLat
    menu: Tuple[Pizza, ...]
    opening_days: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Restaurant:
        return cls(
            name=data.get("name", ""),
            location=LngLat.from_dict(data["location"]),
            menu=tuple(Pizza.from_dict(item) for item in data.get("menu", [])),
            opening_days=tuple(day.upper() for day in data.get("openingDays", [])),
        )

    def is_open_on(self, day: date) -> bool:
        #no opening days published means no restriction
        if not self.opening_days:
            return True
        return day.strftime("%A").upper() in self.opening_days


@dataclass(frozen=True)
class CreditCardInformation:
    credit_card_number: str
    credit_card_expiry: str  # MM/YY
    cvv: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CreditCardInformation:
        return cls(
            credit_card_number=str(data.get("creditCardNumber", "")),
            credit_card_expiry=str(data.get("creditCardExpiry", "")),
            cvv=str(data.get("cvv", "")),
        )


@dataclass
class Order:
    """
    A customer order for one day.

    Mutable on purpose: status and validation_code are written by the
    validator and the route optimizer (through dispatch.state_machines).
    """

    order_no: str
    pizzas: List[Pizza] = field(default_factory=list)
    order_date: Optional[date] = None
    price_total_in_pence: int = 0
    credit_card: Optional[CreditCardInformation] = None

    status: OrderStatus = OrderStatus.UNDEFINED
    validation_code: OrderValidationCode = OrderValidationCode.UNDEFINED

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Order:
        raw_date = data.get("orderDate")
        card = data.get("creditCardInformation")
        return cls(
            order_no=str(data["orderNo"]),
            pizzas=[Pizza.from_dict(item) for item in data.get("pizzasInOrder", [])],
            order_date=date.fromisoformat(raw_date) if raw_date else None,
            price_total_in_pence=int(data.get("priceTotalInPence", 0)),
            credit_card=CreditCardInformation.from_dict(card) if card else None,
            status=OrderStatus(data.get("orderStatus", OrderStatus.UNDEFINED.value)),
            validation_code=OrderValidationCode(
                data.get("orderValidationCode", OrderValidationCode.UNDEFINED.value)
            ),
        )

    @property
    def pizza_set(self) -> frozenset:
        # duplicates collapse: two Margheritas need the same menu entry as one
        return frozenset(self.pizzas)
