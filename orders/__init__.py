"""
Orders domain package.

Public API:
- Domain models: Order, Pizza, Restaurant, CreditCardInformation,
  OrderStatus, OrderValidationCode
- Matching: RestaurantMatcher, RestaurantNotFound, find_restaurant_location

Validation lives in orders.validation (it depends on the dispatch state
machine, which itself imports these models).
"""
from .models import (
    CreditCardInformation,
    Order,
    OrderStatus,
    OrderValidationCode,
    Pizza,
    Restaurant,
)
from .matching import RestaurantMatcher, RestaurantNotFound, find_restaurant_location

__all__ = ["Order",
           "Pizza",
             "Restaurant",
               "CreditCardInformation",
               "OrderStatus",
               "OrderValidationCode",
               "RestaurantMatcher",
               "RestaurantNotFound",
               "find_restaurant_location",
               ]
