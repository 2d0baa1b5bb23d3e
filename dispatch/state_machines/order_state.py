from typing import List

from orders.models import Order, OrderStatus, OrderValidationCode


class OrderStateException(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


def transition_order_to_validated(order: Order, code: OrderValidationCode) -> Order:
    """
    Called by the validator once every rule has been checked.
    NO_ERROR moves the order to VALID, anything else to INVALID.
    Only UNDEFINED orders can be classified.
    """
    if order.status != OrderStatus.UNDEFINED:
        raise OrderStateException(f"Cannot validate order {order.order_no} from {order.status.value}")
    if code == OrderValidationCode.UNDEFINED:
        raise OrderStateException(f"Order {order.order_no} needs a concrete validation code")

    order.validation_code = code
    order.status = OrderStatus.VALID if code == OrderValidationCode.NO_ERROR else OrderStatus.INVALID
    return order


def ensure_deliverable(order: Order) -> None:
    """
    Guard used before an order is routed.
    DELIVERED is accepted so that re-planning a day re-appends its path;
    guarding against that double count is the caller's job.
    """
    if order.status not in (OrderStatus.VALID, OrderStatus.DELIVERED):
        raise OrderStateException(f"Order {order.order_no} is not VALID. Current: {order.status.value}")


def transition_orders_to_delivered(orders: List[Order]) -> List[Order]:
    """
    Once every route of a batch is computed, all its orders are locked to DELIVERED.
    The whole list is checked before any order is touched.
    """
    for order in orders:
        ensure_deliverable(order)
    for order in orders:
        order.status = OrderStatus.DELIVERED
    return orders
