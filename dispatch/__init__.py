#Expose the high-level pipeline pieces:
#Route orchestration (the "one call" entry point)
#Per-order outcomes / the routing plan
#The fixed delivery point

from .dispatcher import APPLETON_TOWER, OrderOutcome, RouteOrchestrator, RoutePlan

__all__ = [
    "APPLETON_TOWER",
    "OrderOutcome",
    "RouteOrchestrator",
    "RoutePlan",
]
