#Marks routing as a package.
#Re-exports the public APIs (DronePathPlanner, Geofence, models) so other
#modules import from routing without knowing internal file names.
#No business logic.

from .models import HOVER_ANGLE, DroneMove, LngLat, NamedRegion
from .geofence import Geofence, is_close_to, is_in_region
from .route_service import DronePathPlanner, NoPathFound

__all__ = [
    "DroneMove",
    "LngLat",
    "NamedRegion",
    "HOVER_ANGLE",
    "Geofence",
    "is_close_to",
    "is_in_region",
    "DronePathPlanner",
    "NoPathFound",
]
