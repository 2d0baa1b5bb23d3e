#Marks datasource as a package.
#Re-exports the REST client so the pipeline imports from datasource
#without knowing internal file names.
#No business logic.

from .rest_client import DaySnapshot, RestClient, ServiceError

__all__ = [
    "DaySnapshot",
    "RestClient",
    "ServiceError",
]
