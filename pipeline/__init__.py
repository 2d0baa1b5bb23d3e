"""
Day pipeline package.

Public API:
- run_day: liveness -> snapshot -> validate -> route -> write
- Settings: environment-driven configuration
- ArgumentError: malformed command line input
"""
from .config import Settings, default_settings
from .errors import ArgumentError
from .runner import DayResult, run_day

__all__ = [
    "ArgumentError",
    "DayResult",
    "Settings",
    "default_settings",
    "run_day",
]
