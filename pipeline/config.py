"""
Purpose: Central configuration for a planning run (single source of truth).
What it does:

Reads tunables from the environment (a .env file is loaded first):

DRONE_OUTPUT_DIR = resultfiles
DRONE_HTTP_TIMEOUT = 10          (seconds)
DRONE_LOG_LEVEL = INFO
DRONE_PLANNER_MAX_EXPANSIONS = 200000

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Example in .env:
# DRONE_OUTPUT_DIR=/var/lib/drone/resultfiles
load_dotenv()


@dataclass(frozen=True)
class Settings:
    """
    Settings for one invocation of the planner.
    """

    # --- Output ---
    output_dir: Path = Path("resultfiles")

    # --- REST service ---
    # How long to wait for a single HTTP response before the run fails.
    http_timeout_seconds: float = 10.0

    # --- Path planning ---
    # Search budget per leg; a leg that needs more expansions fails the run.
    planner_max_expansions: int = 200_000

    log_level: str = "INFO"

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        if self.planner_max_expansions <= 0:
            raise ValueError("planner_max_expansions must be > 0")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls) -> Settings:
        settings = cls(
            output_dir=Path(os.getenv("DRONE_OUTPUT_DIR", "resultfiles")),
            http_timeout_seconds=float(os.getenv("DRONE_HTTP_TIMEOUT", "10")),
            planner_max_expansions=int(os.getenv("DRONE_PLANNER_MAX_EXPANSIONS", "200000")),
            log_level=os.getenv("DRONE_LOG_LEVEL", "INFO"),
        )
        settings.validate()
        return settings


def default_settings() -> Settings:
    """
    Convenience factory for the default settings.
    """
    s = Settings()
    s.validate()
    return s
