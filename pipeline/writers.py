"""
Purpose: Output serializers for a planned day.
What it does:
- deliveries-YYYY-MM-DD.json   one record per fetched order (status, code, cost)
- flightpath-YYYY-MM-DD.json   one record per drone move
- drone-YYYY-MM-DD.geojson     the whole day as a single LineString

All three files are staged next to their targets and renamed into place only
after every one of them was written, so a failed run leaves no partial output.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

from orders.models import Order
from routing.models import DroneMove

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactPaths:
    deliveries: Path
    flightpath: Path
    geojson: Path


def artifact_paths(output_dir: Path, date: str) -> ArtifactPaths:
    return ArtifactPaths(
        deliveries=output_dir / f"deliveries-{date}.json",
        flightpath=output_dir / f"flightpath-{date}.json",
        geojson=output_dir / f"drone-{date}.geojson",
    )


def format_deliveries(orders: Sequence[Order]) -> List[Dict[str, Any]]:
    return [
        {
            "orderNo": order.order_no,
            "orderStatus": order.status.value,
            "orderValidationCode": order.validation_code.value,
            "costInPence": order.price_total_in_pence,
        }
        for order in orders
    ]


def format_flightpath(moves: Sequence[DroneMove]) -> List[Dict[str, Any]]:
    return [
        {
            "orderNo": move.order_no,
            "fromLongitude": move.from_position.lng,
            "fromLatitude": move.from_position.lat,
            "angle": move.angle,
            "toLongitude": move.to_position.lng,
            "toLatitude": move.to_position.lat,
        }
        for move in moves
    ]


def format_geojson(moves: Sequence[DroneMove]) -> Dict[str, Any]:
    """
    One LineString: first move's origin, then every move's target.
    """
    coordinates: List[List[float]] = []
    if moves:
        coordinates.append(list(moves[0].from_position.as_pair()))
        coordinates.extend(list(move.to_position.as_pair()) for move in moves)

    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {},
                "geometry": {"type": "LineString", "coordinates": coordinates},
            }
        ],
    }


def write_day_artifacts(
    output_dir: Path,
    date: str,
    orders: Sequence[Order],
    moves: Sequence[DroneMove],
) -> ArtifactPaths:
    """
    Writes all three artifacts for `date`; raises OSError on any I/O failure.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = artifact_paths(output_dir, date)

    documents = [
        (paths.deliveries, format_deliveries(orders)),
        (paths.flightpath, format_flightpath(moves)),
        (paths.geojson, format_geojson(moves)),
    ]

    staged: List[tuple] = []
    try:
        for target, document in documents:
            handle, temp_name = tempfile.mkstemp(dir=output_dir, prefix=f".{target.name}.", suffix=".tmp")
            staged.append((temp_name, target))
            with os.fdopen(handle, "w", encoding="utf-8") as file:
                json.dump(document, file)
    except BaseException:
        for temp_name, _ in staged:
            if os.path.exists(temp_name):
                os.remove(temp_name)
        raise

    placed: List[Path] = []
    try:
        for temp_name, target in staged:
            os.replace(temp_name, target)
            placed.append(target)
    except OSError:
        for temp_name, _ in staged:
            if os.path.exists(temp_name):
                os.remove(temp_name)
        for target in placed:
            os.remove(target)
        raise

    for target in placed:
        logger.info("Wrote %s", target)

    return paths
