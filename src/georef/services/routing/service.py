"""Route optimization service backing ``POST /routes/optimize``."""

from __future__ import annotations

import logging
from typing import Sequence

from ..geospatial import FALLBACK_SPEED_MPS, format_distance, format_duration, haversine_m
from .directions_client import DirectionsClient
from .models import RouteLeg, WaypointOptimization

logger = logging.getLogger(__name__)

APPROXIMATE_ROUTE_MESSAGE = "Rota calculada com distância aproximada (em linha reta)"
NO_DESTINATIONS_MESSAGE = "Nenhum destino fornecido"


def _straight_line_estimate(
    origin: tuple[float, float], destinations: Sequence[tuple[float, float]]
) -> WaypointOptimization:
    """Visit destinations in input order using haversine distances."""
    legs: list[RouteLeg] = []
    total_distance = 0.0
    current = origin
    for index, destination in enumerate(destinations):
        distance = haversine_m(current[0], current[1], destination[0], destination[1])
        duration = distance / FALLBACK_SPEED_MPS
        legs.append(
            RouteLeg(
                from_index=-1 if index == 0 else index - 1,
                to_index=index,
                distance=round(distance),
                duration=round(duration),
                distance_text=format_distance(distance),
                duration_text=format_duration(duration),
            )
        )
        total_distance += distance
        current = destination

    return WaypointOptimization(
        optimized_order=list(range(len(destinations))),
        legs=legs,
        total_distance=round(total_distance),
        total_duration=round(total_distance / FALLBACK_SPEED_MPS),
        status="success",
        error_message=APPROXIMATE_ROUTE_MESSAGE,
    )


def _leg_from_payload(leg: dict, from_index: int, to_index: int) -> RouteLeg:
    distance = leg.get("distance") or {}
    duration = leg.get("duration") or {}
    return RouteLeg(
        from_index=from_index,
        to_index=to_index,
        distance=int(distance.get("value") or 0),
        duration=int(duration.get("value") or 0),
        distance_text=distance.get("text") or "0 m",
        duration_text=duration.get("text") or "0 min",
    )


def _single_destination(
    client: DirectionsClient, origin: tuple[float, float], destination: tuple[float, float]
) -> WaypointOptimization:
    route = client.directions(origin, destination)
    leg = _leg_from_payload(route["legs"][0], -1, 0)
    return WaypointOptimization(
        optimized_order=[0],
        legs=[leg],
        total_distance=leg.distance or 0,
        total_duration=leg.duration or 0,
    )


def _many_destinations(
    client: DirectionsClient, origin: tuple[float, float], destinations: Sequence[tuple[float, float]]
) -> WaypointOptimization:
    # Round trip back to the origin so every destination is a reorderable waypoint
    route = client.directions(origin, origin, waypoints=destinations, optimize=True)
    waypoint_order = list(route.get("waypoint_order") or range(len(destinations)))
    if sorted(waypoint_order) != list(range(len(destinations))):
        raise ValueError(f"Directions returned an invalid waypoint order: {waypoint_order}")

    # The closing leg back to the origin is not a visit
    raw_legs = list(route.get("legs") or [])[: len(destinations)]
    if len(raw_legs) != len(destinations):
        raise ValueError(
            f"Directions returned {len(raw_legs)} legs for {len(destinations)} destinations"
        )

    legs = [
        _leg_from_payload(
            leg,
            from_index=-1 if index == 0 else waypoint_order[index - 1],
            to_index=waypoint_order[index],
        )
        for index, leg in enumerate(raw_legs)
    ]
    return WaypointOptimization(
        optimized_order=waypoint_order,
        legs=legs,
        total_distance=sum(leg.distance or 0 for leg in legs),
        total_duration=sum(leg.duration or 0 for leg in legs),
    )


def optimize_waypoints(
    origin: tuple[float, float], destinations: Sequence[tuple[float, float]]
) -> WaypointOptimization:
    """Order ``destinations`` for a visit starting at ``origin``.

    Falls back to a straight-line estimate in input order when the directions
    service is not configured or fails; the result then carries
    ``APPROXIMATE_ROUTE_MESSAGE`` as its ``error_message``.
    """
    if not destinations:
        raise ValueError(NO_DESTINATIONS_MESSAGE)

    try:
        client = DirectionsClient()
    except ValueError as e:
        logger.warning(f"Directions client unavailable: {e}. Using straight-line estimate.")
        return _straight_line_estimate(origin, destinations)

    try:
        if len(destinations) == 1:
            return _single_destination(client, origin, destinations[0])
        return _many_destinations(client, origin, destinations)
    except (ConnectionError, ValueError, KeyError, IndexError, TypeError) as e:
        logger.warning(f"Directions optimization failed: {e}. Using straight-line estimate.")
        return _straight_line_estimate(origin, destinations)
