"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ...models.domain import EligibleDestination, LocationResult


@dataclass(slots=True)
class RouteLeg:
    from_index: int
    to_index: int
    distance_text: str
    duration_text: str
    distance: Optional[int] = None
    duration: Optional[int] = None


@dataclass(slots=True)
class WaypointOptimization:
    """Server-side answer of one optimization run (order, legs and totals)."""

    optimized_order: List[int]
    legs: List[RouteLeg]
    total_distance: int
    total_duration: int
    status: str = "success"
    error_message: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RoutePlan:
    """Ordered visiting sequence for one selected day.

    ``optimized_order`` is a permutation of indices into ``destinations`` and
    ``legs`` holds one entry per destination.
    """

    origin: LocationResult
    destinations: tuple[EligibleDestination, ...]
    optimized_order: tuple[int, ...]
    legs: tuple[RouteLeg, ...]
    total_distance_text: str
    total_duration_text: str
    is_approximate: bool = False
    message: Optional[str] = None
    total_distance: Optional[int] = None
    total_duration: Optional[int] = None

    def ordered_destinations(self) -> list[EligibleDestination]:
        return [self.destinations[index] for index in self.optimized_order]

    def to_dict(self) -> dict:
        return {
            "origin": {"latitude": self.origin.latitude, "longitude": self.origin.longitude},
            "destinations": [destination.to_payload() for destination in self.destinations],
            "optimizedOrder": list(self.optimized_order),
            "legs": [
                {"distanceText": leg.distance_text, "durationText": leg.duration_text}
                for leg in self.legs
            ],
            "totalDistanceText": self.total_distance_text,
            "totalDurationText": self.total_duration_text,
            "isApproximate": self.is_approximate,
        }

