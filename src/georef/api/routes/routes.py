"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import Coordinates, OptimizeRouteRequest, OptimizeRouteResponse, RouteLegModel
from ...services.geospatial import format_distance, format_duration
from ...services.routing.service import optimize_waypoints

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/optimize", response_model=OptimizeRouteResponse, status_code=status.HTTP_200_OK)
def optimize(payload: OptimizeRouteRequest) -> OptimizeRouteResponse:
    origin = (payload.origin.latitude, payload.origin.longitude)
    destinations = [(dest.latitude, dest.longitude) for dest in payload.destinations]
    try:
        result = optimize_waypoints(origin, destinations)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Falha ao otimizar a rota: {exc}",
        ) from exc

    return OptimizeRouteResponse(
        optimized_order=result.optimized_order,
        legs=[
            RouteLegModel(
                from_index=leg.from_index,
                to_index=leg.to_index,
                distance=leg.distance,
                duration=leg.duration,
                distance_text=leg.distance_text,
                duration_text=leg.duration_text,
            )
            for leg in result.legs
        ],
        total_distance=result.total_distance,
        total_duration=result.total_duration,
        total_distance_text=format_distance(result.total_distance),
        total_duration_text=format_duration(result.total_duration),
        user_location=Coordinates(latitude=origin[0], longitude=origin[1]),
        error_message=result.error_message,
    )
