"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class DestinationModel(Coordinates):
    id: Optional[int] = None
    nome: Optional[str] = None
    endereco: Optional[str] = None


class OptimizeRouteRequest(CamelModel):
    origin: Coordinates
    destinations: List[DestinationModel] = Field(default_factory=list)


class RouteLegModel(CamelModel):
    distance_text: str
    duration_text: str
    from_index: Optional[int] = None
    to_index: Optional[int] = None
    distance: Optional[int] = None
    duration: Optional[int] = None


class OptimizeRouteResponse(CamelModel):
    optimized_order: List[int]
    legs: List[RouteLegModel]
    total_distance_text: str
    total_duration_text: str
    total_distance: Optional[int] = None
    total_duration: Optional[int] = None
    user_location: Optional[Coordinates] = None
    error_message: Optional[str] = None
