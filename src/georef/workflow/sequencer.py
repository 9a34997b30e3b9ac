"""Route sequencing for one selected day, and the maps deep link derived from it."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence
from urllib.parse import urlencode

from pydantic import ValidationError as SchemaError

from ..config import settings
from ..errors import InsufficientDestinations, RouteServiceError
from ..models.domain import EligibleDestination, LocationResult
from ..schemas.routing import OptimizeRouteResponse
from ..services.routing.models import RouteLeg, RoutePlan
from .location import LocationProvider
from .notifications import Notifier

logger = logging.getLogger(__name__)

APPROXIMATE_MARKERS = ("aproximad", "approximate")


class RouteService(Protocol):
    def optimize_route(self, origin: LocationResult, destinations: Sequence[EligibleDestination]) -> dict: ...


def is_approximate(message: str | None) -> bool:
    return bool(message) and any(marker in message.lower() for marker in APPROXIMATE_MARKERS)


def parse_route_plan(
    payload: dict, origin: LocationResult, destinations: Sequence[EligibleDestination]
) -> RoutePlan:
    """Validate a service payload against ``destinations`` and build the plan."""
    try:
        response = OptimizeRouteResponse.model_validate(payload)
    except SchemaError as e:
        raise RouteServiceError(f"Resposta inválida do serviço de rotas: {e.error_count()} campo(s) inválido(s)") from e

    count = len(destinations)
    order = list(response.optimized_order)
    if len(order) != count or len(response.legs) != count:
        raise RouteServiceError(
            f"Resposta inválida do serviço de rotas: {len(order)} posições e "
            f"{len(response.legs)} trechos para {count} destinos"
        )
    if sorted(order) != list(range(count)):
        raise RouteServiceError(f"Resposta inválida do serviço de rotas: ordem {order} não é uma permutação")

    legs = tuple(
        RouteLeg(
            from_index=leg.from_index if leg.from_index is not None else (-1 if position == 0 else order[position - 1]),
            to_index=leg.to_index if leg.to_index is not None else order[position],
            distance_text=leg.distance_text,
            duration_text=leg.duration_text,
            distance=leg.distance,
            duration=leg.duration,
        )
        for position, leg in enumerate(response.legs)
    )
    return RoutePlan(
        origin=origin,
        destinations=tuple(destinations),
        optimized_order=tuple(order),
        legs=legs,
        total_distance_text=response.total_distance_text,
        total_duration_text=response.total_duration_text,
        is_approximate=is_approximate(response.error_message),
        message=response.error_message,
        total_distance=response.total_distance,
        total_duration=response.total_duration,
    )


class RouteSequencer:
    """Acquires the origin, then makes exactly one optimization call.

    There is no retry: a failed call raises immediately after one error
    notification and the caller may invoke again.
    """

    def __init__(
        self,
        service: RouteService,
        location_provider: LocationProvider | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.service = service
        self.location_provider = location_provider
        self.notifier = notifier or (location_provider.notifier if location_provider else Notifier())

    def optimize_route(
        self,
        destinations: Sequence[EligibleDestination],
        origin: LocationResult | None = None,
        *,
        announce: bool = True,
    ) -> RoutePlan:
        """Return the plan for ``destinations``.

        With ``announce=False`` no success notification is emitted; callers that
        may still drop the plan call ``announce`` once it is accepted.
        """
        if not destinations:
            self.notifier.error(
                "Nenhum destino para a rota",
                "Não há pacientes com coordenadas agendados para o dia selecionado.",
            )
            raise InsufficientDestinations("Nenhum destino fornecido")

        if origin is None:
            if self.location_provider is None:
                raise RuntimeError("RouteSequencer needs a LocationProvider when no origin is given")
            # LocationUnavailable propagates; the provider already notified the user
            origin = self.location_provider.locate()

        try:
            payload = self.service.optimize_route(origin, destinations)
            plan = parse_route_plan(payload, origin, destinations)
        except RouteServiceError as e:
            logger.warning(f"Route optimization failed: {e}")
            self.notifier.error("Erro ao otimizar rota", str(e))
            raise

        if announce:
            self.announce(plan)
        return plan

    def announce(self, plan: RoutePlan) -> None:
        if plan.is_approximate:
            self.notifier.success("⚠️ Rota calculada", plan.message, warning=True)
        else:
            self.notifier.success(
                "Rota otimizada!",
                f"{len(plan.destinations)} parada(s) • {plan.total_distance_text} • {plan.total_duration_text}",
            )


def _point(latitude: float | str, longitude: float | str) -> str:
    return f"{latitude},{longitude}"


def build_maps_url(plan: RoutePlan, *, base_url: str | None = None, travel_mode: str | None = None) -> str:
    """Deep link for external navigation: last optimized stop as destination, the rest as waypoints."""
    ordered = plan.ordered_destinations()
    if not ordered:
        raise InsufficientDestinations("Rota sem destinos")
    final, stops = ordered[-1], ordered[:-1]

    params = [
        ("api", "1"),
        ("origin", _point(plan.origin.latitude, plan.origin.longitude)),
        ("destination", _point(final.latitude, final.longitude)),
    ]
    if stops:
        params.append(("waypoints", "|".join(_point(stop.latitude, stop.longitude) for stop in stops)))
    params.append(("travelmode", travel_mode or settings.travel_mode))
    return f"{base_url or settings.maps_dir_url}?{urlencode(params, safe=',|')}"
