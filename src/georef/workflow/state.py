"""Agenda screen state and the reducer that moves it between states.

The route generation counter is the staleness guard. Every route request is
tagged with the generation current when it started; changing the day or
discarding the plan bumps the counter, so a late result carrying an older
token is dropped instead of being shown for the wrong day.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Union

from ..services.routing.models import RoutePlan

logger = logging.getLogger(__name__)

DIALOGS = ("schedule", "reschedule", "clear", "route")


@dataclass(frozen=True, slots=True)
class AgendaState:
    selected_day: date
    route_plan: Optional[RoutePlan] = None
    route_generation: int = 0
    route_pending: bool = False
    open_dialog: Optional[str] = None
    selected_patient_id: Optional[int] = None
    selected_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "selectedDay": self.selected_day.isoformat(),
            "routePlan": self.route_plan.to_dict() if self.route_plan else None,
            "routeGeneration": self.route_generation,
            "routePending": self.route_pending,
            "openDialog": self.open_dialog,
            "selectedPatientId": self.selected_patient_id,
            "selectedDate": self.selected_date.isoformat() if self.selected_date else None,
        }


@dataclass(frozen=True, slots=True)
class SelectDay:
    day: date


@dataclass(frozen=True, slots=True)
class RouteRequested:
    pass


@dataclass(frozen=True, slots=True)
class RouteResolved:
    token: int
    plan: RoutePlan


@dataclass(frozen=True, slots=True)
class RouteFailed:
    token: int


@dataclass(frozen=True, slots=True)
class DiscardRoute:
    pass


@dataclass(frozen=True, slots=True)
class OpenDialog:
    name: str
    patient_id: Optional[int] = None
    when: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class CloseDialog:
    pass


@dataclass(frozen=True, slots=True)
class SelectPatient:
    patient_id: Optional[int]


@dataclass(frozen=True, slots=True)
class SelectDate:
    when: Optional[datetime]


Action = Union[
    SelectDay,
    RouteRequested,
    RouteResolved,
    RouteFailed,
    DiscardRoute,
    OpenDialog,
    CloseDialog,
    SelectPatient,
    SelectDate,
]


def reduce(state: AgendaState, action: Action) -> AgendaState:
    if isinstance(action, SelectDay):
        if action.day == state.selected_day:
            return state
        return replace(
            state,
            selected_day=action.day,
            route_plan=None,
            route_pending=False,
            route_generation=state.route_generation + 1,
        )
    if isinstance(action, RouteRequested):
        return replace(state, route_pending=True)
    if isinstance(action, RouteResolved):
        if action.token != state.route_generation:
            logger.info(
                f"Discarding stale route result (token {action.token}, current {state.route_generation})"
            )
            return state
        return replace(state, route_plan=action.plan, route_pending=False)
    if isinstance(action, RouteFailed):
        if action.token != state.route_generation:
            return state
        return replace(state, route_pending=False)
    if isinstance(action, DiscardRoute):
        return replace(
            state, route_plan=None, route_pending=False, route_generation=state.route_generation + 1
        )
    if isinstance(action, OpenDialog):
        if action.name not in DIALOGS:
            raise ValueError(f"Unknown dialog '{action.name}'")
        return replace(
            state,
            open_dialog=action.name,
            selected_patient_id=action.patient_id,
            selected_date=action.when,
        )
    if isinstance(action, CloseDialog):
        return replace(state, open_dialog=None, selected_patient_id=None, selected_date=None)
    if isinstance(action, SelectPatient):
        return replace(state, selected_patient_id=action.patient_id)
    if isinstance(action, SelectDate):
        return replace(state, selected_date=action.when)
    raise TypeError(f"Unsupported action: {action!r}")


class AgendaStore:
    """Single owner of the current ``AgendaState``."""

    def __init__(self, initial: AgendaState) -> None:
        self.state = initial

    def dispatch(self, action: Action) -> AgendaState:
        self.state = reduce(self.state, action)
        return self.state

    def begin_route(self) -> int:
        """Mark a route request as pending and return its token."""
        self.dispatch(RouteRequested())
        return self.state.route_generation

    def resolve_route(self, token: int, plan: RoutePlan) -> bool:
        """Apply ``plan`` if ``token`` is still current; return whether it was applied."""
        self.dispatch(RouteResolved(token, plan))
        return self.state.route_plan is plan
