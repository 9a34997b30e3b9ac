"""Visit planning screen: wires the projections, sequencer, mutator and state store."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from ..errors import GeorefError
from ..models.domain import EligibleDestination, LocationResult, Patient, VisitEvent
from ..services.routing.models import RoutePlan
from .agenda import AgendaMutator, can_schedule
from .api_client import GeorefApiClient
from .cache import PatientCollection
from .location import LocationProvider
from .notifications import Notifier
from .sequencer import RouteSequencer, build_maps_url
from .state import AgendaState, AgendaStore, CloseDialog, DiscardRoute, RouteFailed, SelectDay
from .visits import DayBadge, build_visit_set, count_events, project_calendar

logger = logging.getLogger(__name__)


class VisitPlanner:
    def __init__(
        self,
        api: GeorefApiClient,
        location_provider: LocationProvider,
        *,
        selected_day: date,
        notifier: Notifier | None = None,
    ) -> None:
        self.notifier = notifier or location_provider.notifier
        self.patients = PatientCollection(api.list_patients)
        self.store = AgendaStore(AgendaState(selected_day=selected_day))
        self.sequencer = RouteSequencer(api, location_provider, self.notifier)
        self.agenda = AgendaMutator(api, self.patients, self.notifier)

    @property
    def state(self) -> AgendaState:
        return self.store.state

    def select_day(self, day: date) -> AgendaState:
        return self.store.dispatch(SelectDay(day))

    def calendar(self) -> dict[date, list[VisitEvent]]:
        return project_calendar(self.patients.get())

    def day_badge(self, day: date) -> DayBadge:
        return count_events(self.calendar().get(day, []))

    def eligible_destinations(self) -> list[EligibleDestination]:
        return build_visit_set(self.patients.get(), self.state.selected_day)

    def plan_route(self, origin: LocationResult | None = None) -> Optional[RoutePlan]:
        """Sequence today's eligible visits.

        Returns the plan when it is still current on arrival, or None when the
        selection moved on while the request was in flight.
        """
        destinations = self.eligible_destinations()
        token = self.store.begin_route()
        try:
            plan = self.sequencer.optimize_route(destinations, origin, announce=False)
        except GeorefError:
            self.store.dispatch(RouteFailed(token))
            raise
        if not self.store.resolve_route(token, plan):
            logger.info("Dropping route result: the selection changed while it was computed")
            return None
        self.sequencer.announce(plan)
        return plan

    def discard_route(self) -> AgendaState:
        return self.store.dispatch(DiscardRoute())

    def maps_url(self) -> str | None:
        plan = self.state.route_plan
        return build_maps_url(plan) if plan is not None else None

    @property
    def can_schedule(self) -> bool:
        return can_schedule(self.state.selected_patient_id, self.state.selected_date)

    def schedule_selected(self) -> Patient:
        patient = self.agenda.schedule(self.state.selected_patient_id, self.state.selected_date)
        self.store.dispatch(CloseDialog())
        return patient

    def reschedule_selected(self) -> Patient | None:
        patient = self.agenda.reschedule(self.state.selected_patient_id, self.state.selected_date)
        if patient is not None:
            self.store.dispatch(CloseDialog())
        return patient

    def clear_visit(self, patient_id: int, confirm: Callable[[], bool]) -> Patient | None:
        return self.agenda.clear(patient_id, confirm)
