"""Visit planning workflow: positioning, route sequencing and agenda updates."""

from .agenda import AgendaMutator, can_schedule
from .api_client import GeorefApiClient
from .cache import PatientCollection
from .location import LocationOptions, LocationProvider, Position, PositionError
from .notifications import Notification, NotificationLevel, Notifier
from .planner import VisitPlanner
from .sequencer import RouteSequencer, build_maps_url
from .visits import build_visit_set, count_events, project_calendar, summarize_agenda

__all__ = [
    "AgendaMutator",
    "GeorefApiClient",
    "LocationOptions",
    "LocationProvider",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "PatientCollection",
    "Position",
    "PositionError",
    "RouteSequencer",
    "VisitPlanner",
    "build_maps_url",
    "build_visit_set",
    "can_schedule",
    "count_events",
    "project_calendar",
    "summarize_agenda",
]
