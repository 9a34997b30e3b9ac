"""Pure projections over the patient collection.

Nothing here is cached or stored: callers recompute on every change of the
patient collection or of the selected day and memoize themselves if needed.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from ..models.domain import EligibleDestination, Patient, VisitEvent, VisitKind, to_local


@dataclass(frozen=True, slots=True)
class DayBadge:
    next_count: int
    last_count: int


@dataclass(frozen=True, slots=True)
class AgendaSummary:
    total_patients: int
    attended: list[Patient]
    scheduled: list[Patient]
    upcoming_count: int


def build_visit_set(patients: Iterable[Patient], selected_day: date) -> list[EligibleDestination]:
    """Patients with a next visit on ``selected_day`` and usable coordinates, in input order."""
    destinations: list[EligibleDestination] = []
    for patient in patients:
        scheduled = patient.proximo_atendimento
        if scheduled is None or scheduled.date() != selected_day:
            continue
        if not patient.has_coordinates:
            continue
        destinations.append(
            EligibleDestination(
                patient_id=patient.id,
                nome=patient.nome,
                latitude=float(patient.latitude),
                longitude=float(patient.longitude),
                scheduled_at=scheduled,
                endereco=patient.endereco,
            )
        )
    return destinations


def project_calendar(patients: Iterable[Patient]) -> dict[date, list[VisitEvent]]:
    """Index last-visit and next-visit events by their own calendar date."""
    calendar: dict[date, list[VisitEvent]] = defaultdict(list)
    for patient in patients:
        if patient.ultimo_atendimento is not None:
            event = VisitEvent(patient.id, patient.nome, patient.ultimo_atendimento, VisitKind.LAST)
            calendar[event.day].append(event)
        if patient.proximo_atendimento is not None:
            event = VisitEvent(patient.id, patient.nome, patient.proximo_atendimento, VisitKind.NEXT)
            calendar[event.day].append(event)
    return dict(calendar)


def count_events(events: Sequence[VisitEvent]) -> DayBadge:
    next_count = sum(1 for event in events if event.kind is VisitKind.NEXT)
    return DayBadge(next_count=next_count, last_count=len(events) - next_count)


def is_upcoming(value: datetime | None, now: datetime, window_days: int = 7) -> bool:
    """True when ``value`` falls within the next ``window_days`` days (rounded up)."""
    if value is None:
        return False
    days = math.ceil((to_local(value) - to_local(now)) / timedelta(days=1))
    return 0 <= days <= window_days


def summarize_agenda(patients: Sequence[Patient], now: datetime, window_days: int = 7) -> AgendaSummary:
    attended = sorted(
        (patient for patient in patients if patient.ultimo_atendimento is not None),
        key=lambda patient: patient.ultimo_atendimento,
        reverse=True,
    )
    scheduled = sorted(
        (patient for patient in patients if patient.proximo_atendimento is not None),
        key=lambda patient: patient.proximo_atendimento,
    )
    upcoming = sum(1 for patient in scheduled if is_upcoming(patient.proximo_atendimento, now, window_days))
    return AgendaSummary(
        total_patients=len(patients),
        attended=attended,
        scheduled=scheduled,
        upcoming_count=upcoming,
    )
