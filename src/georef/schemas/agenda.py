"""Agenda and calendar response schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List

from .patients import PatientModel
from .routing import CamelModel, DestinationModel


class VisitEventModel(CamelModel):
    patient_id: int
    patient_name: str
    timestamp: datetime
    kind: str


class CalendarDayModel(CamelModel):
    day: date
    next_count: int
    last_count: int
    events: List[VisitEventModel]


class CalendarResponse(CamelModel):
    days: Dict[str, CalendarDayModel]


class AgendaSummaryResponse(CamelModel):
    total_patients: int
    attended_count: int
    scheduled_count: int
    upcoming_count: int
    attended: List[PatientModel]
    scheduled: List[PatientModel]


class EligibleDestinationModel(DestinationModel):
    scheduled_at: datetime
