"""Agenda views derived from the patient registry."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from ...config import settings
from ...models.domain import Patient, local_now
from ...persistence.patients import get_patient_repository
from ...schemas.agenda import (
    AgendaSummaryResponse,
    CalendarDayModel,
    CalendarResponse,
    EligibleDestinationModel,
    VisitEventModel,
)
from ...schemas.patients import PatientModel
from ...workflow.visits import build_visit_set, count_events, project_calendar, summarize_agenda

router = APIRouter(prefix="/agenda", tags=["agenda"])


def _active_patients() -> list[Patient]:
    try:
        return get_patient_repository().list_active()
    except Exception as exc:
        logging.exception(f"Error fetching patients for the agenda: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erro interno do servidor"
        ) from exc


@router.get("/summary", response_model=AgendaSummaryResponse, status_code=status.HTTP_200_OK)
def agenda_summary() -> AgendaSummaryResponse:
    patients = _active_patients()
    try:
        summary = summarize_agenda(patients, local_now(), settings.upcoming_window_days)
    except Exception as exc:
        logging.exception(f"Error building agenda summary: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Falha ao montar o resumo da agenda"
        ) from exc
    return AgendaSummaryResponse(
        total_patients=summary.total_patients,
        attended_count=len(summary.attended),
        scheduled_count=len(summary.scheduled),
        upcoming_count=summary.upcoming_count,
        attended=[PatientModel.from_domain(patient) for patient in summary.attended],
        scheduled=[PatientModel.from_domain(patient) for patient in summary.scheduled],
    )


@router.get("/calendar", response_model=CalendarResponse, status_code=status.HTTP_200_OK)
def agenda_calendar() -> CalendarResponse:
    patients = _active_patients()
    try:
        calendar = project_calendar(patients)
    except Exception as exc:
        logging.exception(f"Error building agenda calendar: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Falha ao montar o calendário"
        ) from exc
    days = {}
    for day, events in sorted(calendar.items()):
        badge = count_events(events)
        days[day.isoformat()] = CalendarDayModel(
            day=day,
            next_count=badge.next_count,
            last_count=badge.last_count,
            events=[
                VisitEventModel(
                    patient_id=event.patient_id,
                    patient_name=event.patient_name,
                    timestamp=event.timestamp,
                    kind=event.kind.value,
                )
                for event in events
            ],
        )
    return CalendarResponse(days=days)


@router.get("/eligible", response_model=list[EligibleDestinationModel], status_code=status.HTTP_200_OK)
def eligible_destinations(
    day: date = Query(..., description="Calendar day (YYYY-MM-DD) to collect next visits for"),
) -> list[EligibleDestinationModel]:
    destinations = build_visit_set(_active_patients(), day)
    return [
        EligibleDestinationModel(
            id=destination.patient_id,
            nome=destination.nome,
            latitude=destination.latitude,
            longitude=destination.longitude,
            endereco=destination.endereco,
            scheduled_at=destination.scheduled_at,
        )
        for destination in destinations
    ]
