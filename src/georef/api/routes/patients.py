"""Patient registry endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from ...persistence.patients import get_patient_repository
from ...schemas.patients import NextVisitUpdate, PatientModel

router = APIRouter(prefix="/pacientes", tags=["patients"])


@router.get("", response_model=List[PatientModel], status_code=status.HTTP_200_OK)
def list_patients() -> List[PatientModel]:
    try:
        patients = get_patient_repository().list_active()
    except Exception as exc:
        logging.exception(f"Error fetching patients: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erro interno do servidor"
        ) from exc
    return [PatientModel.from_domain(patient) for patient in patients]


@router.get("/{patient_id}", response_model=PatientModel, status_code=status.HTTP_200_OK)
def get_patient(patient_id: int) -> PatientModel:
    patient = get_patient_repository().get(patient_id)
    if patient is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Paciente {patient_id} não encontrado")
    return PatientModel.from_domain(patient)


@router.patch("/{patient_id}", response_model=PatientModel, status_code=status.HTTP_200_OK)
def update_next_visit(patient_id: int, payload: NextVisitUpdate) -> PatientModel:
    """Replace the next-visit field; sending the current value again is a no-op in effect."""
    try:
        patient = get_patient_repository().update_next_visit(patient_id, payload.proximo_atendimento)
    except Exception as exc:
        logging.exception(f"Error updating next visit of patient {patient_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Falha ao atualizar o agendamento",
        ) from exc
    if patient is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Paciente {patient_id} não encontrado")
    return PatientModel.from_domain(patient)
