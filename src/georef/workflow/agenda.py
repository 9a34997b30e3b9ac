"""Create, reschedule and clear a patient's next visit."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from ..errors import MutationFailed, ValidationError
from ..models.domain import Patient
from .cache import PatientCollection
from .notifications import Notifier

logger = logging.getLogger(__name__)


class AgendaApi(Protocol):
    def update_next_visit(self, patient_id: int, value: datetime | None) -> Patient: ...


def can_schedule(patient_id: Optional[int], when: Optional[datetime]) -> bool:
    """Whether the schedule button should be enabled."""
    return patient_id is not None and when is not None


class AgendaMutator:
    """Each operation is one PATCH of ``proximoAtendimento`` followed by a cache invalidation.

    Nothing is deduplicated here: calling the same operation twice issues two
    requests. On failure the cache is left alone and ``MutationFailed`` is
    raised after a single error notification.
    """

    def __init__(self, api: AgendaApi, patients: PatientCollection, notifier: Notifier | None = None) -> None:
        self.api = api
        self.patients = patients
        self.notifier = notifier or Notifier()

    def schedule(self, patient_id: Optional[int], when: Optional[datetime]) -> Patient:
        if not can_schedule(patient_id, when):
            self.notifier.error("Dados incompletos", "Selecione um paciente e uma data para agendar.")
            raise ValidationError("Paciente e data são obrigatórios para agendar")
        return self._write(patient_id, when, "Atendimento agendado!")

    def reschedule(self, patient_id: Optional[int], new_when: Optional[datetime]) -> Patient | None:
        """Replace an existing next visit; without a new date nothing is sent.

        Raises ``ValidationError`` when the patient has no next visit to move.
        """
        if not can_schedule(patient_id, new_when):
            logger.debug(f"Reschedule of patient {patient_id} skipped: no new date")
            return None
        current = next((patient for patient in self.patients.get() if patient.id == patient_id), None)
        if current is None or current.proximo_atendimento is None:
            self.notifier.error("Nada para reagendar", "Este paciente não possui atendimento agendado.")
            raise ValidationError(f"Paciente {patient_id} não possui atendimento agendado")
        return self._write(patient_id, new_when, "Atendimento reagendado!")

    def clear(self, patient_id: int, confirm: Callable[[], bool]) -> Patient | None:
        """Set the next visit to null once the user confirms; declining is a no-op."""
        if not confirm():
            return None
        return self._write(patient_id, None, "Agendamento removido")

    def _write(self, patient_id: int, value: datetime | None, success_title: str) -> Patient:
        try:
            patient = self.api.update_next_visit(patient_id, value)
        except MutationFailed as e:
            logger.warning(f"Next visit update for patient {patient_id} failed: {e}")
            self.notifier.error("Erro ao atualizar agendamento", str(e))
            raise
        self.patients.invalidate()
        self.notifier.success(success_title)
        return patient
