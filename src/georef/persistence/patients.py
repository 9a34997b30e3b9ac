"""Patient storage: Supabase when configured, in-memory otherwise."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from functools import lru_cache
from typing import Any, Iterable, Protocol

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import Patient, to_aware, to_local

logger = logging.getLogger(__name__)


class PatientRepository(Protocol):
    def list_active(self) -> list[Patient]: ...

    def get(self, patient_id: int) -> Patient | None: ...

    def update_next_visit(self, patient_id: int, value: datetime | None) -> Patient | None: ...


class InMemoryPatientRepository:
    """Patients kept in process memory, in insertion order."""

    def __init__(self, patients: Iterable[Patient] = ()) -> None:
        self._lock = threading.Lock()
        self._patients: dict[int, Patient] = {patient.id: patient for patient in patients}

    def add(self, patient: Patient) -> None:
        with self._lock:
            self._patients[patient.id] = patient

    def list_active(self) -> list[Patient]:
        with self._lock:
            return [patient for patient in self._patients.values() if patient.ativo]

    def get(self, patient_id: int) -> Patient | None:
        with self._lock:
            return self._patients.get(patient_id)

    def update_next_visit(self, patient_id: int, value: datetime | None) -> Patient | None:
        with self._lock:
            current = self._patients.get(patient_id)
            if current is None:
                return None
            updated = replace(current, proximo_atendimento=value)
            self._patients[patient_id] = updated
            return updated


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return to_local(value)


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _row_to_patient(row: dict) -> Patient:
    return Patient(
        id=int(row["id"]),
        nome=str(row.get("nome") or ""),
        endereco=row.get("endereco"),
        telefone=row.get("telefone"),
        idade=row.get("idade"),
        latitude=_optional_float(row.get("latitude")),
        longitude=_optional_float(row.get("longitude")),
        ultimo_atendimento=_parse_timestamp(row.get("ultimo_atendimento")),
        proximo_atendimento=_parse_timestamp(row.get("proximo_atendimento")),
        ativo=bool(row.get("ativo", True)),
        raw=row,
    )


class SupabasePatientRepository:
    """Reads and writes the patients table through the Supabase client."""

    def __init__(self, client: Any, table: str | None = None) -> None:
        self.client = client
        self.table = table or settings.patients_table

    def list_active(self) -> list[Patient]:
        response = self.client.table(self.table).select("*").eq("ativo", True).order("id").execute()
        patients: list[Patient] = []
        for row in response.data or []:
            try:
                patients.append(_row_to_patient(row))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid patient row {row.get('id')}: {e}")
        return patients

    def get(self, patient_id: int) -> Patient | None:
        response = self.client.table(self.table).select("*").eq("id", patient_id).limit(1).execute()
        rows = response.data or []
        return _row_to_patient(rows[0]) if rows else None

    def update_next_visit(self, patient_id: int, value: datetime | None) -> Patient | None:
        payload = {"proximo_atendimento": to_aware(value).isoformat() if value else None}
        response = self.client.table(self.table).update(payload).eq("id", patient_id).execute()
        rows = response.data or []
        if not rows:
            return None
        logger.info(f"Updated next visit of patient {patient_id} to {payload['proximo_atendimento']}")
        return _row_to_patient(rows[0])


@lru_cache()
def get_patient_repository() -> PatientRepository:
    client = get_supabase_client()
    if client is None:
        return InMemoryPatientRepository()
    return SupabasePatientRepository(client)
