"""Patient request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..models.domain import Patient
from .routing import CamelModel


class PatientModel(CamelModel):
    id: int
    nome: str
    endereco: Optional[str] = None
    telefone: Optional[str] = None
    idade: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    ultimo_atendimento: Optional[datetime] = None
    proximo_atendimento: Optional[datetime] = None
    ativo: bool = True

    @classmethod
    def from_domain(cls, patient: Patient) -> "PatientModel":
        return cls(
            id=patient.id,
            nome=patient.nome,
            endereco=patient.endereco,
            telefone=patient.telefone,
            idade=patient.idade,
            latitude=patient.latitude,
            longitude=patient.longitude,
            ultimo_atendimento=patient.ultimo_atendimento,
            proximo_atendimento=patient.proximo_atendimento,
            ativo=patient.ativo,
        )

    def to_domain(self) -> Patient:
        return Patient(
            id=self.id,
            nome=self.nome,
            endereco=self.endereco,
            telefone=self.telefone,
            idade=self.idade,
            latitude=self.latitude,
            longitude=self.longitude,
            ultimo_atendimento=self.ultimo_atendimento,
            proximo_atendimento=self.proximo_atendimento,
            ativo=self.ativo,
            raw=self.model_dump(by_alias=True, mode="json"),
        )


class NextVisitUpdate(CamelModel):
    """Whole-value replacement of the next-visit field; ``null`` clears it."""

    proximo_atendimento: Optional[datetime] = Field(
        ..., description="ISO-8601 timestamp of the next visit, or null to clear it."
    )
