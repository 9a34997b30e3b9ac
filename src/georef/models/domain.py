"""Domain models for patients, visit events and positioning results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import settings


@dataclass(slots=True)
class Patient:
    """A registry patient with the two agenda fields tracked by outreach teams."""

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
    raw: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.ultimo_atendimento = to_local(self.ultimo_atendimento)
        self.proximo_atendimento = to_local(self.proximo_atendimento)

    @property
    def has_coordinates(self) -> bool:
        return _is_finite(self.latitude) and _is_finite(self.longitude)


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def to_local(value: Optional[datetime]) -> Optional[datetime]:
    """Wall-clock time in the configured zone as a naive datetime.

    Naive values are taken to be local already. Aware values (Supabase rows,
    ISO strings ending in ``Z``) are converted before the offset is dropped, so
    ``.date()`` is always the local calendar day.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(local_zone()).replace(tzinfo=None)


def to_aware(value: datetime) -> datetime:
    """Attach the configured zone to a local naive datetime for storage."""
    return value if value.tzinfo is not None else value.replace(tzinfo=local_zone())


def local_now() -> datetime:
    return datetime.now(local_zone()).replace(tzinfo=None)


def _is_finite(value: Optional[float]) -> bool:
    if value is None:
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


class VisitKind(str, Enum):
    LAST = "last"
    NEXT = "next"


@dataclass(frozen=True, slots=True)
class VisitEvent:
    """A derived calendar entry; rebuilt from the patient collection, never stored."""

    patient_id: int
    patient_name: str
    timestamp: datetime
    kind: VisitKind

    @property
    def day(self) -> date:
        return to_local(self.timestamp).date()


@dataclass(frozen=True, slots=True)
class EligibleDestination:
    """A next-visit event on the selected day whose patient has usable coordinates."""

    patient_id: int
    nome: str
    latitude: float
    longitude: float
    scheduled_at: datetime
    endereco: Optional[str] = None

    def to_payload(self) -> dict:
        return {
            "id": self.patient_id,
            "nome": self.nome,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "endereco": self.endereco,
        }


@dataclass(frozen=True, slots=True)
class LocationResult:
    """Current position in decimal degrees, kept as strings as reported by the source."""

    latitude: str
    longitude: str
    source: str = "native"
    used_fallback: bool = False

    def to_payload(self) -> dict:
        return {"latitude": float(self.latitude), "longitude": float(self.longitude)}
