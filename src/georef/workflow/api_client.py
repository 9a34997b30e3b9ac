"""HTTP client used by the workflow to reach the georef backend."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

import httpx

from ..config import settings
from ..errors import MutationFailed, PatientFetchFailed, RouteServiceError
from ..models.domain import EligibleDestination, LocationResult, Patient
from ..schemas.patients import PatientModel

logger = logging.getLogger(__name__)


def _error_text(response: httpx.Response) -> str:
    """Return the ``error`` field of a JSON error body, or the raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text or f"HTTP {response.status_code}"


class GeorefApiClient:
    """One request per call, no retries; transport defaults govern timeouts."""

    def __init__(self, base_url: str | None = None, http: httpx.Client | None = None) -> None:
        self.base_url = (base_url if base_url is not None else settings.api_base_url).rstrip("/")
        self.http = http or httpx.Client()

    def close(self) -> None:
        self.http.close()

    def list_patients(self) -> list[Patient]:
        try:
            response = self.http.get(f"{self.base_url}/pacientes")
        except httpx.HTTPError as e:
            raise PatientFetchFailed("Falha de comunicação ao carregar os pacientes") from e
        if response.is_error:
            logger.warning(f"GET pacientes failed with HTTP {response.status_code}")
            raise PatientFetchFailed(_error_text(response), status_code=response.status_code)
        try:
            return [PatientModel.model_validate(item).to_domain() for item in response.json()]
        except (ValueError, TypeError) as e:
            raise PatientFetchFailed("Resposta inválida ao carregar os pacientes") from e

    def update_next_visit(self, patient_id: int, value: datetime | None) -> Patient:
        payload = {"proximoAtendimento": value.isoformat() if value is not None else None}
        try:
            response = self.http.patch(f"{self.base_url}/pacientes/{patient_id}", json=payload)
        except httpx.HTTPError as e:
            raise MutationFailed(f"Falha de comunicação ao atualizar o paciente {patient_id}") from e
        if response.is_error:
            logger.warning(f"PATCH pacientes/{patient_id} failed with HTTP {response.status_code}")
            raise MutationFailed(_error_text(response), status_code=response.status_code)
        try:
            return PatientModel.model_validate(response.json()).to_domain()
        except ValueError as e:
            raise MutationFailed(f"Resposta inválida ao atualizar o paciente {patient_id}") from e

    def optimize_route(
        self, origin: LocationResult, destinations: Sequence[EligibleDestination]
    ) -> dict:
        payload = {
            "origin": origin.to_payload(),
            "destinations": [destination.to_payload() for destination in destinations],
        }
        try:
            response = self.http.post(f"{self.base_url}/routes/optimize", json=payload)
        except httpx.HTTPError as e:
            raise RouteServiceError(f"Falha de comunicação com o serviço de rotas: {e}") from e
        if response.is_error:
            raise RouteServiceError(_error_text(response), status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as e:
            raise RouteServiceError("Resposta inválida do serviço de rotas") from e
        if not isinstance(data, dict):
            raise RouteServiceError("Resposta inválida do serviço de rotas")
        return data

