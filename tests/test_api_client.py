from datetime import datetime

import httpx
import pytest

from src.georef.errors import GeorefError, PatientFetchFailed
from src.georef.workflow.api_client import GeorefApiClient
from src.georef.workflow.cache import PatientCollection

BASE_URL = "http://georef.test/api"


def _client(handler) -> GeorefApiClient:
    return GeorefApiClient(base_url=BASE_URL, http=httpx.Client(transport=httpx.MockTransport(handler)))


def test_list_patients_parses_camel_case_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/pacientes"
        return httpx.Response(
            200,
            json=[{"id": 1, "nome": "Ana", "latitude": -15.8, "longitude": -48.05, "proximoAtendimento": "2024-03-10T09:00:00"}],
        )

    patients = _client(handler).list_patients()

    assert [p.id for p in patients] == [1]
    assert patients[0].proximo_atendimento == datetime(2024, 3, 10, 9, 0)


def test_list_patients_error_status_carries_backend_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Erro interno do servidor"})

    with pytest.raises(PatientFetchFailed) as exc_info:
        _client(handler).list_patients()

    assert str(exc_info.value) == "Erro interno do servidor"
    assert exc_info.value.status_code == 500


def test_list_patients_transport_failure_is_a_georef_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GeorefError) as exc_info:
        _client(handler).list_patients()

    assert isinstance(exc_info.value, PatientFetchFailed)
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_list_patients_rejects_malformed_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"nome": "sem id"}])

    collection = PatientCollection(_client(handler).list_patients)

    with pytest.raises(PatientFetchFailed):
        collection.get()
    assert collection.is_stale
