from datetime import date, datetime, timedelta, timezone

from src.georef.models.domain import Patient, VisitKind
from src.georef.workflow.visits import (
    build_visit_set,
    count_events,
    is_upcoming,
    project_calendar,
    summarize_agenda,
)

UTC = timezone.utc


def _patient(pid: int, next_visit=None, last_visit=None, lat=-15.80, lng=-48.05) -> Patient:
    return Patient(
        id=pid,
        nome=f"Paciente {pid}",
        endereco=f"Quadra {pid}",
        latitude=lat,
        longitude=lng,
        ultimo_atendimento=last_visit,
        proximo_atendimento=next_visit,
    )


def test_visit_set_keeps_only_same_day_patients_with_coordinates():
    patients = [
        _patient(7, next_visit=datetime(2024, 3, 10, 9, 0)),
        _patient(8, next_visit=datetime(2024, 3, 11, 9, 0)),
        _patient(9, next_visit=datetime(2024, 3, 10, 14, 30), lat=None),
        _patient(10, next_visit=datetime(2024, 3, 10, 16, 0), lng=None),
        _patient(11),
    ]

    result = build_visit_set(patients, date(2024, 3, 10))

    assert [destination.patient_id for destination in result] == [7]
    assert result[0].latitude == -15.80
    assert result[0].to_payload() == {
        "id": 7,
        "nome": "Paciente 7",
        "latitude": -15.80,
        "longitude": -48.05,
        "endereco": "Quadra 7",
    }


def test_visit_set_preserves_input_order_and_rejects_non_finite_coordinates():
    patients = [
        _patient(3, next_visit=datetime(2024, 3, 10, 17, 0)),
        _patient(1, next_visit=datetime(2024, 3, 10, 8, 0)),
        _patient(2, next_visit=datetime(2024, 3, 10, 12, 0), lat=float("nan")),
    ]

    result = build_visit_set(patients, date(2024, 3, 10))

    assert [destination.patient_id for destination in result] == [3, 1]


def test_calendar_groups_next_visits_sharing_a_date():
    patients = [
        _patient(1, next_visit=datetime(2024, 4, 1, 8, 0)),
        _patient(2, next_visit=datetime(2024, 4, 1, 15, 30)),
    ]

    calendar = project_calendar(patients)

    assert list(calendar) == [date(2024, 4, 1)]
    events = calendar[date(2024, 4, 1)]
    assert len(events) == 2
    assert all(event.kind is VisitKind.NEXT for event in events)
    assert count_events(events).next_count == 2


def test_calendar_keys_events_by_their_own_date_and_counts_both_kinds():
    patients = [
        _patient(1, last_visit=datetime(2024, 2, 20, 10, 0), next_visit=datetime(2024, 3, 5, 9, 0)),
        _patient(2, last_visit=datetime(2024, 3, 5, 11, 0)),
    ]

    calendar = project_calendar(patients)

    assert set(calendar) == {date(2024, 2, 20), date(2024, 3, 5)}
    badge = count_events(calendar[date(2024, 3, 5)])
    assert badge.next_count == 1
    assert badge.last_count == 1


def test_summary_sorts_and_counts_upcoming_visits():
    now = datetime(2024, 3, 1, 12, 0)
    patients = [
        _patient(1, next_visit=datetime(2024, 3, 20, 9, 0), last_visit=datetime(2024, 1, 10)),
        _patient(2, next_visit=datetime(2024, 3, 3, 9, 0), last_visit=datetime(2024, 2, 10)),
        _patient(3, next_visit=datetime(2024, 3, 8, 9, 0)),
        _patient(4),
    ]

    summary = summarize_agenda(patients, now)

    assert summary.total_patients == 4
    assert [patient.id for patient in summary.attended] == [2, 1]
    assert [patient.id for patient in summary.scheduled] == [2, 3, 1]
    assert summary.upcoming_count == 2


def test_is_upcoming_rounds_partial_days_up():
    now = datetime(2024, 3, 1, 12, 0)

    assert is_upcoming(datetime(2024, 3, 8, 11, 0), now)
    assert not is_upcoming(datetime(2024, 3, 8, 13, 0), now)
    assert not is_upcoming(datetime(2024, 2, 28, 12, 0), now)
    assert not is_upcoming(None, now)


def test_aware_timestamps_are_keyed_by_local_calendar_day():
    # 22:30 in Brasília on 2024-03-10 is 01:30 UTC on the 11th
    late_evening = datetime(2024, 3, 11, 1, 30, tzinfo=UTC)
    patient = _patient(7, next_visit=late_evening)

    assert patient.proximo_atendimento == datetime(2024, 3, 10, 22, 30)
    assert [d.patient_id for d in build_visit_set([patient], date(2024, 3, 10))] == [7]
    assert build_visit_set([patient], date(2024, 3, 11)) == []
    assert list(project_calendar([patient])) == [date(2024, 3, 10)]


def test_same_instant_written_with_different_offsets_lands_on_one_day():
    brasilia = timezone(timedelta(hours=-3))
    patients = [
        _patient(1, next_visit=datetime(2024, 3, 10, 22, 30, tzinfo=brasilia)),
        _patient(2, next_visit=datetime(2024, 3, 11, 1, 30, tzinfo=UTC)),
        _patient(3, next_visit=datetime(2024, 3, 10, 22, 30)),
    ]

    calendar = project_calendar(patients)

    assert count_events(calendar[date(2024, 3, 10)]).next_count == 3


def test_summary_accepts_mixed_naive_and_aware_timestamps():
    patients = [
        _patient(1, next_visit=datetime(2024, 3, 12, 10, 0, tzinfo=UTC), last_visit=datetime(2024, 3, 1, 9, 0)),
        _patient(2, next_visit=datetime(2024, 3, 11, 9, 0), last_visit=datetime(2024, 3, 2, 12, 0, tzinfo=UTC)),
    ]

    summary = summarize_agenda(patients, datetime(2024, 3, 10, 8, 0, tzinfo=UTC))

    assert [p.id for p in summary.scheduled] == [2, 1]
    assert [p.id for p in summary.attended] == [2, 1]
    assert summary.upcoming_count == 2


def test_is_upcoming_converts_aware_values_instead_of_relabelling():
    now = datetime(2024, 3, 10, 12, 0)

    # 14:00 UTC on the 17th is 11:00 local: 6.96 days ahead, inside the window
    assert is_upcoming(datetime(2024, 3, 17, 14, 0, tzinfo=UTC), now)
    # 14:00 UTC on the 9th is 11:00 local: 25 hours in the past
    assert not is_upcoming(datetime(2024, 3, 9, 14, 0, tzinfo=UTC), now)
