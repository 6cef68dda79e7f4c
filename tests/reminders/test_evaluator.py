"""Tests for reminder queries."""

from datetime import date, datetime

from src.models.client import Client
from src.models.service import Service, ServiceStatus
from src.reminders.evaluator import (
    clients_overdue_for_return,
    count_completed,
    services_due_tomorrow,
    services_on_day,
    upcoming_services,
)

NOW = datetime(2024, 3, 14, 23, 30)


def _service(
    service_id: int,
    when: datetime,
    status: ServiceStatus = ServiceStatus.SCHEDULED,
) -> Service:
    return Service(id=service_id, client_id=1, date=when, status=status)


def _client(client_id: int, reminder: datetime | None) -> Client:
    return Client(id=client_id, name=f"Cliente {client_id}", next_reminder_date=reminder)


class TestServicesDueTomorrow:
    def test_includes_calendar_tomorrow_only(self) -> None:
        today = _service(1, datetime(2024, 3, 14, 23, 45))
        tomorrow_early = _service(2, datetime(2024, 3, 15, 0, 5))
        tomorrow_late = _service(3, datetime(2024, 3, 15, 18, 0))
        two_days = _service(4, datetime(2024, 3, 16, 8, 0))

        due = services_due_tomorrow([two_days, tomorrow_late, today, tomorrow_early], NOW)

        assert [s.id for s in due] == [2, 3]

    def test_excludes_non_scheduled(self) -> None:
        started = _service(1, datetime(2024, 3, 15, 9, 0), ServiceStatus.IN_PROGRESS)
        done = _service(2, datetime(2024, 3, 15, 9, 0), ServiceStatus.COMPLETED)

        assert services_due_tomorrow([started, done], NOW) == []

    def test_month_rollover(self) -> None:
        service = _service(1, datetime(2024, 4, 1, 9, 0))
        assert services_due_tomorrow([service], datetime(2024, 3, 31, 12, 0)) == [service]


class TestClientsOverdue:
    def test_strictly_before_now(self) -> None:
        past = _client(1, datetime(2024, 3, 1))
        exactly_now = _client(2, NOW)
        future = _client(3, datetime(2024, 9, 1))
        never = _client(4, None)

        overdue = clients_overdue_for_return([future, never, exactly_now, past], NOW)

        assert [c.id for c in overdue] == [1]

    def test_most_overdue_first(self) -> None:
        a = _client(1, datetime(2024, 2, 1))
        b = _client(2, datetime(2023, 11, 1))

        assert [c.id for c in clients_overdue_for_return([a, b], NOW)] == [2, 1]


class TestUpcoming:
    def test_sorted_and_truncated(self) -> None:
        services = [
            _service(1, datetime(2024, 3, 20)),
            _service(2, datetime(2024, 3, 15), ServiceStatus.IN_PROGRESS),
            _service(3, datetime(2024, 3, 10), ServiceStatus.COMPLETED),
            _service(4, datetime(2024, 3, 18)),
            _service(5, datetime(2024, 4, 2)),
        ]

        assert [s.id for s in upcoming_services(services, 3)] == [2, 4, 1]

    def test_limit_zero(self) -> None:
        assert upcoming_services([_service(1, datetime(2024, 3, 20))], 0) == []


def test_services_on_day_in_time_order() -> None:
    services = [
        _service(1, datetime(2024, 3, 14, 15, 0)),
        _service(2, datetime(2024, 3, 14, 8, 0)),
        _service(3, datetime(2024, 3, 13, 8, 0)),
    ]
    assert [s.id for s in services_on_day(services, date(2024, 3, 14))] == [2, 1]


def test_count_completed() -> None:
    services = [
        _service(1, NOW, ServiceStatus.COMPLETED),
        _service(2, NOW, ServiceStatus.SCHEDULED),
        _service(3, NOW, ServiceStatus.COMPLETED),
    ]
    assert count_completed(services) == 2
