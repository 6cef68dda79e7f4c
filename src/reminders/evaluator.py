"""Reminder queries over services and clients.

Pure read-side projections recomputed from the current collections. The
evaluation instant is always passed in so results are reproducible.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import TypeVar

from src.models.client import Client
from src.models.service import Service, ServiceStatus

DEFAULT_UPCOMING_LIMIT = 3

_S = TypeVar("_S", bound=Service)


def services_due_tomorrow(services: Iterable[_S], now: datetime) -> list[_S]:
    """Scheduled services whose calendar day is the day after ``now``.

    Compares calendar dates, not a 24-hour window: at 23:59 a service at
    00:01 two calendar days later is not due.
    """
    tomorrow = now.date() + timedelta(days=1)
    return sorted(
        (
            service
            for service in services
            if service.status is ServiceStatus.SCHEDULED
            and service.date.date() == tomorrow
        ),
        key=lambda service: service.date,
    )


def clients_overdue_for_return(clients: Iterable[Client], now: datetime) -> list[Client]:
    """Clients whose return reminder date is strictly before ``now``."""
    overdue = [
        client
        for client in clients
        if client.next_reminder_date is not None and client.next_reminder_date < now
    ]
    return sorted(overdue, key=lambda client: client.next_reminder_date)


def upcoming_services(
    services: Iterable[_S], limit: int = DEFAULT_UPCOMING_LIMIT
) -> list[_S]:
    """Services not yet completed, earliest first, at most ``limit``."""
    pending = [
        service for service in services if service.status is not ServiceStatus.COMPLETED
    ]
    pending.sort(key=lambda service: service.date)
    return pending[: max(limit, 0)]


def services_on_day(services: Iterable[_S], day: date) -> list[_S]:
    """Services booked on a calendar day, in time order."""
    return sorted(
        (service for service in services if service.date.date() == day),
        key=lambda service: service.date,
    )


def count_completed(services: Iterable[Service]) -> int:
    return sum(1 for service in services if service.status is ServiceStatus.COMPLETED)
