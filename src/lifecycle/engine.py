"""Service lifecycle operations and their side effects.

Every function here runs inside the caller's ``AsyncSession``; the request
dependency commits once at the end, so a completion's service update,
client reminder update and income posting land together or not at all.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from src.core.clock import to_business_time
from src.core.config import settings
from src.core.errors import ConcurrencyConflict, NotFoundError, ValidationError
from src.core.logging import get_logger, service_id_ctx
from src.lifecycle.state_machine import advance
from src.models.client import Client
from src.models.financial import FinancialRecord, RecordType
from src.models.service import Service, ServiceStatus

logger = get_logger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "photos_before",
        "photos_after",
        "value",
        "payment_method",
        "installments",
        "signature",
        "notes",
        "date",
    }
)


def next_reminder_date(service_date: datetime, months: int | None = None) -> datetime:
    """Return the return-visit reminder date for a cleaning.

    Month arithmetic clamps to the last day of the target month, so
    2024-08-31 plus six months is 2025-02-28.
    """
    interval = settings.reminder_interval_months if months is None else months
    return service_date + relativedelta(months=interval)


def income_description(service_id: int) -> str:
    """Ledger description for income posted by a completed service."""
    return f"Serviço #{service_id}"


def _validate_installments(installments: int | None) -> None:
    if installments is None or installments < 1:
        raise ValidationError("installments must be at least 1")


def _validate_value(value: Decimal | None) -> None:
    if value is not None and value < 0:
        raise ValidationError("value must not be negative")


async def create_service(
    session: AsyncSession,
    *,
    client_id: int,
    date: datetime,
    value: Decimal | None = None,
    payment_method: str | None = None,
    installments: int = 1,
    notes: str | None = None,
) -> Service:
    """Book a new service in ``scheduled`` status.

    Raises:
        ValidationError: If the client does not exist or fields are invalid.
    """
    client = await session.get(Client, client_id)
    if client is None:
        raise ValidationError(f"client {client_id} does not exist")
    _validate_installments(installments)
    _validate_value(value)

    service = Service(
        client_id=client_id,
        date=to_business_time(date),
        status=ServiceStatus.SCHEDULED,
        photos_before=[],
        photos_after=[],
        value=value if value is not None else Decimal("0"),
        payment_method=payment_method,
        installments=installments,
        notes=notes,
    )
    session.add(service)
    await session.flush()
    logger.info("service_scheduled", service_id=service.id, client_id=client_id)
    return service


async def get_service(
    session: AsyncSession,
    service_id: int,
    *,
    for_update: bool = False,
) -> Service:
    """Load a service by id.

    Args:
        session: Active session.
        service_id: Service identifier.
        for_update: Lock the row on backends that support ``FOR UPDATE``.

    Raises:
        NotFoundError: If the service does not exist.
    """
    stmt = select(Service).where(Service.id == service_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(stmt)
    service = result.scalar_one_or_none()
    if service is None:
        raise NotFoundError("Service", service_id)
    return service


async def update_service(
    session: AsyncSession,
    service_id: int,
    changes: Mapping[str, Any],
) -> Service:
    """Merge ``changes`` into a service and apply status side effects.

    Fields absent from ``changes`` are left untouched. Reaching
    ``completed`` for the first time schedules the client's return reminder
    and posts one income record, both dated from the post-merge service
    date. Writing ``completed`` again is a no-op for side effects.

    Raises:
        NotFoundError: If the service does not exist.
        ValidationError: If a field value is invalid or unknown.
        TransitionError: If the status write moves backwards.
        ConcurrencyConflict: If the row was changed concurrently.
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"unknown fields: {', '.join(sorted(unknown))}")

    token = service_id_ctx.set(service_id)
    try:
        service = await get_service(session, service_id, for_update=True)
        _merge_fields(service, changes)

        completed_now = False
        if changes.get("status") is not None:
            try:
                target = ServiceStatus(changes["status"])
            except ValueError as exc:
                raise ValidationError(f"unknown status {changes['status']!r}") from exc
            transitioned = advance(service, target)
            completed_now = transitioned and target is ServiceStatus.COMPLETED

        if completed_now:
            await _apply_completion(session, service)

        try:
            await session.flush()
        except StaleDataError as exc:
            logger.warning("service_update_conflict", service_id=service_id)
            raise ConcurrencyConflict(
                f"service {service_id} was modified concurrently"
            ) from exc
        return service
    finally:
        service_id_ctx.reset(token)


def _merge_fields(service: Service, changes: Mapping[str, Any]) -> None:
    """Overwrite plain fields present in ``changes``; status is handled apart."""
    if "installments" in changes:
        _validate_installments(changes["installments"])
    if "value" in changes:
        _validate_value(changes["value"])

    for field, new_value in changes.items():
        if field == "status":
            continue
        if field == "date":
            if new_value is None:
                raise ValidationError("date is required")
            new_value = to_business_time(new_value)
        elif field in ("photos_before", "photos_after"):
            new_value = list(new_value or [])
        elif field == "value" and new_value is None:
            new_value = Decimal("0")
        setattr(service, field, new_value)


async def _apply_completion(session: AsyncSession, service: Service) -> FinancialRecord:
    """Schedule the client's next cleaning and post the service income."""
    client = await session.get(Client, service.client_id)
    if client is None:
        raise NotFoundError("Client", service.client_id)

    client.last_service_date = service.date
    client.next_reminder_date = next_reminder_date(service.date)
    logger.info(
        "client_reminder_scheduled",
        client_id=client.id,
        last_service_date=client.last_service_date.isoformat(),
        next_reminder_date=client.next_reminder_date.isoformat(),
    )

    record = FinancialRecord(
        type=RecordType.INCOME,
        description=income_description(service.id),
        amount=service.value or Decimal("0"),
        date=service.date,
        category=settings.income_category,
    )
    session.add(record)
    logger.info(
        "income_posted",
        service_id=service.id,
        amount=str(record.amount),
        category=record.category,
    )
    return record


async def delete_service(session: AsyncSession, service_id: int) -> None:
    """Delete a service; posted ledger entries are left in place.

    Raises:
        NotFoundError: If the service does not exist.
    """
    service = await get_service(session, service_id)
    await session.delete(service)
    await session.flush()
    logger.info("service_deleted", service_id=service_id)
