"""Reminder query and notification endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.clients import ClientResponse, to_client_response
from src.api.deps import get_db, get_now, get_redis
from src.api.services import ServiceResponse, to_service_response
from src.models.client import Client
from src.models.service import Service
from src.reminders import (
    ReminderNotifier,
    clients_overdue_for_return,
    services_due_tomorrow,
    upcoming_services,
)
from src.reminders.whatsapp import confirmation_url, contact_url
from src.store.queries import all_clients, all_services

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


class DueServiceResponse(ServiceResponse):
    """A service due tomorrow with a prefilled confirmation link."""

    whatsapp_url: str | None


class OverdueClientResponse(ClientResponse):
    """A client past their return date with a chat link."""

    whatsapp_url: str | None


class NotificationResponse(BaseModel):
    """A newly claimed reminder notification."""

    service_id: int
    title: str
    body: str
    icon: str | None


def to_due_service_response(service: Service) -> DueServiceResponse:
    base = to_service_response(service, service.client)
    return DueServiceResponse(
        **base.model_dump(),
        whatsapp_url=confirmation_url(
            service.client.phone, service.client.name, service.date
        ),
    )


def to_overdue_client_response(client: Client) -> OverdueClientResponse:
    base = to_client_response(client)
    return OverdueClientResponse(
        **base.model_dump(),
        whatsapp_url=contact_url(client.phone),
    )


@router.get("/due-tomorrow", response_model=list[DueServiceResponse])
async def due_tomorrow(
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
) -> list[DueServiceResponse]:
    """Scheduled services on the next calendar day."""
    services = await all_services(db)
    return [to_due_service_response(service) for service in services_due_tomorrow(services, now)]


@router.get("/overdue-clients", response_model=list[OverdueClientResponse])
async def overdue_clients(
    limit: int | None = Query(default=None, ge=1),
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
) -> list[OverdueClientResponse]:
    """Clients whose return reminder date has passed, most overdue first."""
    overdue = clients_overdue_for_return(await all_clients(db), now)
    if limit is not None:
        overdue = overdue[:limit]
    return [to_overdue_client_response(client) for client in overdue]


@router.get("/upcoming", response_model=list[ServiceResponse])
async def upcoming(
    limit: int = Query(default=3, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> list[ServiceResponse]:
    """Services not yet completed, earliest first."""
    services = upcoming_services(await all_services(db), limit)
    return [to_service_response(service, service.client) for service in services]


@router.post("/notify", response_model=list[NotificationResponse])
async def notify(
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
    redis_pool=Depends(get_redis),
) -> list[NotificationResponse]:
    """Run the reminder check once and return only new notifications."""
    notifier = ReminderNotifier(redis_pool)
    notifications = await notifier.run_once(db, now)
    return [
        NotificationResponse(
            service_id=item.service_id,
            title=item.title,
            body=item.body,
            icon=item.icon if isinstance(item.icon, str) else None,
        )
        for item in notifications
    ]
