"""Dashboard endpoint: today's work, this month's money, pending reminders."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db, get_now
from src.api.financials import MonthlyTotalsResponse, to_monthly_response
from src.api.reminders import (
    DueServiceResponse,
    OverdueClientResponse,
    to_due_service_response,
    to_overdue_client_response,
)
from src.api.services import ServiceResponse, to_service_response
from src.finance import current_month_totals
from src.reminders import (
    clients_overdue_for_return,
    count_completed,
    services_due_tomorrow,
    services_on_day,
    upcoming_services,
)
from src.store.queries import all_clients, all_financial_records, all_services

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

DASHBOARD_LIST_LIMIT = 3


class DashboardResponse(BaseModel):
    """Figures and short lists shown on the home screen."""

    services_today: int
    completed_services: int
    current_month: MonthlyTotalsResponse
    due_tomorrow: list[DueServiceResponse]
    upcoming: list[ServiceResponse]
    overdue_clients: list[OverdueClientResponse]


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    """Assemble the dashboard from the current collections."""
    services = await all_services(db)
    clients = await all_clients(db)
    records = await all_financial_records(db)

    overdue = clients_overdue_for_return(clients, now)[:DASHBOARD_LIST_LIMIT]
    return DashboardResponse(
        services_today=len(services_on_day(services, now.date())),
        completed_services=count_completed(services),
        current_month=to_monthly_response(current_month_totals(records, now)),
        due_tomorrow=[
            to_due_service_response(service)
            for service in services_due_tomorrow(services, now)
        ],
        upcoming=[
            to_service_response(service, service.client)
            for service in upcoming_services(services, DASHBOARD_LIST_LIMIT)
        ],
        overdue_clients=[to_overdue_client_response(client) for client in overdue],
    )
