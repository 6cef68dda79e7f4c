"""API module exports."""

from src.api.clients import router as clients_router
from src.api.dashboard import router as dashboard_router
from src.api.deps import get_db, get_now, get_redis
from src.api.financials import router as financials_router
from src.api.health import router as health_router
from src.api.reminders import router as reminders_router
from src.api.reports import router as reports_router
from src.api.services import router as services_router
from src.api.settings import router as settings_router

__all__ = [
    "clients_router",
    "dashboard_router",
    "financials_router",
    "get_db",
    "get_now",
    "get_redis",
    "health_router",
    "reminders_router",
    "reports_router",
    "services_router",
    "settings_router",
]
