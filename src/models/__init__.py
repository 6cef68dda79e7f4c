"""SQLAlchemy models for the AF Clean application."""

from src.models.base import Base
from src.models.client import Client
from src.models.financial import FinancialRecord, RecordType
from src.models.service import Service, ServiceStatus
from src.models.setting import AppSetting

__all__ = [
    "Base",
    "AppSetting",
    "Client",
    "FinancialRecord",
    "RecordType",
    "Service",
    "ServiceStatus",
]
