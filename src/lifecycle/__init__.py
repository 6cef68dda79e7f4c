"""Service lifecycle: status transitions and completion side effects."""

from src.lifecycle.engine import (
    create_service,
    delete_service,
    get_service,
    next_reminder_date,
    update_service,
)
from src.lifecycle.state_machine import ServiceStateMachine, advance

__all__ = [
    "ServiceStateMachine",
    "advance",
    "create_service",
    "delete_service",
    "get_service",
    "next_reminder_date",
    "update_service",
]
