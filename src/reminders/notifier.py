"""Tomorrow's-appointment notifications with one-shot deduplication.

Each service is announced at most once: the first run that sees it claims a
``reminder:<service_id>`` marker in Redis and later runs skip it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core import clock
from src.core.config import settings
from src.core.logging import get_logger
from src.core.redis import claim_marker
from src.reminders.evaluator import services_due_tomorrow
from src.store.app_settings import get_setting, notifications_enabled
from src.store.queries import all_services

if TYPE_CHECKING:
    import redis.asyncio as redis

logger = get_logger(__name__)

NOTIFICATION_TITLE = "Lembrete de Serviço"


@dataclass(frozen=True)
class ReminderNotification:
    """A notification ready to be delivered."""

    service_id: int
    client_name: str
    service_date: datetime
    title: str
    body: str
    icon: Any = None


def reminder_key(service_id: int) -> str:
    return f"reminder:{service_id}"


def notification_body(client_name: str, service_date: datetime) -> str:
    return f"Serviço com {client_name} amanhã às {service_date:%H:%M}."


class ReminderNotifier:
    """Evaluates due-tomorrow services and claims their markers."""

    def __init__(
        self,
        redis_pool: "redis.Redis",
        marker_ttl_seconds: int | None = None,
    ) -> None:
        self.redis = redis_pool
        self.marker_ttl_seconds = (
            settings.reminder_marker_ttl_seconds
            if marker_ttl_seconds is None
            else marker_ttl_seconds
        )

    async def run_once(
        self, session: AsyncSession, now: datetime
    ) -> list[ReminderNotification]:
        """Return notifications for services not announced before.

        Nothing is claimed while push notifications are disabled, so turning
        them on later still announces tomorrow's services.
        """
        if not await notifications_enabled(session):
            logger.debug("reminder_check_skipped", reason="notifications_disabled")
            return []

        due = services_due_tomorrow(await all_services(session), now)
        icon = await get_setting(session, "logo")

        notifications: list[ReminderNotification] = []
        for service in due:
            claimed = await claim_marker(
                self.redis, reminder_key(service.id), self.marker_ttl_seconds
            )
            if not claimed:
                continue
            client_name = service.client.name
            notifications.append(
                ReminderNotification(
                    service_id=service.id,
                    client_name=client_name,
                    service_date=service.date,
                    title=NOTIFICATION_TITLE,
                    body=notification_body(client_name, service.date),
                    icon=icon,
                )
            )
            logger.info("reminder_notified", service_id=service.id)
        return notifications


async def reminder_loop(
    session_factory: async_sessionmaker[AsyncSession],
    notifier: ReminderNotifier,
    interval_seconds: float,
) -> None:
    """Re-run the reminder check every ``interval_seconds`` until cancelled.

    A failed check is logged and retried on the next tick.
    """
    while True:
        try:
            async with session_factory() as session:
                await notifier.run_once(session, clock.now())
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("reminder_check_failed", error=str(exc))
        await asyncio.sleep(interval_seconds)
