"""Key/value application settings persistence."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import get_logger
from src.models.setting import AppSetting

logger = get_logger(__name__)

PUSH_NOTIFICATIONS_KEY = "push_notifications_enabled"

_LEGACY_BOOLEANS = {"true": True, "false": False}


def _decode(value: Any) -> Any:
    # Older rows stored booleans as the strings "true"/"false".
    if isinstance(value, str) and value in _LEGACY_BOOLEANS:
        return _LEGACY_BOOLEANS[value]
    return value


async def load_settings(session: AsyncSession) -> dict[str, Any]:
    """Return every stored setting as a flat mapping."""
    result = await session.execute(select(AppSetting).order_by(AppSetting.key))
    return {row.key: _decode(row.value) for row in result.scalars().all()}


async def get_setting(session: AsyncSession, key: str, default: Any = None) -> Any:
    row = await session.get(AppSetting, key)
    if row is None:
        return default
    return _decode(row.value)


async def save_setting(session: AsyncSession, key: str, value: Any) -> None:
    """Insert or replace a single setting."""
    row = await session.get(AppSetting, key)
    if row is None:
        session.add(AppSetting(key=key, value=value))
    else:
        row.value = value
    await session.flush()
    logger.info("setting_saved", key=key)


async def notifications_enabled(session: AsyncSession) -> bool:
    return bool(await get_setting(session, PUSH_NOTIFICATIONS_KEY, False))
