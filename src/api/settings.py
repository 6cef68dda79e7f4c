"""Application settings (branding and preferences) API endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, StrictBool
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db
from src.store.app_settings import load_settings, save_setting

router = APIRouter(prefix="/api/settings", tags=["settings"])


class SettingUpdateRequest(BaseModel):
    """Upsert of one setting key."""

    key: str = Field(min_length=1, max_length=100)
    value: StrictBool | str | None


@router.get("", response_model=dict[str, Any])
async def get_settings(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    """All settings as a flat key/value mapping."""
    return await load_settings(db)


@router.post("", response_model=dict[str, Any])
async def set_setting(
    payload: SettingUpdateRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Insert or replace one setting and return the full mapping."""
    await save_setting(db, payload.key.strip(), payload.value)
    return await load_settings(db)
