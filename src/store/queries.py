"""Whole-collection reads feeding the aggregation and reminder projections."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.models.client import Client
from src.models.financial import FinancialRecord
from src.models.service import Service, ServiceStatus


async def all_services(
    session: AsyncSession, *, status: ServiceStatus | None = None
) -> Sequence[Service]:
    """Services with their client eagerly loaded, newest first."""
    stmt = (
        select(Service)
        .options(selectinload(Service.client))
        .order_by(Service.date.desc(), Service.id.desc())
    )
    if status is not None:
        stmt = stmt.where(Service.status == status)
    result = await session.execute(stmt)
    return result.scalars().all()


async def all_clients(session: AsyncSession) -> Sequence[Client]:
    result = await session.execute(select(Client).order_by(Client.name, Client.id))
    return result.scalars().all()


async def all_financial_records(session: AsyncSession) -> Sequence[FinancialRecord]:
    """Ledger rows, newest first."""
    result = await session.execute(
        select(FinancialRecord).order_by(
            FinancialRecord.date.desc(), FinancialRecord.id.desc()
        )
    )
    return result.scalars().all()
