"""Report data endpoints.

Layout (PDF or otherwise) belongs to the client; these return the figures,
computed by the same aggregation functions as the dashboard.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db, get_now
from src.api.financials import (
    FinancialResponse,
    MonthlyTotalsResponse,
    TotalsResponse,
    to_financial_response,
    to_monthly_response,
    to_totals_response,
)
from src.finance import monthly_breakdown, summarize
from src.store.app_settings import get_setting
from src.store.queries import all_financial_records

router = APIRouter(prefix="/api/reports", tags=["reports"])


class FinancialReportResponse(BaseModel):
    """Full ledger listing with totals."""

    company_name: str | None
    generated_at: datetime
    records: list[FinancialResponse]
    totals: TotalsResponse


class MonthlyReportResponse(BaseModel):
    """Chronological month-by-month summary."""

    company_name: str | None
    generated_at: datetime
    months: list[MonthlyTotalsResponse]


@router.get("/financial", response_model=FinancialReportResponse)
async def financial_report(
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
) -> FinancialReportResponse:
    records = await all_financial_records(db)
    return FinancialReportResponse(
        company_name=await get_setting(db, "company_name"),
        generated_at=now,
        records=[to_financial_response(record) for record in records],
        totals=to_totals_response(summarize(records)),
    )


@router.get("/monthly", response_model=MonthlyReportResponse)
async def monthly_report(
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
) -> MonthlyReportResponse:
    records = await all_financial_records(db)
    return MonthlyReportResponse(
        company_name=await get_setting(db, "company_name"),
        generated_at=now,
        months=[to_monthly_response(totals) for totals in monthly_breakdown(records)],
    )
