"""Financial ledger API endpoints."""

from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db
from src.core.clock import to_business_time
from src.core.logging import get_logger
from src.finance import monthly_breakdown, parse_month_key, summarize
from src.finance.aggregation import MonthlyTotals, Totals
from src.models.financial import FinancialRecord, RecordType
from src.store.queries import all_financial_records

logger = get_logger(__name__)

router = APIRouter(prefix="/api/financials", tags=["financials"])


class FinancialCreateRequest(BaseModel):
    """Payload for a manual ledger entry."""

    type: RecordType
    description: str | None = None
    amount: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    date: datetime
    category: str | None = Field(default=None, max_length=100)


class FinancialUpdateRequest(BaseModel):
    """Payload for editing a ledger entry."""

    type: RecordType | None = None
    description: str | None = None
    amount: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    date: datetime | None = None
    category: str | None = Field(default=None, max_length=100)


class FinancialResponse(BaseModel):
    """Ledger entry response model."""

    id: int
    type: str
    description: str | None
    amount: float
    date: datetime
    category: str | None
    created_at: datetime
    updated_at: datetime | None


class FinancialListResponse(BaseModel):
    """Paginated ledger response."""

    items: list[FinancialResponse]
    total: int
    limit: int
    offset: int


class TotalsResponse(BaseModel):
    """Income, expense and net profit."""

    income: float
    expense: float
    net: float


class MonthlyTotalsResponse(TotalsResponse):
    """Totals for one calendar month."""

    month: str
    label: str


class FinancialSummaryResponse(BaseModel):
    """Overall totals with the per-month breakdown, oldest month first."""

    totals: TotalsResponse
    months: list[MonthlyTotalsResponse]


def to_financial_response(record: FinancialRecord) -> FinancialResponse:
    """Map SQLAlchemy ledger model to response model."""
    return FinancialResponse(
        id=record.id,
        type=record.type.value,
        description=record.description,
        amount=float(record.amount),
        date=record.date,
        category=record.category,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def to_totals_response(totals: Totals) -> TotalsResponse:
    return TotalsResponse(
        income=float(totals.income),
        expense=float(totals.expense),
        net=float(totals.net),
    )


def to_monthly_response(totals: MonthlyTotals) -> MonthlyTotalsResponse:
    return MonthlyTotalsResponse(
        month=totals.key,
        label=totals.label,
        income=float(totals.income),
        expense=float(totals.expense),
        net=float(totals.net),
    )


async def _get_record_or_404(db: AsyncSession, record_id: int) -> FinancialRecord:
    record = await db.get(FinancialRecord, record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Financial record not found")
    return record


@router.post("", response_model=FinancialResponse, status_code=status.HTTP_201_CREATED)
async def create_financial(
    payload: FinancialCreateRequest,
    db: AsyncSession = Depends(get_db),
) -> FinancialResponse:
    """Record a manual income or expense."""
    record = FinancialRecord(
        type=payload.type,
        description=payload.description,
        amount=payload.amount,
        date=to_business_time(payload.date),
        category=payload.category,
    )
    db.add(record)
    await db.flush()
    logger.info("financial_record_created", record_id=record.id, type=record.type.value)
    return to_financial_response(record)


@router.get("", response_model=FinancialListResponse)
async def list_financials(
    type_filter: RecordType | None = Query(default=None, alias="type"),
    month: str | None = Query(default=None, pattern=r"^\d{4}-\d{2}$"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> FinancialListResponse:
    """List ledger entries newest first, optionally by type or ``YYYY-MM``."""
    filters = []
    if type_filter is not None:
        filters.append(FinancialRecord.type == type_filter)
    if month is not None:
        try:
            year, month_number = parse_month_key(month)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        start = datetime(year, month_number, 1)
        end = datetime(year + 1, 1, 1) if month_number == 12 else datetime(year, month_number + 1, 1)
        filters.append(FinancialRecord.date >= start)
        filters.append(FinancialRecord.date < end)

    count_stmt = select(func.count(FinancialRecord.id))
    list_stmt = select(FinancialRecord).order_by(
        FinancialRecord.date.desc(), FinancialRecord.id.desc()
    )
    if filters:
        count_stmt = count_stmt.where(*filters)
        list_stmt = list_stmt.where(*filters)

    total_result = await db.execute(count_stmt)
    total = int(total_result.scalar() or 0)

    records_result = await db.execute(list_stmt.limit(limit).offset(offset))
    records = records_result.scalars().all()

    return FinancialListResponse(
        items=[to_financial_response(record) for record in records],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/summary", response_model=FinancialSummaryResponse)
async def financial_summary(
    db: AsyncSession = Depends(get_db),
) -> FinancialSummaryResponse:
    """Overall totals plus the monthly summary cards."""
    records = await all_financial_records(db)
    return FinancialSummaryResponse(
        totals=to_totals_response(summarize(records)),
        months=[to_monthly_response(totals) for totals in monthly_breakdown(records)],
    )


@router.get("/{record_id}", response_model=FinancialResponse)
async def get_financial(
    record_id: int,
    db: AsyncSession = Depends(get_db),
) -> FinancialResponse:
    """Get ledger entry by ID."""
    record = await _get_record_or_404(db, record_id)
    return to_financial_response(record)


@router.patch("/{record_id}", response_model=FinancialResponse)
async def update_financial(
    record_id: int,
    payload: FinancialUpdateRequest,
    db: AsyncSession = Depends(get_db),
) -> FinancialResponse:
    """Partially update a ledger entry."""
    record = await _get_record_or_404(db, record_id)

    updates = payload.model_dump(exclude_unset=True)
    for field in ("type", "amount", "date"):
        if field in updates and updates[field] is None:
            raise HTTPException(status_code=422, detail=f"{field} cannot be null")
    if "date" in updates:
        updates["date"] = to_business_time(updates["date"])
    for field, value in updates.items():
        setattr(record, field, value)

    await db.flush()
    return to_financial_response(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_financial(
    record_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a ledger entry."""
    record = await _get_record_or_404(db, record_id)
    await db.delete(record)
    await db.flush()
    logger.info("financial_record_deleted", record_id=record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
