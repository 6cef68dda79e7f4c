"""Services (cleaning appointments) API endpoints."""

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.api.deps import get_db
from src.api.errors import http_error
from src.core.errors import DomainError
from src.lifecycle import engine
from src.models.client import Client
from src.models.service import Service, ServiceStatus
from src.store.app_settings import load_settings

router = APIRouter(prefix="/api/services", tags=["services"])


class ServiceCreateRequest(BaseModel):
    """Payload for booking a service."""

    client_id: int = Field(gt=0)
    date: datetime
    value: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    payment_method: str | None = Field(default=None, max_length=50)
    installments: int = Field(default=1, ge=1)
    notes: str | None = None


class ServiceUpdateRequest(BaseModel):
    """Sparse patch; only fields present in the body are written."""

    status: ServiceStatus | None = None
    photos_before: list[str] | None = None
    photos_after: list[str] | None = None
    value: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    payment_method: str | None = Field(default=None, max_length=50)
    installments: int | None = Field(default=None, ge=1)
    signature: str | None = None
    notes: str | None = None
    date: datetime | None = None


class ServiceResponse(BaseModel):
    """Service response model, denormalized with client contact fields."""

    id: int
    client_id: int
    client_name: str
    client_phone: str | None
    client_address: str | None
    date: datetime
    status: str
    photos_before: list[str]
    photos_after: list[str]
    value: float
    payment_method: str | None
    installments: int
    signature: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime | None


class ServiceListResponse(BaseModel):
    """Paginated service list response."""

    items: list[ServiceResponse]
    total: int
    limit: int
    offset: int


class ReceiptResponse(BaseModel):
    """Data needed to render a service receipt."""

    service_id: int
    company_name: str | None
    logo: str | None
    date: datetime
    client_name: str
    client_address: str | None
    client_phone: str | None
    description: str
    value: float
    payment_method: str | None
    installments: int
    signature: str | None
    photo_before: str | None
    photo_after: str | None
    next_recommended_cleaning: datetime


RECEIPT_DESCRIPTION = "Limpeza e Higienização Profissional"


def to_service_response(service: Service, client: Client) -> ServiceResponse:
    """Map a service and its client to the response model."""
    return ServiceResponse(
        id=service.id,
        client_id=service.client_id,
        client_name=client.name,
        client_phone=client.phone,
        client_address=client.address,
        date=service.date,
        status=service.status.value,
        photos_before=list(service.photos_before or []),
        photos_after=list(service.photos_after or []),
        value=float(service.value or 0),
        payment_method=service.payment_method,
        installments=service.installments,
        signature=service.signature,
        notes=service.notes,
        created_at=service.created_at,
        updated_at=service.updated_at,
    )


async def _respond(db: AsyncSession, service: Service) -> ServiceResponse:
    client = await db.get(Client, service.client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return to_service_response(service, client)


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    payload: ServiceCreateRequest,
    db: AsyncSession = Depends(get_db),
) -> ServiceResponse:
    """Book a service in scheduled status."""
    try:
        service = await engine.create_service(
            db,
            client_id=payload.client_id,
            date=payload.date,
            value=payload.value,
            payment_method=payload.payment_method,
            installments=payload.installments,
            notes=payload.notes,
        )
    except DomainError as exc:
        raise http_error(exc) from exc
    return await _respond(db, service)


@router.get("", response_model=ServiceListResponse)
async def list_services(
    status_filter: ServiceStatus | None = Query(default=None, alias="status"),
    client_id: int | None = Query(default=None, gt=0),
    day: date | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> ServiceListResponse:
    """List services newest first, optionally by status, client or calendar day."""
    filters = []
    if status_filter is not None:
        filters.append(Service.status == status_filter)
    if client_id is not None:
        filters.append(Service.client_id == client_id)
    if day is not None:
        start = datetime.combine(day, time.min)
        filters.append(Service.date >= start)
        filters.append(Service.date < start + timedelta(days=1))

    count_stmt = select(func.count(Service.id))
    list_stmt = (
        select(Service)
        .options(selectinload(Service.client))
        .order_by(Service.date.desc(), Service.id.desc())
    )
    if filters:
        count_stmt = count_stmt.where(*filters)
        list_stmt = list_stmt.where(*filters)

    total_result = await db.execute(count_stmt)
    total = int(total_result.scalar() or 0)

    services_result = await db.execute(list_stmt.limit(limit).offset(offset))
    services = services_result.scalars().all()

    return ServiceListResponse(
        items=[to_service_response(service, service.client) for service in services],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
) -> ServiceResponse:
    """Get service by ID."""
    try:
        service = await engine.get_service(db, service_id)
    except DomainError as exc:
        raise http_error(exc) from exc
    return await _respond(db, service)


@router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    payload: ServiceUpdateRequest,
    db: AsyncSession = Depends(get_db),
) -> ServiceResponse:
    """Merge fields into a service; completing it posts income and a reminder."""
    changes = payload.model_dump(exclude_unset=True)
    try:
        service = await engine.update_service(db, service_id, changes)
    except DomainError as exc:
        raise http_error(exc) from exc
    return await _respond(db, service)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a service. Income already posted for it stays in the ledger."""
    try:
        await engine.delete_service(db, service_id)
    except DomainError as exc:
        raise http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{service_id}/receipt", response_model=ReceiptResponse)
async def get_receipt(
    service_id: int,
    db: AsyncSession = Depends(get_db),
) -> ReceiptResponse:
    """Receipt data with company branding and the first photo of each set."""
    try:
        service = await engine.get_service(db, service_id)
    except DomainError as exc:
        raise http_error(exc) from exc
    client = await db.get(Client, service.client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    branding = await load_settings(db)

    photos_before = service.photos_before or []
    photos_after = service.photos_after or []
    return ReceiptResponse(
        service_id=service.id,
        company_name=branding.get("company_name"),
        logo=branding.get("logo"),
        date=service.date,
        client_name=client.name,
        client_address=client.address,
        client_phone=client.phone,
        description=RECEIPT_DESCRIPTION,
        value=float(service.value or 0),
        payment_method=service.payment_method,
        installments=service.installments,
        signature=service.signature,
        photo_before=photos_before[0] if photos_before else None,
        photo_after=photos_after[0] if photos_after else None,
        next_recommended_cleaning=engine.next_reminder_date(service.date),
    )
