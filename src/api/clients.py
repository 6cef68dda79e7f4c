"""Clients API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db
from src.core.logging import get_logger
from src.models.client import Client

logger = get_logger(__name__)

router = APIRouter(prefix="/api/clients", tags=["clients"])


class ClientCreateRequest(BaseModel):
    """Payload for creating a client."""

    name: str = Field(min_length=1, max_length=255)
    address: str | None = None
    phone: str | None = Field(default=None, max_length=50)


class ClientUpdateRequest(BaseModel):
    """Payload for editing a client's contact details.

    Service history dates are not editable here; they follow completions.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = None
    phone: str | None = Field(default=None, max_length=50)


class ClientResponse(BaseModel):
    """Client response model."""

    id: int
    name: str
    address: str | None
    phone: str | None
    last_service_date: datetime | None
    next_reminder_date: datetime | None
    created_at: datetime
    updated_at: datetime | None


class ClientListResponse(BaseModel):
    """Paginated client list response."""

    items: list[ClientResponse]
    total: int
    limit: int
    offset: int


def to_client_response(client: Client) -> ClientResponse:
    """Map SQLAlchemy client model to response model."""
    return ClientResponse(
        id=client.id,
        name=client.name,
        address=client.address,
        phone=client.phone,
        last_service_date=client.last_service_date,
        next_reminder_date=client.next_reminder_date,
        created_at=client.created_at,
        updated_at=client.updated_at,
    )


async def _get_client_or_404(db: AsyncSession, client_id: int) -> Client:
    client = await db.get(Client, client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreateRequest,
    db: AsyncSession = Depends(get_db),
) -> ClientResponse:
    """Create a new client."""
    client = Client(
        name=payload.name.strip(),
        address=payload.address,
        phone=payload.phone,
    )
    db.add(client)
    await db.flush()
    logger.info("client_created", client_id=client.id)
    return to_client_response(client)


@router.get("", response_model=ClientListResponse)
async def list_clients(
    search: str | None = Query(default=None, min_length=1),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> ClientListResponse:
    """List clients alphabetically, optionally searching name, phone or address."""
    filters = []
    if search:
        search_pattern = f"%{search.strip().lower()}%"
        filters.append(
            or_(
                func.lower(Client.name).like(search_pattern),
                func.lower(func.coalesce(Client.phone, "")).like(search_pattern),
                func.lower(func.coalesce(Client.address, "")).like(search_pattern),
            )
        )

    count_stmt = select(func.count(Client.id))
    list_stmt = select(Client).order_by(Client.name, Client.id)
    if filters:
        count_stmt = count_stmt.where(*filters)
        list_stmt = list_stmt.where(*filters)

    total_result = await db.execute(count_stmt)
    total = int(total_result.scalar() or 0)

    clients_result = await db.execute(list_stmt.limit(limit).offset(offset))
    clients = clients_result.scalars().all()

    return ClientListResponse(
        items=[to_client_response(client) for client in clients],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    db: AsyncSession = Depends(get_db),
) -> ClientResponse:
    """Get client by ID."""
    client = await _get_client_or_404(db, client_id)
    return to_client_response(client)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    payload: ClientUpdateRequest,
    db: AsyncSession = Depends(get_db),
) -> ClientResponse:
    """Partially update name, address or phone."""
    client = await _get_client_or_404(db, client_id)

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("name") is not None:
        client.name = updates["name"].strip()
    if "address" in updates:
        client.address = updates["address"]
    if "phone" in updates:
        client.phone = updates["phone"]

    await db.flush()
    return to_client_response(client)
