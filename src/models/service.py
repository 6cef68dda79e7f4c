"""Service (cleaning appointment) SQLAlchemy model."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.client import Client

JSONList = JSON().with_variant(JSONB(), "postgresql")


class ServiceStatus(enum.Enum):
    """Enumeration of service statuses, in lifecycle order."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Service(Base, TimestampMixin):
    """A scheduled cleaning appointment for a client."""

    __tablename__ = "services"

    id: Mapped[int] = mapped_column(primary_key=True)
    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id"), nullable=False, index=True
    )
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    status: Mapped[ServiceStatus] = mapped_column(
        Enum(
            ServiceStatus,
            name="service_status",
            values_callable=lambda members: [member.value for member in members],
        ),
        default=ServiceStatus.SCHEDULED,
        nullable=False,
    )
    photos_before: Mapped[list[str]] = mapped_column(JSONList, default=list, nullable=False)
    photos_after: Mapped[list[str]] = mapped_column(JSONList, default=list, nullable=False)
    value: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    payment_method: Mapped[str | None] = mapped_column(String(50))
    installments: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    signature: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    client: Mapped["Client"] = relationship(back_populates="services")

    __mapper_args__ = {"version_id_col": version}
