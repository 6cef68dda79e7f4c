"""Client SQLAlchemy model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.service import Service


class Client(Base, TimestampMixin):
    """A household served by the business.

    ``last_service_date`` and ``next_reminder_date`` are written only when
    one of the client's services completes.
    """

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(String(50))
    last_service_date: Mapped[datetime | None] = mapped_column(DateTime)
    next_reminder_date: Mapped[datetime | None] = mapped_column(DateTime, index=True)

    # Relationships
    services: Mapped[list["Service"]] = relationship(back_populates="client")
