"""Financial ledger SQLAlchemy model."""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class RecordType(enum.Enum):
    """Direction of a ledger entry."""

    INCOME = "income"
    EXPENSE = "expense"


class FinancialRecord(Base, TimestampMixin):
    """An income or expense entry.

    Income posted by a completed service references it only through the
    description text, so ledger rows survive service deletion.
    """

    __tablename__ = "financial_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    type: Mapped[RecordType] = mapped_column(
        Enum(
            RecordType,
            name="record_type",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    category: Mapped[str | None] = mapped_column(String(100))
