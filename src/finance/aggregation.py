"""Ledger aggregation functions.

Pure functions over sequences of financial records:
- totals_by_type: sum of amounts for one record type
- net: income minus expense, the only place profit is computed
- monthly_breakdown: per-calendar-month income/expense/net, chronological
- records_in_month / current_month_totals: calendar-month filtering
- summarize: overall income/expense/net

All functions use Decimal arithmetic and hold no state. Dashboard, monthly
summary and report endpoints call these, so their figures always agree.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from src.models.financial import RecordType

ZERO = Decimal("0")

MONTH_NAMES_PT_BR = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


class LedgerEntry(Protocol):
    """Shape of a ledger row as seen by the aggregation functions."""

    type: RecordType
    amount: Decimal
    date: datetime


@dataclass(frozen=True)
class Totals:
    """Income, expense and derived net for a set of records."""

    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return net(self.income, self.expense)


@dataclass(frozen=True)
class MonthlyTotals(Totals):
    """Totals for one calendar month.

    Attributes:
        year: Calendar year.
        month: Calendar month, 1-12.
    """

    year: int = 0
    month: int = 0

    @property
    def key(self) -> str:
        """Locale-independent sort key, e.g. ``2024-01``."""
        return month_key(self.year, self.month)

    @property
    def label(self) -> str:
        """pt-BR display label, e.g. ``janeiro 2024``."""
        return f"{MONTH_NAMES_PT_BR[self.month - 1]} {self.year}"


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    """Parse a ``YYYY-MM`` key.

    Raises:
        ValueError: If the key is malformed or the month is out of range.
    """
    year_text, sep, month_text = key.partition("-")
    if not sep or len(year_text) != 4 or len(month_text) != 2:
        raise ValueError(f"month must look like YYYY-MM, got {key!r}")
    year, month = int(year_text), int(month_text)
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range in {key!r}")
    return year, month


def _as_type(value: RecordType | str) -> RecordType:
    return value if isinstance(value, RecordType) else RecordType(value)


def _amount(entry: LedgerEntry) -> Decimal:
    amount = entry.amount
    if amount is None:
        return ZERO
    return amount if isinstance(amount, Decimal) else Decimal(str(amount))


def net(income: Decimal, expense: Decimal) -> Decimal:
    """Net profit: income minus expense."""
    return income - expense


def totals_by_type(records: Iterable[LedgerEntry], record_type: RecordType | str) -> Decimal:
    """Sum ``amount`` over records of ``record_type``."""
    wanted = _as_type(record_type)
    return sum(
        (_amount(record) for record in records if _as_type(record.type) is wanted),
        ZERO,
    )


def summarize(records: Sequence[LedgerEntry]) -> Totals:
    """Overall income, expense and net for ``records``."""
    return Totals(
        income=totals_by_type(records, RecordType.INCOME),
        expense=totals_by_type(records, RecordType.EXPENSE),
    )


def records_in_month(
    records: Iterable[LedgerEntry], year: int, month: int
) -> list[LedgerEntry]:
    """Records dated within the given calendar month of the given year."""
    return [
        record
        for record in records
        if record.date.year == year and record.date.month == month
    ]


def current_month_totals(records: Iterable[LedgerEntry], now: datetime) -> MonthlyTotals:
    """Totals for the calendar month containing ``now``."""
    in_month = records_in_month(records, now.year, now.month)
    totals = summarize(in_month)
    return MonthlyTotals(
        income=totals.income,
        expense=totals.expense,
        year=now.year,
        month=now.month,
    )


def monthly_breakdown(records: Iterable[LedgerEntry]) -> list[MonthlyTotals]:
    """Group records by calendar month.

    Returns:
        One MonthlyTotals per month that has records, oldest month first.
    """
    income: dict[tuple[int, int], Decimal] = {}
    expense: dict[tuple[int, int], Decimal] = {}
    for record in records:
        bucket = (record.date.year, record.date.month)
        income.setdefault(bucket, ZERO)
        expense.setdefault(bucket, ZERO)
        if _as_type(record.type) is RecordType.INCOME:
            income[bucket] += _amount(record)
        else:
            expense[bucket] += _amount(record)

    return [
        MonthlyTotals(
            income=income[bucket],
            expense=expense[bucket],
            year=bucket[0],
            month=bucket[1],
        )
        for bucket in sorted(income)
    ]
