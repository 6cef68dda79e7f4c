"""Financial aggregation over the income/expense ledger."""

from src.finance.aggregation import (
    MonthlyTotals,
    Totals,
    current_month_totals,
    month_key,
    monthly_breakdown,
    net,
    parse_month_key,
    records_in_month,
    summarize,
    totals_by_type,
)

__all__ = [
    "MonthlyTotals",
    "Totals",
    "current_month_totals",
    "month_key",
    "monthly_breakdown",
    "net",
    "parse_month_key",
    "records_in_month",
    "summarize",
    "totals_by_type",
]
