from .recurrence import expand_due_dates, generate_entries, ExpansionResult
from .aggregation import (
    EntryFilters,
    FinancialReport,
    aggregate,
    summarize,
    group_by_month,
    group_by_category,
    monthly_evolution,
)
from .export_service import export_rows, rows_to_csv
from .audit import Actor, record_audit
from .payees import PayeeDirectory

__all__ = [
    "expand_due_dates",
    "generate_entries",
    "ExpansionResult",
    "EntryFilters",
    "FinancialReport",
    "aggregate",
    "summarize",
    "group_by_month",
    "group_by_category",
    "monthly_evolution",
    "export_rows",
    "rows_to_csv",
    "Actor",
    "record_audit",
    "PayeeDirectory",
]
