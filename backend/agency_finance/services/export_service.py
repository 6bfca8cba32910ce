"""Flat row export of ledger entries (CSV)."""

import csv
from dataclasses import dataclass
from datetime import date
from io import StringIO
from typing import Iterable

from .aggregation import category_label, entry_amount, entry_kind, entry_status
from ..money import round_money

EXPORT_HEADERS = ["Data", "Tipo", "Categoria", "Favorecido/Cliente", "Valor", "Status"]


@dataclass
class ExportRow:
    """One exported ledger entry."""
    date: date | None
    kind: str | None
    category: str
    payee: str
    amount: str
    status: str | None

    def as_list(self) -> list[str]:
        return [
            self.date.isoformat() if self.date else "",
            self.kind or "",
            self.category,
            self.payee,
            self.amount,
            self.status or "",
        ]


def export_rows(entries: Iterable, payee_name=lambda entry: None) -> list[ExportRow]:
    """
    Build export rows: date, type, category, payee, amount, status.

    The date column is the due date. payee_name is called with each entry
    and returns its counterparty display name.
    """
    rows = []
    for entry in entries:
        rows.append(ExportRow(
            date=getattr(entry, "due_date", None),
            kind=entry_kind(entry),
            category=category_label(entry),
            payee=payee_name(entry) or "-",
            amount=str(round_money(entry_amount(entry))),
            status=entry_status(entry),
        ))
    return rows


def rows_to_csv(rows: Iterable[ExportRow], delimiter: str = ";") -> str:
    """Render rows with a header line."""
    output = StringIO()
    writer = csv.writer(output, delimiter=delimiter, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for row in rows:
        writer.writerow(row.as_list())
    return output.getvalue()
