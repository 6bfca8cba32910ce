"""
Financial aggregation for dashboards and exports.

Works on ledger entries already loaded from the database (ORM objects or any
object exposing the same attributes). Every function is a single pass over
the list and never raises on a malformed record: bad amounts count as zero,
entries without a usable date are left out of date-based groupings.

Date rule used throughout: paid entries are placed on their payment date,
everything else on its due date.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from ..models import EntryKind, EntryStatus
from ..money import ZERO, coerce_amount, round_money, to_display

logger = logging.getLogger("agency_finance.services.aggregation")

UNCATEGORIZED = "Outros"

MONTH_ABBREVIATIONS = {
    "pt-BR": ["jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"],
    "en-US": ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
}

_LABEL_FORMATS = {
    "pt-BR": "{month}. de {year:02d}",  # "jan. de 24"
    "en-US": "{month} {year:02d}",      # "Jan 24"
}

_LABEL_PATTERN = re.compile(r"^\s*([^\W\d_]+)\.?(?:\s+de)?\s+(\d{2}|\d{4})\s*$")


# ── Normalization ─────────────────────────────────────────────────────────────

def _value(raw: Any) -> Any:
    """Unwrap enums so both ORM rows and plain records compare as strings."""
    return getattr(raw, "value", raw)


def _as_date(raw: Any) -> date | None:
    if raw is None:
        return None
    if isinstance(raw, date):
        return raw if type(raw) is date else raw.date()
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError:
        return None


def entry_kind(entry) -> str | None:
    return _value(getattr(entry, "kind", None))


def entry_status(entry) -> str | None:
    return _value(getattr(entry, "status", None))


def is_paid(entry) -> bool:
    return entry_status(entry) == EntryStatus.PAID.value


def entry_amount(entry) -> Decimal:
    return coerce_amount(getattr(entry, "amount", None))


def effective_date(entry) -> date | None:
    """Payment date for paid entries (falling back to due date), due date otherwise."""
    due = _as_date(getattr(entry, "due_date", None))
    if is_paid(entry):
        return _as_date(getattr(entry, "payment_date", None)) or due
    return due


def category_label(entry) -> str:
    return getattr(entry, "category_name", None) or UNCATEGORIZED


# ── Month labels ──────────────────────────────────────────────────────────────

def month_label(year: int, month: int, locale: str = "pt-BR") -> str:
    """Short localized label for a month, e.g. "mar. de 24"."""
    names = MONTH_ABBREVIATIONS[locale]
    return _LABEL_FORMATS[locale].format(month=names[month - 1], year=year % 100)


def parse_month_label(label: str, locale: str = "pt-BR") -> date:
    """Rebuild the first day of the month a label stands for."""
    match = _LABEL_PATTERN.match(label)
    if not match:
        raise ValueError(f"Unrecognized month label: {label!r}")
    name, year_text = match.groups()
    names = [n.lower() for n in MONTH_ABBREVIATIONS[locale]]
    try:
        month = names.index(name.lower()) + 1
    except ValueError:
        raise ValueError(f"Unknown month name in label: {label!r}") from None
    year = int(year_text)
    if len(year_text) == 2:
        year += 2000
    return date(year, month, 1)


def sort_month_labels(labels: Iterable[str], locale: str = "pt-BR") -> list[str]:
    """Chronological order; label strings do not sort by date on their own."""
    return sorted(labels, key=lambda label: parse_month_label(label, locale))


# ── Filtering ─────────────────────────────────────────────────────────────────

@dataclass
class EntryFilters:
    """Criteria applied before aggregation. None means "any"."""
    kind: str | None = None
    status: str | None = None
    category_id: int | None = None
    payee_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None

    def matches(self, entry) -> bool:
        if self.kind is not None and entry_kind(entry) != _value(self.kind):
            return False
        if self.status is not None and entry_status(entry) != _value(self.status):
            return False
        if self.category_id is not None and getattr(entry, "category_id", None) != self.category_id:
            return False
        if self.payee_id is not None and getattr(entry, "payee_id", None) != self.payee_id:
            return False
        if self.start_date is not None or self.end_date is not None:
            when = effective_date(entry)
            if when is None:
                return False
            if self.start_date is not None and when < self.start_date:
                return False
            if self.end_date is not None and when > self.end_date:
                return False
        return True


def filter_entries(entries: Iterable, filters: EntryFilters | None) -> list:
    if filters is None:
        return list(entries)
    return [e for e in entries if filters.matches(e)]


# ── Results ───────────────────────────────────────────────────────────────────

@dataclass
class PeriodSummary:
    """Totals of a set of entries split by kind and payment status."""
    paid_income: Decimal = ZERO
    pending_income: Decimal = ZERO
    paid_expense: Decimal = ZERO
    pending_expense: Decimal = ZERO
    entry_count: int = 0

    @property
    def total_income(self) -> Decimal:
        return self.paid_income + self.pending_income

    @property
    def total_expense(self) -> Decimal:
        return self.paid_expense + self.pending_expense

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expense

    @property
    def realized_balance(self) -> Decimal:
        return self.paid_income - self.paid_expense

    def as_dict(self) -> dict:
        return {
            "total_income": to_display(self.total_income),
            "total_expense": to_display(self.total_expense),
            "paid_income": to_display(self.paid_income),
            "pending_income": to_display(self.pending_income),
            "paid_expense": to_display(self.paid_expense),
            "pending_expense": to_display(self.pending_expense),
            "balance": to_display(self.balance),
            "realized_balance": to_display(self.realized_balance),
            "entry_count": self.entry_count,
        }


@dataclass
class MonthBucket:
    """Income and expense of one calendar month."""
    label: str
    year: int
    month: int
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


@dataclass
class CategoryBucket:
    name: str
    total: Decimal = ZERO
    count: int = 0
    percentage: Decimal = ZERO


@dataclass
class CategoryBreakdown:
    """Per-category totals for one kind of entry."""
    kind: str
    buckets: list[CategoryBucket] = field(default_factory=list)
    grand_total: Decimal = ZERO

    def chart(self) -> dict:
        return {
            "labels": [b.name for b in self.buckets],
            "values": [to_display(b.total) for b in self.buckets],
        }


@dataclass
class FinancialReport:
    summary: PeriodSummary
    by_month: list[MonthBucket]
    income_by_category: CategoryBreakdown
    expense_by_category: CategoryBreakdown


# ── Groupings ─────────────────────────────────────────────────────────────────

def summarize(entries: Iterable) -> PeriodSummary:
    """Split totals into income/expense × paid/pending."""
    summary = PeriodSummary()
    for entry in entries:
        kind = entry_kind(entry)
        if kind not in (EntryKind.INCOME.value, EntryKind.EXPENSE.value):
            continue
        amount = entry_amount(entry)
        paid = is_paid(entry)
        if kind == EntryKind.INCOME.value:
            if paid:
                summary.paid_income += amount
            else:
                summary.pending_income += amount
        else:
            if paid:
                summary.paid_expense += amount
            else:
                summary.pending_expense += amount
        summary.entry_count += 1
    return summary


def group_by_month(
    entries: Iterable,
    today: date | None = None,
    locale: str = "pt-BR",
) -> list[MonthBucket]:
    """
    Monthly income/expense series for the historical chart.

    Only paid entries and pending entries already due (due date <= today)
    are included.
    """
    today = today or date.today()
    buckets: dict[str, MonthBucket] = {}

    for entry in entries:
        if not is_paid(entry):
            due = _as_date(getattr(entry, "due_date", None))
            if due is None or due > today:
                continue
        when = effective_date(entry)
        if when is None:
            continue
        label = month_label(when.year, when.month, locale)
        bucket = buckets.get(label)
        if bucket is None:
            bucket = buckets[label] = MonthBucket(label=label, year=when.year, month=when.month)
        kind = entry_kind(entry)
        if kind == EntryKind.INCOME.value:
            bucket.income += entry_amount(entry)
        elif kind == EntryKind.EXPENSE.value:
            bucket.expense += entry_amount(entry)

    return [buckets[label] for label in sort_month_labels(buckets, locale)]


def monthly_evolution(
    entries: Iterable,
    year: int,
    locale: str = "pt-BR",
) -> list[MonthBucket]:
    """
    Income, expense and balance for every month of `year`.

    All twelve months are present (zero when empty). Entries dated in other
    years get buckets of their own, kept in chronological order.
    """
    buckets: dict[str, MonthBucket] = {}
    for month in range(1, 13):
        label = month_label(year, month, locale)
        buckets[label] = MonthBucket(label=label, year=year, month=month)

    for entry in entries:
        when = effective_date(entry)
        if when is None:
            continue
        label = month_label(when.year, when.month, locale)
        bucket = buckets.get(label)
        if bucket is None:
            bucket = buckets[label] = MonthBucket(label=label, year=when.year, month=when.month)
        kind = entry_kind(entry)
        if kind == EntryKind.INCOME.value:
            bucket.income += entry_amount(entry)
        elif kind == EntryKind.EXPENSE.value:
            bucket.expense += entry_amount(entry)

    return [buckets[label] for label in sort_month_labels(buckets, locale)]


def group_by_category(entries: Iterable, kind: EntryKind | str) -> CategoryBreakdown:
    """Sum, count and share of each category among entries of one kind."""
    kind = _value(kind)
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)

    for entry in entries:
        if entry_kind(entry) != kind:
            continue
        name = category_label(entry)
        totals[name] += entry_amount(entry)
        counts[name] += 1

    grand_total = sum(totals.values(), ZERO)
    buckets = []
    for name, total in totals.items():
        percentage = total / grand_total * 100 if grand_total else ZERO
        buckets.append(CategoryBucket(name=name, total=total, count=counts[name], percentage=percentage))

    return CategoryBreakdown(kind=kind, buckets=buckets, grand_total=grand_total)


def aggregate(
    entries: Iterable,
    filters: EntryFilters | None = None,
    today: date | None = None,
    locale: str = "pt-BR",
) -> FinancialReport:
    """Filter entries, then compute the period summary and all groupings."""
    selected = filter_entries(entries, filters)
    logger.debug("Aggregating %d entries", len(selected))
    return FinancialReport(
        summary=summarize(selected),
        by_month=group_by_month(selected, today=today, locale=locale),
        income_by_category=group_by_category(selected, EntryKind.INCOME),
        expense_by_category=group_by_category(selected, EntryKind.EXPENSE),
    )


def percentage_display(value: Decimal) -> float:
    return float(round_money(value))
