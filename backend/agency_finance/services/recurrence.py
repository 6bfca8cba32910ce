"""
Expansion of recurring obligations into dated ledger entries.

A recurring obligation produces one due date per elapsed month between its
start and end dates. Obligations without an end date are capped at one year
of generated entries.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import (
    LedgerEntry,
    RecurringObligation,
    EntryKind,
    EntryStatus,
    PayeeKind,
)

logger = logging.getLogger("agency_finance.services.recurrence")

OPEN_ENDED_CAP = 12

ROLL = "roll"
CLAMP = "clamp"


def _add_months(d: date, months: int) -> date:
    """Add months to a date, clamping day to valid range."""
    month = d.month - 1 + months
    year = d.year + month // 12
    month = month % 12 + 1
    max_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, max_day))


def _clamp_day(year: int, month: int, day: int) -> date:
    """Create a date, clamping day to the last day of the month."""
    max_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, max_day))


def _roll_day(year: int, month: int, day: int) -> date:
    """Create a date, carrying days past the end of the month into the next one."""
    return date(year, month, 1) + timedelta(days=day - 1)


def due_date_for(year: int, month: int, day: int, overflow: str = ROLL) -> date:
    """The due date for a given month; overflow is "roll" or "clamp"."""
    if overflow == CLAMP:
        return _clamp_day(year, month, day)
    return _roll_day(year, month, day)


def expand_due_dates(
    start_date: date,
    end_date: date | None,
    due_day: int,
    overflow: str = ROLL,
    cap: int = OPEN_ENDED_CAP,
) -> list[date]:
    """
    Generate the due dates of a monthly obligation.

    Walks month by month from start_date, emitting the due day of each month
    when it falls within [start_date, end_date]. The walk ends once the
    cursor passes end_date; without an end_date, it stops after `cap` dates.
    The cursor keeps the start day, clamped to short months.
    """
    if not 1 <= due_day <= 31:
        raise ValueError(f"due_day must be between 1 and 31, got {due_day}")
    if cap < 1:
        raise ValueError(f"cap must be at least 1, got {cap}")

    dates = []
    months = 0
    cursor = start_date

    while end_date is None or cursor <= end_date:
        candidate = due_date_for(cursor.year, cursor.month, due_day, overflow)
        if candidate >= start_date and (end_date is None or candidate <= end_date):
            dates.append(candidate)
        if end_date is None and len(dates) >= cap:
            break
        months += 1
        cursor = _add_months(start_date, months)

    return dates


def default_payee_kind(kind: EntryKind) -> PayeeKind:
    """Expenses are paid to suppliers, incomes come from clients."""
    return PayeeKind.SUPPLIER if kind == EntryKind.EXPENSE else PayeeKind.CLIENT


def build_entry(obligation: RecurringObligation, due_date: date) -> LedgerEntry:
    """A pending, unpaid ledger entry for one occurrence of the obligation."""
    return LedgerEntry(
        kind=obligation.kind,
        amount_cents=obligation.amount_cents,
        status=EntryStatus.PENDING,
        due_date=due_date,
        payment_date=None,
        category_id=obligation.category_id,
        payee_id=obligation.payee_id,
        payee_kind=obligation.payee_kind or default_payee_kind(obligation.kind),
        description=obligation.description,
    )


@dataclass
class ExpansionResult:
    """Outcome of persisting the entries of one obligation."""
    planned: list[date]
    created_ids: list[int] = field(default_factory=list)
    failed_date: date | None = None
    error: str | None = None

    @property
    def complete(self) -> bool:
        return self.failed_date is None


def generate_entries(
    db: Session,
    obligation: RecurringObligation,
    overflow: str = ROLL,
    cap: int = OPEN_ENDED_CAP,
) -> ExpansionResult:
    """
    Persist one ledger entry per due date of the obligation.

    Each entry is committed on its own. If an insert fails the batch stops
    there; entries already committed are kept.
    """
    due_dates = expand_due_dates(
        obligation.start_date, obligation.end_date, obligation.due_day,
        overflow=overflow, cap=cap,
    )
    result = ExpansionResult(planned=due_dates)

    for due_date in due_dates:
        entry = build_entry(obligation, due_date)
        try:
            db.add(entry)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception(
                "Failed to persist entry due %s for obligation %s; "
                "stopping after %d of %d entries",
                due_date, obligation.id, len(result.created_ids), len(due_dates),
            )
            result.failed_date = due_date
            result.error = str(e)
            break
        result.created_ids.append(entry.id)
        logger.info(
            "Generated %s entry %s due %s from obligation %s",
            entry.kind.value, entry.id, due_date, obligation.id,
        )

    return result
