"""Tests for the expansion of recurring obligations into ledger entries."""

import calendar
from datetime import date

import pytest
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError

from agency_finance.models import (
    Category,
    EntryKind,
    EntryStatus,
    LedgerEntry,
    PayeeKind,
    RecurringObligation,
)
from agency_finance.services.recurrence import (
    build_entry,
    default_payee_kind,
    due_date_for,
    expand_due_dates,
    generate_entries,
)


def _obligation(**overrides) -> RecurringObligation:
    fields = dict(
        description="Aluguel do estúdio",
        amount_cents=250000,
        kind=EntryKind.EXPENSE,
        category_id=1,
        payee_id=7,
        payee_kind=None,
        due_day=10,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 3, 31),
    )
    fields.update(overrides)
    return RecurringObligation(**fields)


class TestExpandDueDates:
    def test_one_date_per_month(self) -> None:
        dates = expand_due_dates(date(2024, 1, 1), date(2024, 3, 31), 15)
        assert dates == [date(2024, 1, 15), date(2024, 2, 15), date(2024, 3, 15)]

    @pytest.mark.parametrize("due_day", range(1, 29))
    def test_every_day_that_exists_in_all_months(self, due_day: int) -> None:
        dates = expand_due_dates(date(2023, 1, 1), date(2023, 3, 31), due_day)
        assert len(dates) == 3
        assert [d.month for d in dates] == [1, 2, 3]
        assert all(d.day == due_day for d in dates)

    @pytest.mark.parametrize("due_day", [29, 30, 31])
    def test_clamp_keeps_one_date_per_month(self, due_day: int) -> None:
        dates = expand_due_dates(date(2023, 1, 1), date(2023, 3, 31), due_day, overflow="clamp")
        assert [d.month for d in dates] == [1, 2, 3]
        for d in dates:
            assert d.day == min(due_day, calendar.monthrange(d.year, d.month)[1])

    def test_day_31_rolls_over_february_in_leap_year(self) -> None:
        dates = expand_due_dates(date(2024, 1, 5), date(2024, 3, 5), 31)
        assert dates == [date(2024, 1, 31), date(2024, 3, 2)]

    def test_day_31_rolls_over_february_in_common_year(self) -> None:
        dates = expand_due_dates(date(2023, 1, 5), date(2023, 3, 5), 31)
        assert dates == [date(2023, 1, 31), date(2023, 3, 3)]

    def test_day_31_clamped_to_end_of_february(self) -> None:
        dates = expand_due_dates(date(2024, 1, 5), date(2024, 3, 5), 31, overflow="clamp")
        assert dates == [date(2024, 1, 31), date(2024, 2, 29)]

    def test_due_day_before_start_day_skips_first_month(self) -> None:
        dates = expand_due_dates(date(2024, 1, 20), date(2024, 3, 31), 10)
        assert dates == [date(2024, 2, 10), date(2024, 3, 10)]

    def test_end_date_is_inclusive(self) -> None:
        dates = expand_due_dates(date(2024, 1, 10), date(2024, 2, 10), 10)
        assert dates == [date(2024, 1, 10), date(2024, 2, 10)]

    def test_open_ended_capped_at_twelve(self) -> None:
        dates = expand_due_dates(date(2024, 1, 20), None, 10)
        assert len(dates) == 12
        assert dates[0] == date(2024, 2, 10)
        assert dates[-1] == date(2025, 1, 10)

    def test_open_ended_custom_cap(self) -> None:
        dates = expand_due_dates(date(2024, 1, 1), None, 5, cap=3)
        assert dates == [date(2024, 1, 5), date(2024, 2, 5), date(2024, 3, 5)]

    def test_crosses_year_boundary(self) -> None:
        dates = expand_due_dates(date(2024, 11, 1), date(2025, 2, 28), 1)
        assert dates == [date(2024, 11, 1), date(2024, 12, 1), date(2025, 1, 1), date(2025, 2, 1)]

    def test_end_before_start_yields_nothing(self) -> None:
        assert expand_due_dates(date(2024, 5, 1), date(2024, 4, 1), 10) == []

    def test_walk_stops_when_cursor_passes_end(self) -> None:
        # cursor reaches Mar 20, past the end
        assert expand_due_dates(date(2024, 1, 20), date(2024, 3, 10), 5) == [date(2024, 2, 5)]

    def test_end_day_before_start_day_skips_last_month(self) -> None:
        dates = expand_due_dates(date(2024, 1, 15), date(2024, 4, 14), 1)
        assert dates == [date(2024, 2, 1), date(2024, 3, 1)]

    def test_cursor_from_month_end_clamps_without_drifting(self) -> None:
        dates = expand_due_dates(date(2024, 1, 31), date(2024, 4, 30), 30, overflow="clamp")
        assert dates == [date(2024, 2, 29), date(2024, 3, 30), date(2024, 4, 30)]

    @pytest.mark.parametrize("cap", [0, -3])
    def test_rejects_non_positive_cap(self, cap: int) -> None:
        with pytest.raises(ValueError):
            expand_due_dates(date(2024, 1, 1), None, 10, cap=cap)

    @pytest.mark.parametrize("due_day", [0, 32, -1])
    def test_rejects_out_of_range_day(self, due_day: int) -> None:
        with pytest.raises(ValueError):
            expand_due_dates(date(2024, 1, 1), date(2024, 3, 1), due_day)


class TestDueDateFor:
    def test_roll_and_clamp(self) -> None:
        assert due_date_for(2024, 4, 31) == date(2024, 5, 1)
        assert due_date_for(2024, 4, 31, "clamp") == date(2024, 4, 30)
        assert due_date_for(2024, 4, 30) == date(2024, 4, 30)


class TestBuildEntry:
    def test_default_payee_kind(self) -> None:
        assert default_payee_kind(EntryKind.EXPENSE) == PayeeKind.SUPPLIER
        assert default_payee_kind(EntryKind.INCOME) == PayeeKind.CLIENT

    def test_copies_obligation_fields(self) -> None:
        entry = build_entry(_obligation(), date(2024, 2, 10))

        assert entry.kind == EntryKind.EXPENSE
        assert entry.amount_cents == 250000
        assert entry.status == EntryStatus.PENDING
        assert entry.payment_date is None
        assert entry.due_date == date(2024, 2, 10)
        assert entry.category_id == 1
        assert entry.payee_id == 7
        assert entry.payee_kind == PayeeKind.SUPPLIER
        assert entry.description == "Aluguel do estúdio"

    def test_income_defaults_to_client(self) -> None:
        entry = build_entry(_obligation(kind=EntryKind.INCOME), date(2024, 2, 10))
        assert entry.payee_kind == PayeeKind.CLIENT

    def test_explicit_payee_kind_kept(self) -> None:
        entry = build_entry(_obligation(payee_kind=PayeeKind.CLIENT), date(2024, 2, 10))
        assert entry.payee_kind == PayeeKind.CLIENT


class TestGenerateEntries:
    @pytest.fixture
    def obligation(self, db_session) -> RecurringObligation:
        category = Category(name="Aluguel", kind=EntryKind.EXPENSE)
        db_session.add(category)
        db_session.commit()
        obligation = _obligation(category_id=category.id)
        db_session.add(obligation)
        db_session.commit()
        return obligation

    def test_persists_one_entry_per_date(self, db_session, obligation) -> None:
        result = generate_entries(db_session, obligation)

        assert result.complete
        assert len(result.created_ids) == 3
        entries = db_session.query(LedgerEntry).order_by(LedgerEntry.due_date).all()
        assert [e.due_date for e in entries] == [date(2024, 1, 10), date(2024, 2, 10), date(2024, 3, 10)]
        assert all(e.status == EntryStatus.PENDING for e in entries)

    def test_failure_keeps_earlier_entries(self, db_session, obligation) -> None:
        def fail_in_february(mapper, connection, target):
            if target.due_date.month == 2:
                raise SQLAlchemyError("disk full")

        event.listen(LedgerEntry, "before_insert", fail_in_february)
        try:
            result = generate_entries(db_session, obligation)
        finally:
            event.remove(LedgerEntry, "before_insert", fail_in_february)

        assert not result.complete
        assert result.failed_date == date(2024, 2, 10)
        assert len(result.created_ids) == 1
        assert len(result.planned) == 3
        remaining = db_session.query(LedgerEntry).all()
        assert [e.due_date for e in remaining] == [date(2024, 1, 10)]
