from datetime import date
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session, joinedload

from ..config import Settings
from ..database import get_db
from ..models import LedgerEntry, EntryKind, EntryStatus
from ..money import to_display
from ..schemas import (
    SummaryItem,
    MonthlyItem,
    CategoryShareItem,
    CategoryBreakdownItem,
    ChartSeries,
    DashboardResponse,
)
from ..services.aggregation import (
    EntryFilters,
    MonthBucket,
    CategoryBreakdown,
    aggregate,
    filter_entries,
    group_by_category,
    group_by_month,
    monthly_evolution,
    percentage_display,
    summarize,
)
from ..services.export_service import export_rows, rows_to_csv
from ..services.payees import PayeeDirectory
from .deps import get_settings

router = APIRouter()


def report_filters(
    kind: EntryKind | None = Query(None),
    status: EntryStatus | None = Query(None),
    category_id: int | None = Query(None),
    payee_id: int | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
) -> EntryFilters:
    """Report filters. The date range applies to payment date for paid entries, due date otherwise."""
    return EntryFilters(
        kind=kind,
        status=status,
        category_id=category_id,
        payee_id=payee_id,
        start_date=start_date,
        end_date=end_date,
    )


def _load_entries(db: Session, filters: EntryFilters | None = None) -> list[LedgerEntry]:
    """Fetch entries, narrowing in SQL on everything but the date range."""
    query = db.query(LedgerEntry).options(joinedload(LedgerEntry.category))

    if filters is not None:
        if filters.kind:
            query = query.filter(LedgerEntry.kind == filters.kind)
        if filters.status:
            query = query.filter(LedgerEntry.status == filters.status)
        if filters.category_id:
            query = query.filter(LedgerEntry.category_id == filters.category_id)
        if filters.payee_id:
            query = query.filter(LedgerEntry.payee_id == filters.payee_id)

    entries = query.order_by(LedgerEntry.due_date.desc(), LedgerEntry.id.desc()).all()
    return filter_entries(entries, filters)


def _summary_item(summary) -> SummaryItem:
    return SummaryItem(**summary.as_dict())


def _monthly_items(buckets: list[MonthBucket]) -> list[MonthlyItem]:
    return [
        MonthlyItem(
            label=b.label,
            year=b.year,
            month=b.month,
            income=to_display(b.income),
            expense=to_display(b.expense),
            balance=to_display(b.balance),
        )
        for b in buckets
    ]


def _breakdown_item(breakdown: CategoryBreakdown) -> CategoryBreakdownItem:
    return CategoryBreakdownItem(
        kind=breakdown.kind,
        grand_total=to_display(breakdown.grand_total),
        categories=[
            CategoryShareItem(
                category_name=b.name,
                total=to_display(b.total),
                count=b.count,
                percentage=percentage_display(b.percentage),
            )
            for b in breakdown.buckets
        ],
    )


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    filters: EntryFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Everything the financial dashboard shows, for the filtered period."""
    all_entries = _load_entries(db)
    report = aggregate(all_entries, filters, locale=settings.month_locale)

    return DashboardResponse(
        summary=_summary_item(report.summary),
        overall=_summary_item(summarize(all_entries)),
        by_month=_monthly_items(report.by_month),
        income_by_category=_breakdown_item(report.income_by_category),
        expense_by_category=_breakdown_item(report.expense_by_category),
        expense_chart=ChartSeries(**report.expense_by_category.chart()),
    )


@router.get("/summary", response_model=SummaryItem)
def summary(
    filters: EntryFilters = Depends(report_filters),
    db: Session = Depends(get_db),
):
    """Income and expense totals, paid and pending, with balances."""
    return _summary_item(summarize(_load_entries(db, filters)))


@router.get("/by-month", response_model=list[MonthlyItem])
def by_month(
    filters: EntryFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Monthly income/expense history. Pending entries not yet due are left out."""
    buckets = group_by_month(_load_entries(db, filters), locale=settings.month_locale)
    return _monthly_items(buckets)


@router.get("/by-category", response_model=CategoryBreakdownItem)
def by_category(
    filters: EntryFilters = Depends(report_filters),
    breakdown_kind: EntryKind = Query(EntryKind.EXPENSE, alias="breakdown"),
    db: Session = Depends(get_db),
):
    """Totals and shares per category for income or expense entries."""
    return _breakdown_item(group_by_category(_load_entries(db, filters), breakdown_kind))


@router.get("/by-category/chart", response_model=ChartSeries)
def by_category_chart(
    filters: EntryFilters = Depends(report_filters),
    breakdown_kind: EntryKind = Query(EntryKind.EXPENSE, alias="breakdown"),
    db: Session = Depends(get_db),
):
    """Category totals as chart labels and values."""
    return ChartSeries(**group_by_category(_load_entries(db, filters), breakdown_kind).chart())


@router.get("/evolution", response_model=list[MonthlyItem])
def evolution(
    year: int | None = Query(None),
    filters: EntryFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Month-by-month income, expense and balance for a whole year."""
    year = year or date.today().year
    buckets = monthly_evolution(_load_entries(db, filters), year, locale=settings.month_locale)
    return _monthly_items(buckets)


@router.get("/export.csv")
def export_csv(
    filters: EntryFilters = Depends(report_filters),
    db: Session = Depends(get_db),
):
    """Filtered entries as a semicolon-separated CSV file."""
    payees = PayeeDirectory(db)
    rows = export_rows(
        _load_entries(db, filters),
        payee_name=lambda e: payees.name_for(e.payee_id, e.payee_kind),
    )
    return Response(
        content=rows_to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="transacoes_financeiras.csv"'},
    )
