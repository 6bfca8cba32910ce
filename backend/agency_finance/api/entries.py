from datetime import date
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from ..database import get_db
from ..models import LedgerEntry, Category, EntryKind, EntryStatus, PayeeKind
from ..schemas import EntryCreate, EntryUpdate, EntryStatusUpdate, EntryResponse
from ..services.audit import Actor, record_audit
from ..services.payees import PayeeDirectory
from .deps import get_actor

router = APIRouter()


def _build_response(entry: LedgerEntry, payees: PayeeDirectory) -> EntryResponse:
    """Build EntryResponse including the resolved payee name."""
    response = EntryResponse.model_validate(entry)
    response.payee_name = payees.name_for(entry.payee_id, entry.payee_kind)
    return response


def _get_entry(db: Session, entry_id: int) -> LedgerEntry:
    entry = db.query(LedgerEntry).filter(LedgerEntry.id == entry_id).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


def _check_category(db: Session, category_id: int) -> None:
    if not db.query(Category.id).filter(Category.id == category_id).first():
        raise HTTPException(status_code=404, detail="Category not found")


def _stamp_payment_date(entry: LedgerEntry) -> None:
    """Paid entries without a payment date are taken as paid today."""
    if entry.status == EntryStatus.PAID and entry.payment_date is None:
        entry.payment_date = date.today()


@router.get("/", response_model=list[EntryResponse])
def list_entries(
    kind: EntryKind | None = Query(None),
    status: EntryStatus | None = Query(None),
    category_id: int | None = Query(None),
    payee_id: int | None = Query(None),
    payee_kind: PayeeKind | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Get ledger entries with optional filters.

    start_date/end_date bound the due date. Newest due date first.
    """
    query = db.query(LedgerEntry).options(joinedload(LedgerEntry.category))

    if kind:
        query = query.filter(LedgerEntry.kind == kind)
    if status:
        query = query.filter(LedgerEntry.status == status)
    if category_id:
        query = query.filter(LedgerEntry.category_id == category_id)
    if payee_id:
        query = query.filter(LedgerEntry.payee_id == payee_id)
    if payee_kind:
        query = query.filter(LedgerEntry.payee_kind == payee_kind)
    if start_date:
        query = query.filter(LedgerEntry.due_date >= start_date)
    if end_date:
        query = query.filter(LedgerEntry.due_date <= end_date)

    entries = query.order_by(LedgerEntry.due_date.desc(), LedgerEntry.id.desc()).all()
    payees = PayeeDirectory(db)
    return [_build_response(e, payees) for e in entries]


@router.get("/{entry_id}", response_model=EntryResponse)
def get_entry(entry_id: int, db: Session = Depends(get_db)):
    """Get a single entry by ID."""
    return _build_response(_get_entry(db, entry_id), PayeeDirectory(db))


@router.post("/", response_model=EntryResponse, status_code=201)
def create_entry(
    entry: EntryCreate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Create a new ledger entry."""
    _check_category(db, entry.category_id)

    db_entry = LedgerEntry(**entry.model_dump(exclude={"amount"}))
    db_entry.amount = entry.amount
    _stamp_payment_date(db_entry)
    db.add(db_entry)
    # Committed before the audit task, which uses its own session
    db.commit()
    db.refresh(db_entry)

    background_tasks.add_task(
        record_audit, actor, "CREATE", "entry", db_entry.id, entry.model_dump(mode="json"),
    )
    return _build_response(db_entry, PayeeDirectory(db))


@router.put("/{entry_id}", response_model=EntryResponse)
def update_entry(
    entry_id: int,
    entry: EntryUpdate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    Replace a ledger entry.

    Omitted optional fields are cleared. A paid entry without a payment date
    gets today's date.
    """
    db_entry = _get_entry(db, entry_id)
    _check_category(db, entry.category_id)
    payees = PayeeDirectory(db)
    before = _build_response(db_entry, payees).model_dump(mode="json")

    for field, value in entry.model_dump(exclude={"amount"}).items():
        setattr(db_entry, field, value)
    db_entry.amount = entry.amount
    _stamp_payment_date(db_entry)

    db.commit()
    db.refresh(db_entry)

    after = _build_response(db_entry, payees)
    background_tasks.add_task(
        record_audit, actor, "UPDATE", "entry", entry_id,
        {"before": before, "after": after.model_dump(mode="json")},
    )
    return after


@router.patch("/{entry_id}/status", response_model=EntryResponse)
def update_entry_status(
    entry_id: int,
    request: EntryStatusUpdate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    Mark an entry as paid or pending.

    Marking an entry paid without a payment date stamps today's date.
    """
    db_entry = _get_entry(db, entry_id)
    previous = db_entry.status
    db_entry.status = request.status

    if request.payment_date is not None:
        db_entry.payment_date = request.payment_date
    _stamp_payment_date(db_entry)

    db.commit()
    db.refresh(db_entry)

    background_tasks.add_task(
        record_audit, actor, "STATUS", "entry", entry_id,
        {"from": previous.value, "to": db_entry.status.value, "payment_date": db_entry.payment_date},
    )
    return _build_response(db_entry, PayeeDirectory(db))


@router.delete("/{entry_id}", status_code=204)
def delete_entry(
    entry_id: int,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Delete a ledger entry."""
    db_entry = _get_entry(db, entry_id)
    removed = _build_response(db_entry, PayeeDirectory(db)).model_dump(mode="json")

    db.delete(db_entry)
    db.commit()

    background_tasks.add_task(
        record_audit, actor, "DELETE", "entry", entry_id, {"removed": removed},
    )
    return None
