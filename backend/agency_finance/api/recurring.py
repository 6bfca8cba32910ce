import logging
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload

from ..config import Settings
from ..database import get_db
from ..models import RecurringObligation, Category
from ..schemas import (
    ObligationCreate,
    ObligationUpdate,
    ObligationResponse,
    ObligationCreatedResponse,
)
from ..services.audit import Actor, record_audit
from ..services.payees import PayeeDirectory
from ..services.recurrence import generate_entries
from .deps import get_actor, get_settings

logger = logging.getLogger("agency_finance.api.recurring")

router = APIRouter()


def _build_response(obligation: RecurringObligation, payees: PayeeDirectory) -> ObligationResponse:
    response = ObligationResponse.model_validate(obligation)
    response.payee_name = payees.name_for(obligation.payee_id, obligation.payee_kind)
    return response


def _get_obligation(db: Session, obligation_id: int) -> RecurringObligation:
    obligation = db.query(RecurringObligation).filter(
        RecurringObligation.id == obligation_id
    ).first()
    if not obligation:
        raise HTTPException(status_code=404, detail="Recurring obligation not found")
    return obligation


def _apply(obligation: RecurringObligation, data: ObligationCreate) -> None:
    for field, value in data.model_dump(exclude={"amount"}).items():
        setattr(obligation, field, value)
    obligation.amount = data.amount


def _check_category(db: Session, category_id: int) -> None:
    if not db.query(Category.id).filter(Category.id == category_id).first():
        raise HTTPException(status_code=404, detail="Category not found")


@router.get("/", response_model=list[ObligationResponse])
def list_obligations(db: Session = Depends(get_db)):
    """Get all recurring obligations, by due day."""
    obligations = (
        db.query(RecurringObligation)
        .options(joinedload(RecurringObligation.category))
        .order_by(RecurringObligation.due_day, RecurringObligation.description)
        .all()
    )
    payees = PayeeDirectory(db)
    return [_build_response(o, payees) for o in obligations]


@router.get("/{obligation_id}", response_model=ObligationResponse)
def get_obligation(obligation_id: int, db: Session = Depends(get_db)):
    """Get a single recurring obligation by ID."""
    return _build_response(_get_obligation(db, obligation_id), PayeeDirectory(db))


@router.post("/", response_model=ObligationCreatedResponse, status_code=201)
def create_obligation(
    obligation: ObligationCreate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Create a recurring obligation and generate its ledger entries.

    One pending entry is created per month of the obligation's date range
    (at most open_ended_cap when there is no end date). If an entry fails to
    persist, generation stops there and the request fails; entries created
    before the failure are kept.
    """
    _check_category(db, obligation.category_id)

    db_obligation = RecurringObligation()
    _apply(db_obligation, obligation)
    db.add(db_obligation)
    db.commit()
    db.refresh(db_obligation)

    result = generate_entries(
        db, db_obligation,
        overflow=settings.day_overflow,
        cap=settings.open_ended_cap,
    )
    if not result.complete:
        raise HTTPException(
            status_code=500,
            detail=(
                f"Failed to generate entry due {result.failed_date.isoformat()}; "
                f"{len(result.created_ids)} of {len(result.planned)} entries were created"
            ),
        )

    logger.info(
        "Recurring obligation %s created with %d entries",
        db_obligation.id, len(result.created_ids),
    )
    db.refresh(db_obligation)
    background_tasks.add_task(
        record_audit, actor, "CREATE", "recurring", db_obligation.id,
        {**obligation.model_dump(mode="json"), "generated_entry_ids": result.created_ids},
    )
    base = _build_response(db_obligation, PayeeDirectory(db))
    return ObligationCreatedResponse(
        **base.model_dump(exclude={"amount"}),
        generated_entry_ids=result.created_ids,
        generated_due_dates=result.planned,
    )


@router.put("/{obligation_id}", response_model=ObligationResponse)
def update_obligation(
    obligation_id: int,
    obligation: ObligationUpdate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    Replace a recurring obligation.

    Entries generated at creation are left untouched and no new entries
    are generated.
    """
    db_obligation = _get_obligation(db, obligation_id)
    _check_category(db, obligation.category_id)

    payees = PayeeDirectory(db)
    before = _build_response(db_obligation, payees).model_dump(mode="json")
    _apply(db_obligation, obligation)
    db.commit()
    db.refresh(db_obligation)

    after = _build_response(db_obligation, payees)
    background_tasks.add_task(
        record_audit, actor, "UPDATE", "recurring", obligation_id,
        {"before": before, "after": after.model_dump(mode="json")},
    )
    return after


@router.delete("/{obligation_id}", status_code=204)
def delete_obligation(
    obligation_id: int,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Delete a recurring obligation. Its generated entries are kept."""
    db_obligation = _get_obligation(db, obligation_id)
    removed = _build_response(db_obligation, PayeeDirectory(db)).model_dump(mode="json")
    db.delete(db_obligation)
    db.commit()

    background_tasks.add_task(
        record_audit, actor, "DELETE", "recurring", obligation_id, {"removed": removed},
    )
    return None
