from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Category, LedgerEntry, RecurringObligation
from ..schemas import CategoryCreate, CategoryUpdate, CategoryResponse
from ..services.audit import Actor, record_audit
from .deps import get_actor

router = APIRouter()


def _snapshot(category: Category) -> dict:
    return CategoryResponse.model_validate(category).model_dump(mode="json")


@router.get("/", response_model=list[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    """Get all categories."""
    return db.query(Category).order_by(Category.name).all()


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    """Get a single category by ID."""
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.post("/", response_model=CategoryResponse, status_code=201)
def create_category(
    category: CategoryCreate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Create a new category."""
    db_category = Category(**category.model_dump())
    db.add(db_category)
    # Committed before the audit task, which uses its own session
    db.commit()
    db.refresh(db_category)

    background_tasks.add_task(
        record_audit, actor, "CREATE", "category", db_category.id,
        category.model_dump(mode="json"),
    )
    return db_category


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    category: CategoryUpdate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Update a category."""
    db_category = db.query(Category).filter(Category.id == category_id).first()
    if not db_category:
        raise HTTPException(status_code=404, detail="Category not found")

    before = _snapshot(db_category)
    update_data = category.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_category, field, value)

    db.commit()
    db.refresh(db_category)

    background_tasks.add_task(
        record_audit, actor, "UPDATE", "category", category_id,
        {"before": before, "after": _snapshot(db_category)},
    )
    return db_category


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Delete a category."""
    db_category = db.query(Category).filter(Category.id == category_id).first()
    if not db_category:
        raise HTTPException(status_code=404, detail="Category not found")

    # Check for entries and obligations still using it
    in_use = (
        db.query(LedgerEntry).filter(LedgerEntry.category_id == category_id).count()
        + db.query(RecurringObligation).filter(RecurringObligation.category_id == category_id).count()
    )
    if in_use > 0:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete category used by entries or recurring obligations"
        )

    removed = _snapshot(db_category)
    db.delete(db_category)
    db.commit()

    background_tasks.add_task(
        record_audit, actor, "DELETE", "category", category_id, {"removed": removed},
    )
    return None
