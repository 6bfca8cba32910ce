from datetime import datetime
from pydantic import BaseModel, Field

from ..models.ledger_entry import EntryKind


class CategoryBase(BaseModel):
    """Base category fields."""
    name: str = Field(min_length=1, max_length=255)
    kind: EntryKind


class CategoryCreate(CategoryBase):
    """Fields for creating a category."""
    pass


class CategoryUpdate(BaseModel):
    """Fields for updating a category (all optional)."""
    name: str | None = Field(default=None, min_length=1, max_length=255)
    kind: EntryKind | None = None


class CategoryResponse(CategoryBase):
    """Category response with all fields."""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
