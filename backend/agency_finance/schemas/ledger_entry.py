from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, computed_field

from ..models.ledger_entry import EntryKind, EntryStatus, PayeeKind


class EntryBase(BaseModel):
    """Base ledger entry fields."""
    kind: EntryKind
    due_date: date
    payment_date: date | None = None
    category_id: int
    payee_id: int
    payee_kind: PayeeKind
    description: str | None = None
    status: EntryStatus = EntryStatus.PENDING


class EntryCreate(EntryBase):
    """Fields for creating a ledger entry."""
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)


class EntryUpdate(EntryCreate):
    """Full replacement of a ledger entry."""
    pass


class EntryStatusUpdate(BaseModel):
    """Mark an entry paid or pending."""
    status: EntryStatus
    payment_date: date | None = None


class EntryResponse(BaseModel):
    """Ledger entry response with resolved display names."""
    id: int
    kind: EntryKind
    amount_cents: int
    status: EntryStatus
    due_date: date
    payment_date: date | None = None
    category_id: int | None = None
    category_name: str | None = None
    payee_id: int | None = None
    payee_kind: PayeeKind | None = None
    payee_name: str | None = None
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def amount(self) -> float:
        """Amount in currency units."""
        return self.amount_cents / 100.0

    class Config:
        from_attributes = True
