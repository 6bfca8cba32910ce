from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, computed_field, model_validator

from ..models.ledger_entry import EntryKind, PayeeKind
from ..models.recurring_obligation import ObligationStatus


class ObligationBase(BaseModel):
    """Base recurring obligation fields."""
    description: str = Field(min_length=1, max_length=255)
    kind: EntryKind
    category_id: int
    payee_id: int | None = None
    payee_kind: PayeeKind | None = None
    due_day: int = Field(ge=1, le=31)
    start_date: date
    end_date: date | None = None
    status: ObligationStatus = ObligationStatus.ACTIVE

    @model_validator(mode="after")
    def check_date_range(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ObligationCreate(ObligationBase):
    """Fields for creating a recurring obligation."""
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)


class ObligationUpdate(ObligationCreate):
    """Full replacement of a recurring obligation. Does not regenerate entries."""
    pass


class ObligationResponse(ObligationBase):
    """Recurring obligation response."""
    id: int
    amount_cents: int
    category_name: str | None = None
    payee_name: str | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def amount(self) -> float:
        return self.amount_cents / 100.0

    class Config:
        from_attributes = True


class ObligationCreatedResponse(ObligationResponse):
    """Creation response, including the generated ledger entries."""
    generated_entry_ids: list[int]
    generated_due_dates: list[date]
