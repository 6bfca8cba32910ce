import enum
from datetime import date
from decimal import Decimal
from sqlalchemy import String, Integer, Date, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from .ledger_entry import EntryKind, PayeeKind
from ..money import cents_to_decimal, decimal_to_cents


class ObligationStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class RecurringObligation(Base, TimestampMixin):
    """
    A fixed monthly bill or income ("fixed account").

    Expanded into one pending ledger entry per month when it is created.
    Day-of-month overflow: by default day=31 in a 30-day month rolls into the
    next month; see services.recurrence.
    """

    __tablename__ = "recurring_obligations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[EntryKind] = mapped_column(Enum(EntryKind), nullable=False)

    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=False
    )
    payee_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    payee_kind: Mapped[PayeeKind | None] = mapped_column(Enum(PayeeKind), nullable=True)

    # Schedule
    due_day: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-31
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)  # null = open-ended

    status: Mapped[ObligationStatus] = mapped_column(
        Enum(ObligationStatus), nullable=False, default=ObligationStatus.ACTIVE
    )

    # Relationships
    category: Mapped["Category"] = relationship("Category")

    @property
    def amount(self) -> Decimal:
        return cents_to_decimal(self.amount_cents)

    @amount.setter
    def amount(self, value: Decimal) -> None:
        self.amount_cents = decimal_to_cents(value)

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category is not None else None

    def __repr__(self) -> str:
        return (
            f"<RecurringObligation(id={self.id}, description='{self.description}', "
            f"due_day={self.due_day})>"
        )
