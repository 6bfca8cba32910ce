import enum
from datetime import date
from decimal import Decimal
from sqlalchemy import String, Integer, Date, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from ..money import cents_to_decimal, decimal_to_cents


class EntryKind(enum.Enum):
    """Direction of money."""
    INCOME = "income"
    EXPENSE = "expense"


class EntryStatus(enum.Enum):
    """Payment status of a ledger entry."""
    PENDING = "pending"
    PAID = "paid"


class PayeeKind(enum.Enum):
    """Which table payee_id points to."""
    CLIENT = "client"
    SUPPLIER = "supplier"


class LedgerEntry(Base, TimestampMixin):
    """
    A concrete dated financial transaction (income or expense).

    Amounts are stored as integer cents and are always positive; the kind
    carries the direction. Entries generated from a recurring obligation keep
    no link back to it.
    """

    __tablename__ = "ledger_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    kind: Mapped[EntryKind] = mapped_column(Enum(EntryKind), nullable=False, index=True)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[EntryStatus] = mapped_column(
        Enum(EntryStatus), nullable=False, default=EntryStatus.PENDING, index=True
    )

    # Dates
    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=True
    )

    # Counterparty: a client or a supplier, depending on payee_kind
    payee_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    payee_kind: Mapped[PayeeKind | None] = mapped_column(Enum(PayeeKind), nullable=True)

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    category: Mapped["Category | None"] = relationship(
        "Category", back_populates="entries"
    )

    @property
    def amount(self) -> Decimal | None:
        """Get amount as a Decimal."""
        if self.amount_cents is None:
            return None
        return cents_to_decimal(self.amount_cents)

    @amount.setter
    def amount(self, value: Decimal) -> None:
        """Set amount from a decimal value."""
        self.amount_cents = decimal_to_cents(value)

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category is not None else None

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry(id={self.id}, kind={self.kind.value}, due={self.due_date}, "
            f"amount={self.amount}, status={self.status.value})>"
        )
