from sqlalchemy import String, Integer, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from .ledger_entry import EntryKind


class Category(Base, TimestampMixin):
    """
    Financial category for ledger entries and recurring obligations.
    Each category belongs to either the income or the expense side.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[EntryKind] = mapped_column(Enum(EntryKind), nullable=False)

    # Relationships
    entries: Mapped[list["LedgerEntry"]] = relationship(
        "LedgerEntry", back_populates="category"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}', kind={self.kind.value})>"
