import enum
from sqlalchemy import String, Integer, Enum
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class SupplierType(enum.Enum):
    """Legal nature of a supplier."""
    PERSON = "person"
    COMPANY = "company"


class Supplier(Base, TimestampMixin):
    """A supplier. Suppliers are the usual counterparty of expense entries."""

    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    supplier_type: Mapped[SupplierType] = mapped_column(
        Enum(SupplierType), nullable=False
    )
    document: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)

    # Contact details
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def __repr__(self) -> str:
        return f"<Supplier(id={self.id}, name='{self.name}', type={self.supplier_type.value})>"
