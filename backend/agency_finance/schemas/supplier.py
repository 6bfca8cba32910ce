from datetime import datetime
from pydantic import BaseModel, Field

from ..models.supplier import SupplierType


class SupplierBase(BaseModel):
    """Base supplier fields."""
    name: str = Field(min_length=1, max_length=255)
    supplier_type: SupplierType
    document: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = Field(default=None, max_length=2)
    postal_code: str | None = None
    notes: str | None = None


class SupplierCreate(SupplierBase):
    """Fields for creating a supplier."""
    pass


class SupplierUpdate(BaseModel):
    """Fields for updating a supplier (all optional)."""
    name: str | None = Field(default=None, min_length=1, max_length=255)
    supplier_type: SupplierType | None = None
    document: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = Field(default=None, max_length=2)
    postal_code: str | None = None
    notes: str | None = None


class SupplierResponse(SupplierBase):
    """Supplier response with all fields."""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
