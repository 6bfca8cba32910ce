from datetime import datetime
from pydantic import BaseModel, Field


class ClientBase(BaseModel):
    """Base client fields."""
    name: str = Field(min_length=1, max_length=255)
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    document: str | None = None  # CPF/CNPJ
    notes: str | None = None


class ClientCreate(ClientBase):
    """Fields for creating a client."""
    pass


class ClientUpdate(BaseModel):
    """Fields for updating a client (all optional)."""
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    document: str | None = None
    notes: str | None = None


class ClientResponse(ClientBase):
    """Client response with all fields."""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
