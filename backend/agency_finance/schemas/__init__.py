from .category import CategoryCreate, CategoryUpdate, CategoryResponse
from .client import ClientCreate, ClientUpdate, ClientResponse
from .supplier import SupplierCreate, SupplierUpdate, SupplierResponse
from .ledger_entry import EntryCreate, EntryUpdate, EntryStatusUpdate, EntryResponse
from .recurring import (
    ObligationCreate,
    ObligationUpdate,
    ObligationResponse,
    ObligationCreatedResponse,
)
from .audit import AuditLogResponse
from .report import (
    SummaryItem,
    MonthlyItem,
    CategoryShareItem,
    CategoryBreakdownItem,
    ChartSeries,
    DashboardResponse,
)

__all__ = [
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "ClientCreate",
    "ClientUpdate",
    "ClientResponse",
    "SupplierCreate",
    "SupplierUpdate",
    "SupplierResponse",
    "EntryCreate",
    "EntryUpdate",
    "EntryStatusUpdate",
    "EntryResponse",
    "ObligationCreate",
    "ObligationUpdate",
    "ObligationResponse",
    "ObligationCreatedResponse",
    "AuditLogResponse",
    "SummaryItem",
    "MonthlyItem",
    "CategoryShareItem",
    "CategoryBreakdownItem",
    "ChartSeries",
    "DashboardResponse",
]
