from .base import Base
from .ledger_entry import LedgerEntry, EntryKind, EntryStatus, PayeeKind
from .category import Category
from .client import Client
from .supplier import Supplier, SupplierType
from .recurring_obligation import RecurringObligation, ObligationStatus
from .audit_log import AuditLog

__all__ = [
    "Base",
    "LedgerEntry",
    "EntryKind",
    "EntryStatus",
    "PayeeKind",
    "Category",
    "Client",
    "Supplier",
    "SupplierType",
    "RecurringObligation",
    "ObligationStatus",
    "AuditLog",
]
