from sqlalchemy.orm import Session

from ..models import Client, Supplier, PayeeKind


class PayeeDirectory:
    """
    Resolves counterparty names for ledger entries.

    Names are loaded once per instance; use one directory per request.
    Used for display and grouping only, never for validation.
    """

    def __init__(self, db: Session):
        self.db = db
        self._names: dict[PayeeKind, dict[int, str]] | None = None

    def _load(self) -> dict[PayeeKind, dict[int, str]]:
        if self._names is None:
            self._names = {
                PayeeKind.CLIENT: dict(self.db.query(Client.id, Client.name).all()),
                PayeeKind.SUPPLIER: dict(self.db.query(Supplier.id, Supplier.name).all()),
            }
        return self._names

    def name_for(self, payee_id: int | None, payee_kind: PayeeKind | None) -> str | None:
        """Name of a client or supplier, None when unknown."""
        if payee_id is None or payee_kind is None:
            return None
        return self._load()[payee_kind].get(payee_id)
