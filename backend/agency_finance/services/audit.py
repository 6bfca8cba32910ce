import logging
from dataclasses import dataclass
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError

from ..database import get_session
from ..models import AuditLog

logger = logging.getLogger("agency_finance.services.audit")

ANONYMOUS_NAME = "Desconhecido"


@dataclass(frozen=True)
class Actor:
    """Who is performing the current request."""
    user_id: int = 0
    user_name: str = ANONYMOUS_NAME


def record_audit(
    actor: Actor,
    action: str,
    entity: str,
    entity_id: int | None,
    details: dict | None = None,
) -> None:
    """
    Write an audit record in its own session.

    Runs after the audited change has been committed. Failures are logged
    and never propagate to the request.
    """
    try:
        session = get_session()
    except RuntimeError:
        logger.warning("Audit skipped for %s %s %s: database not ready", action, entity, entity_id)
        return

    try:
        session.add(AuditLog(
            user_id=actor.user_id,
            user_name=actor.user_name,
            action=action,
            entity=entity,
            entity_id=entity_id,
            details=jsonable_encoder(details or {}),
        ))
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to record audit log (%s %s %s)", action, entity, entity_id)
    finally:
        session.close()
