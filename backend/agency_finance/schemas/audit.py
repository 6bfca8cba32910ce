from datetime import datetime
from pydantic import BaseModel


class AuditLogResponse(BaseModel):
    id: int
    user_id: int
    user_name: str
    action: str
    entity: str
    entity_id: int | None = None
    details: dict
    created_at: datetime

    class Config:
        from_attributes = True
