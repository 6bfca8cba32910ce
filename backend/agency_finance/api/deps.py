from fastapi import Header, Request

from ..config import Settings
from ..services.audit import Actor, ANONYMOUS_NAME


def get_actor(
    x_user_id: int = Header(0),
    x_user_name: str | None = Header(None),
) -> Actor:
    """Request-scoped identity of the caller, used for audit records."""
    return Actor(user_id=x_user_id, user_name=x_user_name or ANONYMOUS_NAME)


def get_settings(request: Request) -> Settings:
    """Settings the application was started with."""
    return request.app.state.settings
