from fastapi import Request

from b2_relay.b2.session import B2Session
from b2_relay.config.settings import Settings


def get_settings_from_app(request: Request) -> Settings:
    """Settings dependency."""
    return request.app.state.settings


def get_b2_session(request: Request) -> B2Session:
    """B2 session dependency; one per app, shared by every request."""
    return request.app.state.b2
