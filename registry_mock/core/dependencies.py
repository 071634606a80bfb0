from typing import Optional

from fastapi import Request

from registry_mock.core.config import ServerConfig
from registry_mock.domain.entities import Registry
from registry_mock.domain.models import UserRecord
from registry_mock.services.authentication import SessionManager

# Everything lives on `app.state` (set up by `create_app`), so each
# application instance owns its own store.


def get_config(request: Request) -> ServerConfig:
    return request.app.state.config


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_registry(request: Request) -> Registry:
    return request.app.state.registry


def get_current_user(request: Request) -> Optional[UserRecord]:
    config = get_config(request)
    session_id = request.cookies.get(config.session_cookie)
    return get_sessions(request).get_user_for_session(session_id)
