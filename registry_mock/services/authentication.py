from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel

from registry_mock.domain.errors import FixtureError
from registry_mock.domain.models import UserRecord
from registry_mock.storage.base import RecordStore

logger = logging.getLogger(__name__)


class Session(BaseModel):
    session_id: str
    user_id: int
    last_login: datetime


class SessionManager:
    """
    Maps session cookies to users of the fixture store.

    Login itself is out of scope for the mock server: tests (or a seeding
    script) open a session for a user with `authenticate_as()` and send
    the returned id in the session cookie.
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self._sessions: Dict[str, Session] = {}

    def authenticate_as(self, user: UserRecord) -> str:
        if self.store.lookup("user", user.id) is None:
            raise FixtureError(f"Cannot authenticate as unknown user {user.id!r}")

        session_id = secrets.token_urlsafe(32)
        now = datetime.now(timezone.utc)
        self._sessions[session_id] = Session(session_id=session_id, user_id=user.id, last_login=now)
        logger.debug(f"Opened session for user {user.login}")
        return session_id

    def get_user_for_session(self, session_id: Optional[str]) -> Optional[UserRecord]:
        if not session_id:
            return None

        session = self._sessions.get(session_id)
        if session is None:
            return None

        user = self.store.lookup("user", session.user_id)
        if user is None:
            return None

        session.last_login = datetime.now(timezone.utc)
        return user
