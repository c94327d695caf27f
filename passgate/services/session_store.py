"""Server-side session storage.

Sessions are kept by Flask-Session; the cookie carries only a signed random
id, so a session can be invalidated by deleting it from the backend. The
``sqlalchemy`` backend keeps rows in the ``sessions`` table, the ``redis``
backend one key per session with a native TTL.
"""
import logging
from typing import Optional

import redis
from flask import current_app
from flask_session.base import ServerSideSession
from sqlalchemy.exc import SQLAlchemyError

from passgate.exceptions.base import StorageError
from passgate.utils.constants import SessionKey

logger = logging.getLogger(__name__)

BACKEND_ERRORS = (SQLAlchemyError, redis.RedisError)


class ServerSession(ServerSideSession):
    """Session payload with typed accessors for the gateway's keys.

    A value of the wrong type is treated as absent.
    """

    @property
    def logged_in(self) -> bool:
        return self.get(SessionKey.LOGGED_IN) is True

    def mark_logged_in(self):
        """Flag the session as authenticated and move it to a fresh id."""
        self[SessionKey.LOGGED_IN] = True
        current_app.session_interface.regenerate(self)

    @property
    def registration_state(self) -> Optional[dict]:
        return self._typed(SessionKey.REGISTRATION_STATE, dict)

    @registration_state.setter
    def registration_state(self, state):
        self[SessionKey.REGISTRATION_STATE] = state

    def pop_registration_state(self) -> Optional[dict]:
        return self._pop_typed(SessionKey.REGISTRATION_STATE, dict)

    @property
    def authentication_state(self) -> Optional[dict]:
        return self._typed(SessionKey.AUTHENTICATION_STATE, dict)

    @authentication_state.setter
    def authentication_state(self, state):
        self[SessionKey.AUTHENTICATION_STATE] = state

    def pop_authentication_state(self) -> Optional[dict]:
        return self._pop_typed(SessionKey.AUTHENTICATION_STATE, dict)

    @property
    def redirect_url(self) -> Optional[str]:
        return self._typed(SessionKey.REDIRECT_URL, str)

    @redirect_url.setter
    def redirect_url(self, url):
        self[SessionKey.REDIRECT_URL] = url

    def pop_redirect_url(self) -> Optional[str]:
        return self._pop_typed(SessionKey.REDIRECT_URL, str)

    def _typed(self, key, expected):
        value = self.get(key)
        return value if isinstance(value, expected) else None

    def _pop_typed(self, key, expected):
        if key not in self:
            return None
        value = self.pop(key)
        return value if isinstance(value, expected) else None

    def __repr__(self):
        return f"<ServerSession keys={sorted(self.keys())}>"


class SessionStore:
    """Direct access to the sessions kept by the Flask-Session interface.

    Requests go through the session interface itself; this is what jobs and
    commands use outside of a request.
    """

    def __init__(self, interface, lifetime):
        self.interface = interface
        self.lifetime = lifetime

    @classmethod
    def from_app(cls, app):
        """Build a store over the application's session interface."""
        return cls(app.session_interface, app.permanent_session_lifetime)

    def _store_id(self, sid):
        return self.interface._get_store_id(sid)

    def create(self) -> ServerSession:
        """Allocate a fresh, empty session; nothing is written until it is saved."""
        return ServerSession(
            sid=self.interface._generate_sid(self.interface.sid_length),
            permanent=self.interface.permanent,
        )

    def load(self, sid) -> Optional[ServerSession]:
        """Load a session, returning None if it is missing or expired."""
        try:
            data = self.interface._retrieve_session_data(self._store_id(sid))
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to load session: {e}")
            raise StorageError()

        if data is None:
            return None
        return ServerSession(data, sid=sid)

    def save(self, session: ServerSession):
        """Persist the session data and refresh its expiry."""
        try:
            self.interface._upsert_session(self.lifetime, session, self._store_id(session.sid))
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to save session: {e}")
            raise StorageError()
        session.modified = False

    def delete(self, sid):
        """Remove a session."""
        try:
            self.interface._delete_session(self._store_id(sid))
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to delete session: {e}")
            raise StorageError()

    def purge_expired(self) -> int:
        """Remove expired sessions and return how many were removed."""
        model = getattr(self.interface, "sql_session_model", None)
        if model is None:
            # Redis evicts keys whose TTL ran out
            return 0

        try:
            before = model.query.count()
            self.interface._delete_expired_sessions()
            purged = before - model.query.count()
        except SQLAlchemyError as e:
            self.interface.client.session.rollback()
            logger.error(f"Failed to purge expired sessions: {e}")
            raise StorageError()

        logger.info(f"Purged {purged} expired sessions")
        return purged


def get_session_store() -> SessionStore:
    """Get the session store of the current application."""
    return current_app.extensions["passgate.session_store"]
