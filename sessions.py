"""Server-side sessions: the cookie holds an opaque id, data lives in storage."""

import secrets

from flask.sessions import SessionInterface, SessionMixin
from werkzeug.datastructures import CallbackDict

SID_BYTES = 32


def new_sid() -> str:
    return secrets.token_urlsafe(SID_BYTES)


class ServerSideSession(CallbackDict, SessionMixin):

    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True

        CallbackDict.__init__(self, initial, on_update)
        self.sid = sid or new_sid()
        self.new = new
        self.modified = False
        self.previous_sid = None

    def rotate(self) -> None:
        """Move the data to a fresh id; the old id is destroyed on save."""
        if self.previous_sid is None and not self.new:
            self.previous_sid = self.sid
        self.sid = new_sid()
        self.modified = True


def rotate_session_id(session) -> None:
    if isinstance(session, ServerSideSession):
        session.rotate()


class StorageSessionInterface(SessionInterface):
    """Loads and saves sessions through ``IStorage.session_store``."""

    def __init__(self, get_store):
        # resolved per call so tests can swap the app's storage
        self._get_store = get_store

    def open_session(self, app, request):
        sid = request.cookies.get(self.get_cookie_name(app))
        if sid:
            data = self._get_store(app).get(sid)
            if data is not None:
                return ServerSideSession(data, sid=sid)
        return ServerSideSession(new=True)

    def save_session(self, app, session, response):
        store = self._get_store(app)
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if session.previous_sid is not None:
            store.destroy(session.previous_sid)
            session.previous_sid = None

        if not session:
            if session.modified:
                store.destroy(session.sid)
                response.delete_cookie(
                    name,
                    domain=domain,
                    path=path,
                    secure=self.get_cookie_secure(app),
                    samesite=self.get_cookie_samesite(app),
                    httponly=self.get_cookie_httponly(app),
                )
            return

        if not self.should_set_cookie(app, session):
            return

        store.set(session.sid, dict(session))
        response.set_cookie(
            name,
            session.sid,
            expires=self.get_expiration_time(app, session),
            httponly=self.get_cookie_httponly(app),
            domain=domain,
            path=path,
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
        )
