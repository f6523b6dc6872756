"""
Server-side sessions

The browser only ever holds a signed session id cookie. Session contents live
in a process-wide SessionStore keyed by that id, with a fixed time-to-live
from the last write and a periodic prune of expired entries.
"""
import logging
import secrets
import threading
import time
from datetime import timedelta

from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)
DEFAULT_CHECK_PERIOD = timedelta(hours=24)


class SessionStore:
    """
    In-memory key-value store for session data.

    Entries expire ``ttl`` after they were last written. Expired entries are
    never returned; they are physically removed by ``prune()``, which also
    runs automatically at most once per ``check_period`` on store access.
    """

    def __init__(self, ttl=DEFAULT_TTL, check_period=DEFAULT_CHECK_PERIOD, clock=None):
        self.ttl = ttl
        self.check_period = check_period
        self._clock = clock or time.time
        self._lock = threading.Lock()
        self._data = {}
        self._last_prune = self._clock()

    def get(self, sid):
        """Return a copy of the session data, or None if missing/expired"""
        now = self._clock()
        with self._lock:
            self._maybe_prune(now)
            entry = self._data.get(sid)
            if entry is None:
                return None
            expires_at, data = entry
            if expires_at <= now:
                del self._data[sid]
                return None
            return dict(data)

    def set(self, sid, data, ttl=None):
        ttl = ttl or self.ttl
        now = self._clock()
        with self._lock:
            self._maybe_prune(now)
            self._data[sid] = (now + ttl.total_seconds(), dict(data))

    def delete(self, sid):
        with self._lock:
            self._data.pop(sid, None)

    def prune(self):
        """Remove expired entries. Returns the number removed."""
        now = self._clock()
        with self._lock:
            return self._prune(now)

    def active_count(self):
        """Number of unexpired entries"""
        now = self._clock()
        with self._lock:
            return sum(1 for expires_at, _ in self._data.values() if expires_at > now)

    def __len__(self):
        with self._lock:
            return len(self._data)

    def __contains__(self, sid):
        return self.get(sid) is not None

    def _maybe_prune(self, now):
        if now - self._last_prune >= self.check_period.total_seconds():
            self._prune(now)

    def _prune(self, now):
        expired = [sid for sid, (expires_at, _) in self._data.items() if expires_at <= now]
        for sid in expired:
            del self._data[sid]
        self._last_prune = now
        if expired:
            logger.info("Pruned %d expired session(s)", len(expired))
        return len(expired)


class StoreSession(CallbackDict, SessionMixin):
    """Session dict backed by a SessionStore entry"""

    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True

        CallbackDict.__init__(self, initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False
        self.destroyed = False


class StoreSessionInterface(SessionInterface):
    """Flask session interface that keeps session data in a SessionStore"""

    session_class = StoreSession
    salt = 'registry-session'

    def __init__(self, store):
        self.store = store

    def _get_signer(self, app):
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt)

    @staticmethod
    def generate_sid():
        return secrets.token_urlsafe(32)

    def open_session(self, app, request):
        signer = self._get_signer(app)
        if signer is None:
            return None

        cookie = request.cookies.get(self.get_cookie_name(app))
        if cookie:
            try:
                sid = signer.unsign(cookie).decode('utf-8')
            except BadSignature:
                sid = None
            if sid:
                data = self.store.get(sid)
                if data is not None:
                    return self.session_class(data, sid=sid)

        # Unknown, expired or tampered ids are never reused
        return self.session_class(sid=self.generate_sid(), new=True)

    def regenerate(self, session):
        """Move the session to a fresh id, dropping the old store entry"""
        if not session.new:
            self.store.delete(session.sid)
        session.sid = self.generate_sid()
        session.new = True
        session.modified = True

    def destroy(self, session):
        """Drop a session: its store entry now, its cookie on save"""
        session.clear()
        session.destroyed = True
        self.store.delete(session.sid)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)
        secure = self.get_cookie_secure(app)
        samesite = self.get_cookie_samesite(app)
        httponly = self.get_cookie_httponly(app)

        if not session:
            if session.modified:
                if not session.destroyed:
                    self.store.delete(session.sid)
                response.delete_cookie(
                    name, domain=domain, path=path,
                    secure=secure, samesite=samesite, httponly=httponly,
                )
            return

        # No sliding renewal: the TTL restarts only when the session is written
        if not session.modified:
            return

        lifetime = app.permanent_session_lifetime
        self.store.set(session.sid, dict(session), ttl=lifetime)
        signed = self._get_signer(app).sign(session.sid.encode('utf-8')).decode('utf-8')
        response.set_cookie(
            name,
            signed,
            max_age=int(lifetime.total_seconds()),
            httponly=httponly,
            domain=domain,
            path=path,
            secure=secure,
            samesite=samesite,
        )
