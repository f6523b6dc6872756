"""
Session guard

Request gates that re-validate the server-side session against the live user
record on every request, so role changes and deactivation apply immediately.

Usage:
    @bp.route('/api/users')
    @guard.require_admin
    def list_users(): ...
"""
import logging
from functools import wraps

from flask import current_app, g, session

from .constants import Role
from .exceptions import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

SESSION_USER_KEY = 'user_id'


def _load_user_by_id(user_id):
    from .services.user_service import get_user_by_id
    return get_user_by_id(user_id)


class SessionGuard:
    """
    Flask extension holding the user lookup collaborator.

    ``user_loader`` is any callable taking a user id and returning a user
    record (or None). Errors it raises are not caught here; they reach the
    app error handler as 500s.
    """

    def __init__(self, app=None, user_loader=None):
        self._default_loader = user_loader
        if app is not None:
            self.init_app(app, user_loader=user_loader)

    def init_app(self, app, user_loader=None):
        app.extensions['session_guard'] = {
            'user_loader': user_loader or self._default_loader or _load_user_by_id,
        }

    def _state(self):
        return current_app.extensions['session_guard']

    @property
    def user_loader(self):
        return self._state()['user_loader']

    def login(self, user):
        """Bind the session to a user; the store entry is written on response"""
        current_app.session_interface.regenerate(session)
        session.clear()
        session[SESSION_USER_KEY] = user.id

    def logout(self):
        current_app.session_interface.destroy(session)

    def _invalidate(self):
        """Best-effort session destruction; failures are logged, not raised"""
        try:
            current_app.session_interface.destroy(session)
        except Exception as e:
            logger.warning("Failed to destroy session: %s", e)
            session.clear()

    def resolve(self):
        """
        Resolve the session to an active user or raise UnauthorizedError.

        Sessions pointing at a missing or deactivated user are destroyed.
        """
        user_id = session.get(SESSION_USER_KEY)
        if user_id is None:
            raise UnauthorizedError()

        user = self.user_loader(user_id)
        if user is None or not user.is_active:
            logger.info("Invalidating session for missing or inactive user %s", user_id)
            self._invalidate()
            raise UnauthorizedError()

        g.current_user = user
        return user

    def require_authenticated(self, f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            self.resolve()
            return f(*args, **kwargs)
        return decorated_function

    def require_admin(self, f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = self.resolve()
            if user.role != Role.ADMIN.value:
                raise ForbiddenError()
            return f(*args, **kwargs)
        return decorated_function
