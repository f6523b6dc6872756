from flask import g

from registry.extensions import guard


def require_auth(f):
    """
    Require a session bound to an active user.
    The resolved user is available as g.current_user inside the view.
    """
    return guard.require_authenticated(f)


def require_admin(f):
    """
    Require a session bound to an active admin.
    Usage: @require_admin
    """
    return guard.require_admin(f)


def get_current_user():
    """User resolved by the guard for this request, or None"""
    return g.get('current_user')
