"""
User Service
Account creation, lookup and partial updates
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from registry.constants import Role, values
from registry.exceptions import ConflictError, NotFoundError, ValidationError
from registry.extensions import db
from registry.models import User
from .identity_service import assign_role

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('name', 'email', 'phone', 'role', 'is_active')


def get_user_by_id(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_by_username(username: str) -> Optional[User]:
    return User.query.filter_by(username=username).first()


def count_users() -> int:
    return User.query.count()


def create_user(
    username: str,
    password: str,
    name: str,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    role: Optional[str] = None,
    bootstrap: bool = False,
) -> User:
    """
    Create a user account.

    When no explicit role is given the role comes from assign_role. The user
    count and the insert are not serialized: two signups that both see an
    empty store both become admin.

    Raises:
        ConflictError: username already taken
    """
    if role is None:
        role = assign_role(count_users(), bootstrap).value
    elif role not in values(Role):
        raise ValidationError(f'Field "role" must be one of: {", ".join(values(Role))}')

    if get_user_by_username(username):
        raise ConflictError('Username already exists')

    user = User(
        username=username,
        name=name,
        email=email,
        phone=phone,
        role=role,
        is_active=True,
    )
    user.set_password(password)

    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Username already exists')

    logger.info("Created user %s with role %s", user.username, user.role)
    return user


def update_user(user_id: int, updates: Dict[str, Any]) -> User:
    """Apply a partial update; a new password is re-hashed"""
    user = get_user_by_id(user_id)
    if not user:
        raise NotFoundError('User not found')

    if 'role' in updates and updates['role'] not in values(Role):
        raise ValidationError(f'Field "role" must be one of: {", ".join(values(Role))}')

    for field in UPDATABLE_FIELDS:
        if field in updates:
            setattr(user, field, updates[field])

    if updates.get('password'):
        user.set_password(updates['password'])

    db.session.commit()
    return user


def record_login(user: User) -> None:
    user.last_login = datetime.utcnow()
    user.login_count = (user.login_count or 0) + 1
    db.session.commit()
