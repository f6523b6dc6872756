"""
Audit trail for account activity (create, edit, login, logout) and for
patient, vaccine, vaccination and appointment records.

Writing an entry never fails the request that triggered it.
"""
import json
import logging
from typing import Optional

from flask import g

from registry.extensions import db
from registry.models import AuditLog

logger = logging.getLogger(__name__)


def log_audit(
    entity_type: str,
    action: str,
    user_id: Optional[int] = None,
    entity_id: Optional[str] = None,
    details: Optional[dict] = None,
) -> None:
    """
    Record ``action`` on an entity.

    ``user_id`` defaults to the user the session guard resolved for this
    request, if any.
    """
    if user_id is None:
        current = g.get('current_user')
        user_id = current.id if current is not None else None

    entry = AuditLog(
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        action=action,
        user_id=user_id,
        details=json.dumps(details, default=str) if details else None,
    )
    try:
        db.session.add(entry)
        db.session.commit()
    except Exception as e:
        logger.warning("Audit entry %s/%s not recorded: %s", entity_type, action, e)
        db.session.rollback()
