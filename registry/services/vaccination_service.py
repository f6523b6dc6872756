"""
Vaccination Service
Scheduling, status updates and registry statistics
"""
import logging
from datetime import date
from typing import Any, Dict

from sqlalchemy import func

from registry.constants import VaccinationStatus, values
from registry.extensions import db
from registry.models import Vaccination

logger = logging.getLogger(__name__)


def mark_overdue(today: date = None) -> int:
    """Flag scheduled vaccinations whose date has passed as overdue"""
    today = today or date.today()
    updated = (
        Vaccination.query.filter(
            Vaccination.status == VaccinationStatus.SCHEDULED.value,
            Vaccination.scheduled_date < today,
        ).update({Vaccination.status: VaccinationStatus.OVERDUE.value}, synchronize_session=False)
    )
    db.session.commit()
    if updated:
        logger.info("Marked %d vaccination(s) overdue", updated)
    return updated


def get_vaccination_stats(today: date = None) -> Dict[str, Any]:
    """
    Counts per status plus completions in the current month.

    Returns:
        dict: {total, scheduled, completed, missed, overdue, completed_this_month}
    """
    today = today or date.today()
    stats = {status: 0 for status in values(VaccinationStatus)}
    rows = db.session.query(Vaccination.status, func.count(Vaccination.id)).group_by(Vaccination.status).all()
    for status, count in rows:
        stats[status] = count
    stats['total'] = sum(count for _, count in rows)

    month_start = today.replace(day=1)
    stats['completed_this_month'] = Vaccination.query.filter(
        Vaccination.status == VaccinationStatus.COMPLETED.value,
        Vaccination.administered_date >= month_start,
        Vaccination.administered_date <= today,
    ).count()
    return stats
