"""
Celery tasks for registry maintenance
"""
import logging
from datetime import datetime
from registry.extensions import celery
from registry.services import mark_overdue

logger = logging.getLogger(__name__)


@celery.task(name='tasks.mark_overdue_vaccinations')
def mark_overdue_vaccinations():
    """
    Flag scheduled vaccinations whose date has passed as overdue

    Returns:
        dict: Update results
    """
    try:
        updated = mark_overdue()
        return {
            'success': True,
            'updated_count': updated,
            'timestamp': datetime.utcnow().isoformat()
        }
    except Exception as e:
        logger.error(f"Error marking overdue vaccinations: {e}", exc_info=True)
        return {'success': False, 'error': str(e)}


# Sessions are pruned lazily inside the web process by SessionStore
celery.conf.beat_schedule = {
    'mark-overdue-vaccinations': {
        'task': 'tasks.mark_overdue_vaccinations',
        'schedule': 24 * 60 * 60,
    },
}
