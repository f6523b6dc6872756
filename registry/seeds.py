"""
Database seed data, applied on app startup when the vaccine catalog is empty.
"""
import logging

from registry.extensions import db
from registry.models import Vaccine

logger = logging.getLogger(__name__)

# Standard schedule by patient category
VACCINES = [
    {"name": "BCG", "description": "Bacillus Calmette-Guerin (tuberculosis)", "doses_required": 1, "interval_days": None, "target_category": "infant"},
    {"name": "OPV", "description": "Oral polio vaccine", "doses_required": 4, "interval_days": 28, "target_category": "infant"},
    {"name": "Hepatitis B", "description": "Hepatitis B vaccine", "doses_required": 3, "interval_days": 28, "target_category": "infant"},
    {"name": "DTaP", "description": "Diphtheria, tetanus and acellular pertussis", "doses_required": 5, "interval_days": 56, "target_category": "child"},
    {"name": "MMR", "description": "Measles, mumps and rubella", "doses_required": 2, "interval_days": 28, "target_category": "child"},
    {"name": "Varicella", "description": "Chickenpox vaccine", "doses_required": 2, "interval_days": 84, "target_category": "child"},
    {"name": "Tetanus booster", "description": "Td booster every 10 years", "doses_required": 1, "interval_days": None, "target_category": "adult"},
    {"name": "Influenza", "description": "Seasonal influenza vaccine", "doses_required": 1, "interval_days": None, "target_category": "elderly"},
    {"name": "TT vaccine", "description": "Tetanus toxoid during pregnancy", "doses_required": 2, "interval_days": 28, "target_category": "pregnant"},
]


def seed_vaccines():
    """Create the default vaccine catalog if none exists. Returns the number created."""
    try:
        if Vaccine.query.count() > 0:
            return 0
        for v in VACCINES:
            db.session.add(Vaccine(is_active=True, **v))
        db.session.commit()
        logger.info("Seeded %d default vaccines", len(VACCINES))
        return len(VACCINES)
    except Exception as e:
        db.session.rollback()
        logger.warning("Vaccine seeding skipped: %s", e)
        return 0
