"""
Closed value sets shared by models, routes and the session guard
"""
from enum import Enum


class Role(str, Enum):
    """Coarse permission tier for a user account"""
    ADMIN = 'admin'
    HEALTH_WORKER = 'health_worker'


class PatientCategory(str, Enum):
    INFANT = 'infant'        # 0-2 years
    CHILD = 'child'          # 2-18 years
    ADULT = 'adult'          # 18-60 years
    PREGNANT = 'pregnant'
    ELDERLY = 'elderly'      # 60+ years


class VaccinationStatus(str, Enum):
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    MISSED = 'missed'
    OVERDUE = 'overdue'


class AppointmentStatus(str, Enum):
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    NO_SHOW = 'no_show'


GENDERS = ('male', 'female', 'other')


def values(enum_cls):
    """List the raw string values of an enum"""
    return [member.value for member in enum_cls]
