"""
Patient Service
Patient registration with server-assigned identifier and QR token
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from registry.exceptions import ConflictError, NotFoundError
from registry.extensions import db
from registry.models import Patient
from .identity_service import issue_patient_identifier, issue_qr_token

logger = logging.getLogger(__name__)

PATIENT_FIELDS = (
    'name', 'date_of_birth', 'gender', 'category', 'phone', 'address',
    'guardian_name', 'guardian_phone', 'medical_history', 'allergies',
)


def create_patient(fields: Dict[str, Any], created_by: Optional[int] = None) -> Patient:
    """
    Persist a patient and assign its external identifier and QR token.

    The identifier sequence is the primary key handed out by the store on
    flush; the unique constraints on patient_id and qr_code reject any
    collision, which surfaces as ConflictError.
    """
    patient = Patient(
        created_by=created_by,
        **{k: v for k, v in fields.items() if k in PATIENT_FIELDS}
    )
    db.session.add(patient)
    try:
        db.session.flush()  # Get the ID
        patient.patient_id = issue_patient_identifier(patient.id)
        patient.qr_code = issue_qr_token(patient)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("Patient identifier collision: %s", e)
        raise ConflictError('Patient identifier already exists')

    logger.info("Registered patient %s", patient.patient_id)
    return patient


def get_patient(patient_pk: int) -> Optional[Patient]:
    return db.session.get(Patient, patient_pk)


def get_patient_or_404(patient_pk: int) -> Patient:
    patient = get_patient(patient_pk)
    if not patient:
        raise NotFoundError('Patient not found')
    return patient


def get_patient_by_qr_code(qr_code: str) -> Optional[Patient]:
    return Patient.query.filter_by(qr_code=qr_code).first()


def list_patients(limit: int = 50, offset: int = 0) -> List[Patient]:
    return (
        Patient.query.order_by(Patient.created_at.desc(), Patient.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def search_patients(query: str, limit: int = 50) -> List[Patient]:
    term = f'%{query}%'
    return (
        Patient.query.filter(or_(
            Patient.name.ilike(term),
            Patient.phone.ilike(term),
            Patient.patient_id.ilike(term),
            Patient.guardian_name.ilike(term),
        ))
        .order_by(Patient.name.asc())
        .limit(limit)
        .all()
    )


def count_patients() -> int:
    return Patient.query.count()


def update_patient(patient_pk: int, updates: Dict[str, Any]) -> Patient:
    """Partial update; patient_id and qr_code are never touched here"""
    patient = get_patient_or_404(patient_pk)
    for field in PATIENT_FIELDS:
        if field in updates:
            setattr(patient, field, updates[field])
    db.session.commit()
    return patient
