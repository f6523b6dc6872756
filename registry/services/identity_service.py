"""
Identity Issuance
Role assignment for new accounts and external identifiers for patients
"""
import logging
import secrets
from typing import Optional

from flask import current_app

from registry.constants import Role

logger = logging.getLogger(__name__)

DEFAULT_PATIENT_ID_PREFIX = 'RH'
PATIENT_ID_DIGITS = 6
QR_TOKEN_BYTES = 16


def assign_role(existing_user_count: int, bootstrap: bool = False) -> Role:
    """
    Role for a new account, decided once at creation time.

    The first account in an empty system, or one explicitly flagged as the
    bootstrap account, becomes admin; everyone else is a health worker.
    """
    if existing_user_count == 0 or bootstrap:
        return Role.ADMIN
    return Role.HEALTH_WORKER


def _patient_id_prefix() -> str:
    try:
        return current_app.config.get('PATIENT_ID_PREFIX', DEFAULT_PATIENT_ID_PREFIX)
    except RuntimeError:
        # Outside an application context
        return DEFAULT_PATIENT_ID_PREFIX


def issue_patient_identifier(sequence: int, prefix: Optional[str] = None) -> str:
    """
    Human-readable patient identifier: prefix + zero-padded sequence.

    Args:
        sequence: Positive, store-assigned sequence number (the patient's
            primary key), so identifiers never repeat
        prefix: Identifier prefix (defaults to PATIENT_ID_PREFIX config)

    Returns:
        str: e.g. "RH000042"
    """
    if sequence is None or sequence < 1:
        raise ValueError(f"Invalid patient sequence: {sequence!r}")
    prefix = prefix if prefix is not None else _patient_id_prefix()
    return f"{prefix}{sequence:0{PATIENT_ID_DIGITS}d}"


def issue_qr_token(patient) -> str:
    """
    Opaque QR lookup token for a patient.

    The token carries no patient data; it is bound to the patient by being
    stored on the patient row under a unique constraint.
    """
    if patient.qr_code:
        raise ValueError(f"Patient {patient.patient_id} already has a QR token")
    return secrets.token_urlsafe(QR_TOKEN_BYTES)


def qr_payload(patient) -> dict:
    """Data a QR renderer encodes for a patient card"""
    return {
        'id': patient.patient_id,
        'name': patient.name,
        'qr': patient.qr_code,
    }
