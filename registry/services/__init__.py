from .identity_service import (
    assign_role,
    issue_patient_identifier,
    issue_qr_token,
    qr_payload,
)

from .user_service import (
    get_user_by_id,
    get_user_by_username,
    count_users,
    create_user,
    update_user,
    record_login,
)

from .patient_service import (
    create_patient,
    get_patient,
    get_patient_or_404,
    get_patient_by_qr_code,
    list_patients,
    search_patients,
    count_patients,
    update_patient,
)

from .vaccination_service import mark_overdue, get_vaccination_stats

__all__ = [
    # Identity Issuance
    "assign_role",
    "issue_patient_identifier",
    "issue_qr_token",
    "qr_payload",
    # User Services
    "get_user_by_id",
    "get_user_by_username",
    "count_users",
    "create_user",
    "update_user",
    "record_login",
    # Patient Services
    "create_patient",
    "get_patient",
    "get_patient_or_404",
    "get_patient_by_qr_code",
    "list_patients",
    "search_patients",
    "count_patients",
    "update_patient",
    # Vaccination Services
    "mark_overdue",
    "get_vaccination_stats",
]
