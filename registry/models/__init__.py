from .user import User
from .patient import Patient
from .vaccine import Vaccine
from .vaccination import Vaccination
from .appointment import Appointment
from .audit_log import AuditLog

__all__ = ["User", "Patient", "Vaccine", "Vaccination", "Appointment", "AuditLog"]
