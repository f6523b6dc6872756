from .health import health_bp
from .auth import auth_bp
from .user import user_bp
from .patient import patient_bp
from .vaccine import vaccine_bp
from .vaccination import vaccination_bp
from .appointment import appointment_bp
from .dashboard import dashboard_bp

__all__ = ['health_bp', 'auth_bp', 'user_bp', 'patient_bp', 'vaccine_bp', 'vaccination_bp', 'appointment_bp', 'dashboard_bp']
