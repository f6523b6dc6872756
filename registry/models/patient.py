from sqlalchemy.orm import validates

from registry.extensions import db
from .base import TimestampMixin


class Patient(db.Model, TimestampMixin):
    __tablename__ = 'patients'

    id = db.Column(db.Integer, primary_key=True)

    # External identifiers (immutable once assigned)
    patient_id = db.Column(db.String(20), unique=True, nullable=True, index=True)  # e.g., RH000001
    qr_code = db.Column(db.String(64), unique=True, nullable=True, index=True)

    # Personal
    name = db.Column(db.String(120), nullable=False)
    date_of_birth = db.Column(db.Date)
    gender = db.Column(db.String(10))  # male, female, other
    category = db.Column(db.String(20))  # infant, child, adult, pregnant, elderly
    phone = db.Column(db.String(20))
    address = db.Column(db.Text)

    # Guardian (infants and children)
    guardian_name = db.Column(db.String(120))
    guardian_phone = db.Column(db.String(20))

    medical_history = db.Column(db.Text)
    allergies = db.Column(db.Text)

    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Relationships
    vaccinations = db.relationship('Vaccination', backref='patient', lazy='dynamic')
    appointments = db.relationship('Appointment', backref='patient', lazy='dynamic')

    @validates('patient_id', 'qr_code')
    def _validate_immutable(self, key, value):
        current = getattr(self, key)
        if current is not None and value != current:
            raise ValueError(f"{key} is immutable once assigned")
        return value

    def to_dict(self):
        return {
            'id': self.id,
            'patient_id': self.patient_id,
            'qr_code': self.qr_code,
            'name': self.name,
            'date_of_birth': self.date_of_birth.isoformat() if self.date_of_birth else None,
            'gender': self.gender,
            'category': self.category,
            'phone': self.phone,
            'address': self.address,
            'guardian_name': self.guardian_name,
            'guardian_phone': self.guardian_phone,
            'medical_history': self.medical_history,
            'allergies': self.allergies,
            'created_by': self.created_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Patient {self.name} ({self.patient_id})>"
