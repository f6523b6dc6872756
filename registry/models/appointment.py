from registry.constants import AppointmentStatus
from registry.extensions import db
from .base import TimestampMixin


class Appointment(db.Model, TimestampMixin):
    __tablename__ = 'appointments'

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(db.Integer, db.ForeignKey('patients.id'), nullable=False, index=True)
    vaccine_id = db.Column(db.Integer, db.ForeignKey('vaccines.id'), nullable=True)

    appointment_date = db.Column(db.DateTime, nullable=False, index=True)

    # Status: scheduled, completed, cancelled, no_show
    status = db.Column(db.String(20), default=AppointmentStatus.SCHEDULED.value, nullable=False)
    notes = db.Column(db.Text)

    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    vaccine = db.relationship('Vaccine')

    def to_dict(self):
        return {
            'id': self.id,
            'patient_id': self.patient_id,
            'patient': self.patient.to_dict() if self.patient else None,
            'vaccine_id': self.vaccine_id,
            'vaccine_name': self.vaccine.name if self.vaccine else None,
            'appointment_date': self.appointment_date.isoformat() if self.appointment_date else None,
            'status': self.status,
            'notes': self.notes,
            'created_by': self.created_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Appointment {self.patient_id} on {self.appointment_date} - {self.status}>"
