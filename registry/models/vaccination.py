from registry.constants import VaccinationStatus
from registry.extensions import db
from .base import TimestampMixin


class Vaccination(db.Model, TimestampMixin):
    __tablename__ = 'vaccinations'

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(db.Integer, db.ForeignKey('patients.id'), nullable=False, index=True)
    vaccine_id = db.Column(db.Integer, db.ForeignKey('vaccines.id'), nullable=False, index=True)
    dose_number = db.Column(db.Integer, default=1, nullable=False)

    # Status: scheduled, completed, missed, overdue
    status = db.Column(db.String(20), default=VaccinationStatus.SCHEDULED.value, nullable=False, index=True)
    scheduled_date = db.Column(db.Date)
    administered_date = db.Column(db.Date)

    administered_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    batch_number = db.Column(db.String(50))
    notes = db.Column(db.Text)

    def to_dict(self):
        return {
            'id': self.id,
            'patient_id': self.patient_id,
            'vaccine_id': self.vaccine_id,
            'vaccine_name': self.vaccine.name if self.vaccine else None,
            'dose_number': self.dose_number,
            'status': self.status,
            'scheduled_date': self.scheduled_date.isoformat() if self.scheduled_date else None,
            'administered_date': self.administered_date.isoformat() if self.administered_date else None,
            'administered_by': self.administered_by,
            'batch_number': self.batch_number,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Vaccination patient={self.patient_id} vaccine={self.vaccine_id} dose={self.dose_number} - {self.status}>"
