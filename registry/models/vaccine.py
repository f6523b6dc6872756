"""
Vaccine catalog entry
"""
from registry.extensions import db
from .base import TimestampMixin


class Vaccine(db.Model, TimestampMixin):
    __tablename__ = 'vaccines'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text)
    manufacturer = db.Column(db.String(100))
    doses_required = db.Column(db.Integer, default=1, nullable=False)
    interval_days = db.Column(db.Integer)  # days between doses, None for single-dose
    target_category = db.Column(db.String(20))  # infant, child, adult, pregnant, elderly
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    vaccinations = db.relationship('Vaccination', backref='vaccine', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'manufacturer': self.manufacturer,
            'doses_required': self.doses_required,
            'interval_days': self.interval_days,
            'target_category': self.target_category,
            'is_active': self.is_active,
        }

    def __repr__(self):
        return f"<Vaccine {self.name}>"
