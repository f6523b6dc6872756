from flask import Blueprint, request, jsonify
from registry.constants import AppointmentStatus, values
from registry.exceptions import NotFoundError
from registry.extensions import db
from registry.models import Appointment, Vaccine
from registry.services import get_patient_or_404
from registry.utils import require_auth, get_current_user, log_audit, parse_datetime, parse_int, get_json_body, require_fields, check_choice
from datetime import datetime, date, time, timedelta

appointment_bp = Blueprint('appointment', __name__, url_prefix='/api/appointments')

UPDATABLE_FIELDS = ('appointment_date', 'status', 'notes', 'vaccine_id')


def _resolve_vaccine_id(value):
    if value is None:
        return None
    vaccine = db.session.get(Vaccine, parse_int(value, 'vaccine_id'))
    if not vaccine:
        raise NotFoundError('Vaccine not found')
    return vaccine.id


@appointment_bp.route('/today', methods=['GET'])
@require_auth
def today_appointments():
    """Appointments scheduled for today, earliest first"""
    start = datetime.combine(date.today(), time.min)
    end = start + timedelta(days=1)
    appointments = (
        Appointment.query.filter(
            Appointment.appointment_date >= start,
            Appointment.appointment_date < end,
        )
        .order_by(Appointment.appointment_date.asc())
        .all()
    )
    return jsonify({
        'success': True,
        'data': [a.to_dict() for a in appointments]
    }), 200


@appointment_bp.route('', methods=['POST'])
@require_auth
def create_appointment():
    """
    Book an appointment.
    Body: { patient_id, appointment_date (ISO 8601), vaccine_id?, notes? }
    """
    data = get_json_body(request)
    require_fields(data, 'patient_id', 'appointment_date')

    patient = get_patient_or_404(parse_int(data['patient_id'], 'patient_id'))
    check_choice(data.get('status'), values(AppointmentStatus), 'status')

    user = get_current_user()
    appointment = Appointment(
        patient_id=patient.id,
        vaccine_id=_resolve_vaccine_id(data.get('vaccine_id')),
        appointment_date=parse_datetime(data['appointment_date'], 'appointment_date'),
        status=data.get('status') or AppointmentStatus.SCHEDULED.value,
        notes=data.get('notes'),
        created_by=user.id,
    )
    db.session.add(appointment)
    db.session.commit()
    log_audit('appointment', 'create', user_id=user.id, entity_id=appointment.id,
              details={'patient_id': patient.patient_id})

    return jsonify({
        'success': True,
        'data': appointment.to_dict()
    }), 201


@appointment_bp.route('/<int:appointment_id>', methods=['PUT'])
@require_auth
def update_appointment(appointment_id):
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        raise NotFoundError('Appointment not found')

    data = get_json_body(request)
    if 'status' in data:
        appointment.status = check_choice(data['status'], values(AppointmentStatus), 'status')
    if 'appointment_date' in data:
        appointment.appointment_date = parse_datetime(data['appointment_date'], 'appointment_date')
    if 'vaccine_id' in data:
        appointment.vaccine_id = _resolve_vaccine_id(data['vaccine_id'])
    if 'notes' in data:
        appointment.notes = data['notes']

    db.session.commit()
    log_audit('appointment', 'edit', entity_id=appointment.id,
              details={'fields': sorted(k for k in data if k in UPDATABLE_FIELDS)})

    return jsonify({
        'success': True,
        'data': appointment.to_dict()
    }), 200
