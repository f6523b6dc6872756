from flask import Blueprint, request, jsonify
from registry.constants import VaccinationStatus, values
from registry.exceptions import NotFoundError, ValidationError
from registry.extensions import db
from registry.models import Vaccination, Vaccine
from registry.services import get_patient_or_404, get_vaccination_stats
from registry.utils import require_auth, get_current_user, log_audit, parse_date, parse_int, get_json_body, require_fields, check_choice

vaccination_bp = Blueprint('vaccination', __name__, url_prefix='/api/vaccinations')

UPDATABLE_FIELDS = ('dose_number', 'status', 'scheduled_date', 'administered_date', 'batch_number', 'notes')


def _apply_fields(vaccination, data):
    if 'status' in data:
        check_choice(data['status'], values(VaccinationStatus), 'status')
    for field in UPDATABLE_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if field in ('scheduled_date', 'administered_date'):
            value = parse_date(value, field)
        elif field == 'dose_number':
            value = parse_int(value, field)
            if value < 1:
                raise ValidationError('Field "dose_number" must be at least 1')
        setattr(vaccination, field, value)


@vaccination_bp.route('', methods=['POST'])
@require_auth
def create_vaccination():
    """
    Schedule or record a vaccination.
    Body: { patient_id, vaccine_id, dose_number?, status?, scheduled_date?, administered_date?, batch_number?, notes? }
    The current user is recorded as administering it.
    """
    data = get_json_body(request)
    require_fields(data, 'patient_id', 'vaccine_id')

    patient = get_patient_or_404(parse_int(data['patient_id'], 'patient_id'))
    vaccine = db.session.get(Vaccine, parse_int(data['vaccine_id'], 'vaccine_id'))
    if not vaccine:
        raise NotFoundError('Vaccine not found')

    user = get_current_user()
    vaccination = Vaccination(
        patient_id=patient.id,
        vaccine_id=vaccine.id,
        dose_number=1,
        status=VaccinationStatus.SCHEDULED.value,
        administered_by=user.id,
    )
    _apply_fields(vaccination, data)
    if vaccination.status == VaccinationStatus.COMPLETED.value and not vaccination.administered_date:
        raise ValidationError('Field "administered_date" is required for completed vaccinations')

    db.session.add(vaccination)
    db.session.commit()
    log_audit('vaccination', 'create', user_id=user.id, entity_id=vaccination.id,
              details={'patient_id': patient.patient_id, 'vaccine': vaccine.name, 'status': vaccination.status})

    return jsonify({
        'success': True,
        'data': vaccination.to_dict()
    }), 201


@vaccination_bp.route('/<int:vaccination_id>', methods=['PUT'])
@require_auth
def update_vaccination(vaccination_id):
    vaccination = db.session.get(Vaccination, vaccination_id)
    if not vaccination:
        raise NotFoundError('Vaccination not found')

    data = get_json_body(request)
    _apply_fields(vaccination, data)
    db.session.commit()
    log_audit('vaccination', 'edit', entity_id=vaccination.id,
              details={'fields': sorted(k for k in data if k in UPDATABLE_FIELDS)})

    return jsonify({
        'success': True,
        'data': vaccination.to_dict()
    }), 200


@vaccination_bp.route('/stats', methods=['GET'])
@require_auth
def vaccination_stats():
    return jsonify({
        'success': True,
        'data': get_vaccination_stats()
    }), 200
