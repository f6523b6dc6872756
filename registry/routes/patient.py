from flask import Blueprint, request, jsonify
from registry.constants import GENDERS, PatientCategory, values
from registry.exceptions import NotFoundError
from registry.models import Vaccination
from registry.services import (
    create_patient as register_patient,
    get_patient_or_404,
    get_patient_by_qr_code,
    list_patients as fetch_patients,
    search_patients as find_patients,
    update_patient as apply_patient_update,
    qr_payload,
)
from registry.utils import (
    require_auth,
    get_current_user,
    log_audit,
    parse_date,
    get_json_body,
    get_string,
    check_choice,
)

patient_bp = Blueprint('patient', __name__, url_prefix='/api/patients')

# Server-assigned; ignored if a client sends them
IMMUTABLE_FIELDS = ('id', 'patient_id', 'qr_code', 'created_by', 'created_at', 'updated_at')


def _clean_patient_fields(data):
    """Validate and normalize patient fields from a request body"""
    fields = {k: v for k, v in data.items() if k not in IMMUTABLE_FIELDS}
    if 'date_of_birth' in fields:
        fields['date_of_birth'] = parse_date(fields['date_of_birth'], 'date_of_birth')
    check_choice(fields.get('gender'), GENDERS, 'gender')
    check_choice(fields.get('category'), values(PatientCategory), 'category')
    if 'name' in fields:
        fields['name'] = get_string(fields, 'name')
    return fields


@patient_bp.route('', methods=['GET'])
@require_auth
def list_patients():
    """
    List patients, newest first
    Query params: limit (default 50, max 500), offset
    """
    limit = request.args.get('limit', 50, type=int)
    offset = request.args.get('offset', 0, type=int)
    if limit < 1 or limit > 500:
        limit = 50
    if offset < 0:
        offset = 0

    patients = fetch_patients(limit=limit, offset=offset)
    return jsonify({
        'success': True,
        'data': [p.to_dict() for p in patients],
        'pagination': {'limit': limit, 'offset': offset},
    }), 200


@patient_bp.route('/search', methods=['GET'])
@require_auth
def search_patients():
    """Search by name, phone, guardian or patient identifier. Query param: q"""
    q = request.args.get('q', '', type=str).strip()
    if not q:
        return jsonify({
            'success': False,
            'error': 'Search query is required'
        }), 400

    patients = find_patients(q)
    return jsonify({
        'success': True,
        'data': [p.to_dict() for p in patients]
    }), 200


@patient_bp.route('/qr/<qr_code>', methods=['GET'])
@require_auth
def get_patient_by_qr(qr_code):
    """Look up a patient from a scanned QR token"""
    patient = get_patient_by_qr_code(qr_code)
    if not patient:
        raise NotFoundError('Patient not found')
    return jsonify({
        'success': True,
        'data': patient.to_dict()
    }), 200


@patient_bp.route('/<int:patient_id>', methods=['GET'])
@require_auth
def get_patient(patient_id):
    patient = get_patient_or_404(patient_id)
    return jsonify({
        'success': True,
        'data': patient.to_dict()
    }), 200


@patient_bp.route('/<int:patient_id>/qr', methods=['GET'])
@require_auth
def get_patient_qr(patient_id):
    """Payload to encode in the patient's QR card"""
    patient = get_patient_or_404(patient_id)
    return jsonify({
        'success': True,
        'data': qr_payload(patient)
    }), 200


@patient_bp.route('/<int:patient_id>/vaccinations', methods=['GET'])
@require_auth
def get_patient_vaccinations(patient_id):
    get_patient_or_404(patient_id)
    vaccinations = (
        Vaccination.query.filter_by(patient_id=patient_id)
        .order_by(Vaccination.scheduled_date.asc(), Vaccination.dose_number.asc())
        .all()
    )
    return jsonify({
        'success': True,
        'data': [v.to_dict() for v in vaccinations]
    }), 200


@patient_bp.route('', methods=['POST'])
@require_auth
def create_patient():
    """
    Register a patient.
    patient_id and qr_code are assigned by the server.
    """
    data = get_json_body(request)
    get_string(data, 'name')
    fields = _clean_patient_fields(data)

    user = get_current_user()
    patient = register_patient(fields, created_by=user.id)
    log_audit('patient', 'create', user_id=user.id, entity_id=patient.patient_id)

    return jsonify({
        'success': True,
        'data': patient.to_dict()
    }), 201


@patient_bp.route('/<int:patient_id>', methods=['PUT'])
@require_auth
def update_patient(patient_id):
    """Partial update; identifier and QR token cannot be changed"""
    data = get_json_body(request)
    fields = _clean_patient_fields(data)

    patient = apply_patient_update(patient_id, fields)
    log_audit('patient', 'edit', entity_id=patient.patient_id,
              details={'fields': sorted(fields)})

    return jsonify({
        'success': True,
        'data': patient.to_dict()
    }), 200
