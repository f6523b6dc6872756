from flask import Blueprint, request, jsonify
from sqlalchemy.exc import IntegrityError
from registry.constants import PatientCategory, values
from registry.exceptions import ConflictError
from registry.extensions import db
from registry.models import Vaccine
from registry.utils import require_auth, require_admin, log_audit, get_json_body, get_string, check_choice, parse_int

vaccine_bp = Blueprint('vaccine', __name__, url_prefix='/api/vaccines')


@vaccine_bp.route('', methods=['GET'])
@require_auth
def list_vaccines():
    """Active vaccine catalog, alphabetical"""
    vaccines = Vaccine.query.filter_by(is_active=True).order_by(Vaccine.name.asc()).all()
    return jsonify({
        'success': True,
        'data': [v.to_dict() for v in vaccines]
    }), 200


@vaccine_bp.route('', methods=['POST'])
@require_admin
def create_vaccine():
    """
    Add a catalog entry (admin only).
    Body: { name, description?, manufacturer?, doses_required?, interval_days?, target_category? }
    """
    data = get_json_body(request)
    check_choice(data.get('target_category'), values(PatientCategory), 'target_category')

    vaccine = Vaccine(
        name=get_string(data, 'name'),
        description=data.get('description'),
        manufacturer=data.get('manufacturer'),
        doses_required=parse_int(data.get('doses_required', 1), 'doses_required'),
        interval_days=parse_int(data['interval_days'], 'interval_days') if data.get('interval_days') is not None else None,
        target_category=data.get('target_category'),
    )
    db.session.add(vaccine)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Vaccine already exists')

    log_audit('vaccine', 'create', entity_id=vaccine.id)
    return jsonify({
        'success': True,
        'data': vaccine.to_dict()
    }), 201
