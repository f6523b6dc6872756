from flask import Blueprint, request, jsonify
from registry.exceptions import ValidationError
from registry.models import User
from registry.services import create_user, update_user
from registry.utils import require_admin, log_audit, get_json_body, get_string

user_bp = Blueprint('user', __name__, url_prefix='/api/users')


@user_bp.route('', methods=['GET'])
@require_admin
def list_users():
    """List all user accounts (admin only)"""
    users = User.query.order_by(User.created_at.asc(), User.id.asc()).all()
    return jsonify({
        'success': True,
        'data': [u.to_dict() for u in users]
    }), 200


@user_bp.route('', methods=['POST'])
@require_admin
def create_user_account():
    """
    Create a user account (admin only).
    Body: { username, password, name, email?, phone?, role? }
    Without an explicit role the account gets the default role assignment.
    """
    data = get_json_body(request)
    user = create_user(
        username=get_string(data, 'username'),
        password=get_string(data, 'password', strip=False),
        name=get_string(data, 'name'),
        email=get_string(data, 'email', required=False),
        phone=get_string(data, 'phone', required=False),
        role=data.get('role'),
    )
    log_audit('user', 'create', entity_id=user.id, details={'role': user.role})

    return jsonify({
        'success': True,
        'data': user.to_dict()
    }), 201


@user_bp.route('/<int:user_id>', methods=['PUT'])
@require_admin
def update_user_account(user_id):
    """
    Partial update (admin only).
    Body may contain: name, email, phone, role, is_active, password
    """
    data = get_json_body(request)
    if 'is_active' in data and not isinstance(data['is_active'], bool):
        raise ValidationError('Field "is_active" must be a boolean')
    if 'name' in data:
        data['name'] = get_string(data, 'name')
    for field in ('email', 'phone'):
        if field in data:
            data[field] = get_string(data, field, required=False)
    if 'password' in data and data['password'] is not None:
        get_string(data, 'password', strip=False)

    user = update_user(user_id, data)
    changed = sorted(k for k in data if k != 'password')
    if data.get('password'):
        changed.append('password')
    log_audit('user', 'edit', entity_id=user.id, details={'fields': changed})

    return jsonify({
        'success': True,
        'data': user.to_dict()
    }), 200
