from flask import Blueprint, request, jsonify, session
from registry.extensions import guard
from registry.exceptions import UnauthorizedError
from registry.services import create_user, get_user_by_username, record_login
from registry.guard import SESSION_USER_KEY
from registry.utils import require_auth, get_current_user, log_audit, get_json_body, get_string
import logging

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """
    Create an account and start a session.
    The first account in an empty registry becomes admin.
    Body: { username, password, name, email?, phone? }
    """
    data = get_json_body(request)
    user = create_user(
        username=get_string(data, 'username'),
        password=get_string(data, 'password', strip=False),
        name=get_string(data, 'name'),
        email=get_string(data, 'email', required=False),
        phone=get_string(data, 'phone', required=False),
    )

    guard.login(user)
    record_login(user)
    log_audit('user', 'create', user_id=user.id, entity_id=user.id, details={'role': user.role, 'via': 'signup'})

    return jsonify({
        'success': True,
        'data': user.to_dict()
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login endpoint - verifies credentials and starts a session"""
    data = get_json_body(request)

    username = data.get('username')
    password = data.get('password')

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({
            'success': False,
            'error': 'Username and password are required'
        }), 400

    user = get_user_by_username(username)

    # Same answer for unknown, inactive and wrong-password accounts
    if not user or not user.is_active or not user.check_password(password):
        raise UnauthorizedError('Invalid credentials')

    guard.login(user)
    record_login(user)
    log_audit('user', 'login', user_id=user.id, entity_id=user.id)

    return jsonify({
        'success': True,
        'data': user.to_dict()
    }), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Logout endpoint - destroys the server-side session"""
    user_id = session.get(SESSION_USER_KEY)
    try:
        guard.logout()
    except Exception as e:
        logger.error("Logout failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Logout failed'
        }), 500

    if user_id is not None:
        log_audit('user', 'logout', user_id=user_id, entity_id=user_id)

    return jsonify({
        'success': True,
        'message': 'Logged out successfully'
    }), 200


@auth_bp.route('/user', methods=['GET'])
@require_auth
def current_user():
    """Get the logged-in user"""
    return jsonify({
        'success': True,
        'data': get_current_user().to_dict()
    }), 200
