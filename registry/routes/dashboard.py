from flask import Blueprint, jsonify
from registry.services import count_patients, get_vaccination_stats
from registry.utils import require_auth

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/dashboard')


@dashboard_bp.route('/stats', methods=['GET'])
@require_auth
def dashboard_stats():
    """Total registered patients plus vaccination counts per status"""
    stats = {'total_patients': count_patients()}
    stats.update(get_vaccination_stats())
    return jsonify({
        'success': True,
        'data': stats
    }), 200
