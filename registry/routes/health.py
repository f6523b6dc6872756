"""
Health check endpoints for monitoring and load balancers
"""
from flask import Blueprint, current_app, jsonify
from registry.extensions import db
from datetime import datetime

health_bp = Blueprint('health', __name__, url_prefix='/health')


@health_bp.route('', methods=['GET'])
@health_bp.route('/ping', methods=['GET'])
def health_check():
    """Liveness - no database connection"""
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.utcnow().isoformat(),
        'service': 'vaccination-registry'
    }), 200


@health_bp.route('/ready', methods=['GET'])
def readiness_check():
    """Readiness - database round trip plus live session count"""
    try:
        db.session.execute(db.text('SELECT 1'))
        db_status = 'connected'
    except Exception as e:
        db_status = f'error: {e}'

    ready = db_status == 'connected'
    return jsonify({
        'status': 'ready' if ready else 'not_ready',
        'database': db_status,
        'active_sessions': current_app.extensions['session_store'].active_count(),
        'timestamp': datetime.utcnow().isoformat()
    }), 200 if ready else 503
