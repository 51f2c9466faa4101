"""
Health Controller

Liveness probe for orchestration.
"""

from flask import Blueprint

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health():
    """Fixed OK status; does not touch game state."""
    return 'OK', 200
