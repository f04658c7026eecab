"""
Admin Routes
User listing and role management
"""
from flask import Blueprint, jsonify

from testdesk.routes.auth import request_data
from testdesk.services import account_service
from testdesk.utils import require_admin

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/users')
@require_admin
def users():
    """All users, newest first"""
    profiles = account_service.list_profiles()
    return jsonify({
        'success': True,
        'users': [profile.to_dict() for profile in profiles],
    })


@admin_bp.route('/users/<int:user_id>/role', methods=['POST'])
@require_admin
def update_role(user_id):
    """Change a user's role"""
    profile = account_service.update_role(user_id, request_data().get('role'))
    return jsonify({'success': True, 'user': profile.to_dict()})
