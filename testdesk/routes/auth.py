"""
Authentication Routes
Handles login, logout, registration, profile
"""
from flask import Blueprint, current_app, jsonify, request, session

from testdesk.services import account_service
from testdesk.utils import get_current_user, json_error

auth_bp = Blueprint('auth', __name__)


def request_data():
    """JSON body or form fields"""
    return request.get_json(silent=True) or request.form


def dashboard_for(role):
    return {
        'admin': '/admin/users',
        'teacher': '/teacher/dashboard',
        'student': '/student/dashboard',
    }.get(role, '/')


@auth_bp.route('/register', methods=['POST'])
def register():
    """User registration; new accounts are students"""
    data = request_data()
    profile = account_service.register_profile(
        data.get('email'),
        data.get('password'),
        data.get('full_name'),
        min_password_length=current_app.config['MIN_PASSWORD_LENGTH'],
    )
    return jsonify({
        'success': True,
        'message': 'Registration successful! Please login.',
        'user': profile.to_dict(),
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """User login"""
    data = request_data()
    profile = account_service.authenticate(data.get('email'), data.get('password'))

    session.clear()
    session['user_id'] = profile.id
    session['email'] = profile.email
    session['role'] = profile.role

    return jsonify({
        'success': True,
        'message': 'Login successful!',
        'user': profile.to_dict(),
        'redirect': dashboard_for(profile.role),
    })


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """User logout"""
    session.clear()
    return jsonify({'success': True, 'message': 'Logged out successfully.'})


@auth_bp.route('/me')
def me():
    """Current user profile"""
    user = get_current_user()
    if not user:
        return json_error('Login required', 401)
    # Role may have been changed by an admin since login
    session['role'] = user.role
    return jsonify({'success': True, 'user': user.to_dict()})
