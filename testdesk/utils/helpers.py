"""
Helper Functions
Utility functions used across the application
"""
from datetime import datetime, timezone
from functools import wraps
import random
import string

from flask import session, jsonify


def now_utc():
    """Get current UTC timestamp"""
    return datetime.now(timezone.utc)


def generate_registration_code(length=6):
    """Generate random course registration code"""
    return "".join(random.choices(string.ascii_uppercase + string.digits, k=length))


def json_error(message, status=400):
    """Uniform JSON error response"""
    return jsonify({'success': False, 'error': message}), status


def get_current_user():
    """Get current logged-in profile"""
    from testdesk.extensions import db
    from testdesk.models import Profile

    if "user_id" not in session:
        return None
    return db.session.get(Profile, session["user_id"])


# Decorators
def require_role(*roles):
    """
    Decorator to require a logged-in user with one of ``roles``
    Responds 401 when logged out and 403 on a role mismatch
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if "user_id" not in session:
                return json_error("Login required", 401)
            if roles and session.get("role") not in roles:
                return json_error("You do not have access to this page", 403)
            return f(*args, **kwargs)
        return decorated_function
    return decorator


require_admin = require_role('admin')
require_teacher = require_role('teacher')
require_student = require_role('student')
