"""
Utils Package
"""
from testdesk.utils.helpers import (
    now_utc,
    generate_registration_code,
    json_error,
    get_current_user,
    require_role,
    require_admin,
    require_teacher,
    require_student
)
from testdesk.utils.logging_config import configure_logging

__all__ = [
    'now_utc',
    'generate_registration_code',
    'json_error',
    'get_current_user',
    'require_role',
    'require_admin',
    'require_teacher',
    'require_student',
    'configure_logging'
]
