"""
Routes Package
Exports all route blueprints
"""
from testdesk.routes.auth import auth_bp
from testdesk.routes.admin import admin_bp
from testdesk.routes.teacher import teacher_bp
from testdesk.routes.student import student_bp

__all__ = ['auth_bp', 'admin_bp', 'teacher_bp', 'student_bp']
