"""
Models Package
Exports all database models
"""
from testdesk.models.profile import Profile
from testdesk.models.course import Course, CourseEnrollment
from testdesk.models.test import Test
from testdesk.models.question import Question
from testdesk.models.attempt import TestAttempt

__all__ = ['Profile', 'Course', 'CourseEnrollment', 'Test', 'Question', 'TestAttempt']
