"""
Account Service
Registration, login and role management
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from testdesk.extensions import db
from testdesk.models import Profile
from testdesk.models.profile import ROLES
from testdesk.services.errors import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def normalize_email(email):
    return (email or '').strip().lower()


def _validate_credentials(email, password):
    if not email or not password:
        raise ValidationError('Please fill in all fields')
    if '@' not in email:
        raise ValidationError('Enter a valid email address')


def register_profile(email, password, full_name, min_password_length=MIN_PASSWORD_LENGTH):
    """Create a student profile"""
    email = normalize_email(email)
    full_name = (full_name or '').strip()

    _validate_credentials(email, password)
    if not full_name:
        raise ValidationError('Please fill in all fields')
    if len(password) < min_password_length:
        raise ValidationError(f'Password must be at least {min_password_length} characters')
    if Profile.query.filter_by(email=email).first():
        raise ValidationError('An account with this email already exists')

    profile = Profile(email=email, full_name=full_name, role='student')
    profile.set_password(password)

    try:
        db.session.add(profile)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Failed to register %s: %s", email, exc)
        raise StorageError('Could not create the account') from exc

    logger.info("Registered profile %s", email)
    return profile


def authenticate(email, password):
    """Return the profile for valid credentials"""
    email = normalize_email(email)
    _validate_credentials(email, password)

    profile = Profile.query.filter_by(email=email).first()
    if not profile or not profile.check_password(password):
        raise ValidationError('Invalid email or password')
    return profile


def list_profiles():
    """All profiles, newest first"""
    return Profile.query.order_by(Profile.created_at.desc(), Profile.id.desc()).all()


def update_role(profile_id, role):
    if role not in ROLES:
        raise ValidationError(f'Unknown role: {role}')

    profile = db.session.get(Profile, profile_id)
    if not profile:
        raise NotFoundError('User not found')

    profile.role = role
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Failed to update role of profile %s: %s", profile_id, exc)
        raise StorageError('Could not update the user role') from exc

    logger.info("Profile %s is now %s", profile.email, role)
    return profile
