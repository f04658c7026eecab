"""
Service Errors
Validation and access failures reported back to the user
"""


class ServiceError(Exception):
    """Base class for user-facing service failures"""

    status_code = 400


class ValidationError(ServiceError):
    """Input rejected locally; nothing was written"""


class NotFoundError(ServiceError):
    status_code = 404


class AccessDenied(ServiceError):
    status_code = 403


class StorageError(ServiceError):
    """The database write failed and was rolled back"""

    status_code = 503
