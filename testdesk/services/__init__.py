"""
Services Package
"""
from testdesk.services.errors import (
    ServiceError,
    ValidationError,
    NotFoundError,
    AccessDenied,
    StorageError,
)

__all__ = ['ServiceError', 'ValidationError', 'NotFoundError', 'AccessDenied', 'StorageError']
