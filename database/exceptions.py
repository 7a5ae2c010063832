from typing import Dict, Optional


class DatabaseError(Exception):
    """Base for all database errors."""


class NotFoundError(DatabaseError):
    """Entity not found."""


class DuplicateError(DatabaseError):
    """Unique constraint violation (email, course name, player/month snapshot, monthly winner)."""


class IntegrityError(DatabaseError):
    """Foreign key or check constraint violation."""


class IncompleteCourseError(IntegrityError):
    """Course does not have all 18 holes configured."""


class InvalidUpdateError(IntegrityError):
    """Field values rejected before reaching the database."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}
