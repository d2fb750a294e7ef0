"""
Errors raised by the progress reconciliation code.

Controllers translate these into HTTP responses; nothing below the controller
layer knows about status codes.
"""


class ProgressError(Exception):
    """Base class for progress errors."""


class InvalidProgressError(ProgressError):
    """A section or chapter entry is missing its identity key."""

    def __init__(self, message: str, entry=None):
        super().__init__(message)
        self.entry = entry


class ProgressNotFoundError(ProgressError):
    """No progress record exists for the (userId, courseId) pair."""

    def __init__(self, user_id: str, course_id: str):
        super().__init__(f"Course progress not found for user {user_id} and course {course_id}")
        self.user_id = user_id
        self.course_id = course_id


class ProgressStorageError(ProgressError):
    """Loading or persisting a progress record failed. Safe to retry."""


class ProgressConflictError(ProgressStorageError):
    """The record changed between load and persist."""
