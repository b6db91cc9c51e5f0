"""Errors raised by smkit on top of the AWS service errors surfaced by botocore."""
from typing import Optional, Sequence


class UnexpectedStatusException(ValueError):
    """Raised when a resource reaches a status that does not allow further execution."""

    def __init__(self, message: str, allowed_statuses: Sequence[str], actual_status: Optional[str]):
        self.allowed_statuses = list(allowed_statuses)
        self.actual_status = actual_status
        super().__init__(message)


class CapacityError(UnexpectedStatusException):
    """Raised when a job fails because SageMaker has no capacity for the requested instances."""


class MissingFileError(ValueError):
    """Raised when an optional S3 file (statistics, constraints, ...) does not exist."""
