"""Project-native typed exceptions for job creation failures."""

from __future__ import annotations

from uuid import UUID


class JobCreationError(Exception):
    """Base exception for job creation failures.

    Attributes:
        connection_id: Connection the creation attempt targeted.
    """

    def __init__(self, message: str, connection_id: UUID | None = None):
        super().__init__(message)
        self.connection_id = connection_id


class RefreshNotEligibleError(JobCreationError, RuntimeError):
    """Refresh job requested for a connection where refreshes are disabled."""
