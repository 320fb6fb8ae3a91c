"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from sync_jobs.domain import JobConfig, StateWrapper, StreamDescriptor, StreamRefreshRequest

JOB_TERMINAL_STATUSES = ("failed", "succeeded", "cancelled")


class JobPersistenceError(RuntimeError):
    """Raised when a job, state or generation store read or write fails."""


class JobQueuePort(Protocol):
    """Port definition for the job work queue."""

    def db_job_enqueue(self, scope: str, config: JobConfig) -> int | None:
        """Enqueue a job unless a non-terminal job already exists for the scope.

        Args:
            scope: Queue scope, the connection id as text.
            config: Job configuration payload.

        Returns:
            int | None: New job id, or None when another non-terminal job owns the scope.

        Raises:
            JobPersistenceError: Raised when persistence fails.
        """

    def db_job_update_config(self, job_id: int, config: JobConfig) -> None:
        """Replace the configuration of an enqueued job.

        Args:
            job_id: Job identifier.
            config: Replacement configuration payload.

        Returns:
            None: Job row is updated as side effect.

        Raises:
            LookupError: Raised when the job does not exist.
            JobPersistenceError: Raised when persistence fails.
        """


class StreamRefreshRepositoryPort(Protocol):
    """Port definition for pending stream refresh requests."""

    def db_stream_refresh_list(self, connection_id: UUID) -> list[StreamRefreshRequest]:
        """List pending refresh requests of one connection.

        Args:
            connection_id: Connection identifier.

        Returns:
            list[StreamRefreshRequest]: Pending requests ordered by stream identity.

        Raises:
            JobPersistenceError: Raised when the read fails.
        """

    def db_stream_refresh_delete(self, connection_id: UUID, stream_name: str, stream_namespace: str | None) -> None:
        """Delete the pending refresh request of one stream.

        Args:
            connection_id: Connection identifier.
            stream_name: Stream name.
            stream_namespace: Optional stream namespace.

        Returns:
            None: Request row is removed as side effect.

        Raises:
            JobPersistenceError: Raised when the delete fails.
        """


class StatePersistencePort(Protocol):
    """Port definition for per-connection saved state."""

    def db_state_get_current(self, connection_id: UUID) -> StateWrapper | None:
        """Return the saved state of one connection.

        Args:
            connection_id: Connection identifier.

        Returns:
            StateWrapper | None: Saved state, or None when the connection has none.

        Raises:
            JobPersistenceError: Raised when the read fails.
        """

    def db_state_update_or_create(self, connection_id: UUID, state: StateWrapper) -> None:
        """Write the saved state of one connection.

        Args:
            connection_id: Connection identifier.
            state: Replacement state.

        Returns:
            None: State row is written as side effect.

        Raises:
            JobPersistenceError: Raised when the write fails.
        """


class StreamGenerationRepositoryPort(Protocol):
    """Port definition for per-stream generation bookkeeping."""

    def db_stream_generation_current(self, connection_id: UUID) -> dict[StreamDescriptor, int]:
        """Return the latest generation of every stream of one connection.

        Args:
            connection_id: Connection identifier.

        Returns:
            dict[StreamDescriptor, int]: Latest generation per stream.

        Raises:
            JobPersistenceError: Raised when the read fails.
        """

    def db_stream_generation_insert(
        self,
        connection_id: UUID,
        job_id: int,
        generations: Sequence[tuple[StreamDescriptor, int]],
    ) -> None:
        """Record new generations started by one job.

        Args:
            connection_id: Connection identifier.
            job_id: Job that starts the generations.
            generations: Stream and new generation pairs.

        Returns:
            None: Generation rows are inserted as side effect.

        Raises:
            JobPersistenceError: Raised when the write fails.
        """
