"""Database service for per-stream generation bookkeeping."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from sync_jobs.domain import StreamDescriptor

from .interfaces import JobPersistenceError, StreamGenerationRepositoryPort


class SQLAlchemyStreamGenerationService(StreamGenerationRepositoryPort):
    """SQLAlchemy-backed stream generation store."""

    def __init__(self, engine: Engine):
        """Initialize stream generation persistence service.

        Args:
            engine: SQLAlchemy engine used for all persistence operations.

        Returns:
            None: This initializer does not return a value.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_stream_generation_current(self, connection_id: UUID) -> dict[StreamDescriptor, int]:
        """Return the latest generation of every stream of one connection.

        Args:
            connection_id: Connection identifier.

        Returns:
            dict[StreamDescriptor, int]: Latest generation per stream.

        Raises:
            JobPersistenceError: Raised when the read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        "SELECT stream_name, stream_namespace, MAX(generation_id) AS generation_id "
                        "FROM stream_generation "
                        "WHERE connection_id = CAST(:connection_id AS uuid) "
                        "GROUP BY stream_name, stream_namespace"
                    ),
                    {"connection_id": str(connection_id)},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise JobPersistenceError("failed to read stream generations") from error

        return {
            StreamDescriptor(name=row["stream_name"], namespace=row["stream_namespace"]): int(row["generation_id"])
            for row in rows
        }

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

        if not generations:
            return
        parameters = [
            {
                "connection_id": str(connection_id),
                "stream_name": descriptor.name,
                "stream_namespace": descriptor.namespace,
                "generation_id": generation_id,
                "start_job_id": job_id,
            }
            for descriptor, generation_id in generations
        ]
        try:
            with self._engine.begin() as connection:
                connection.execute(
                    text(
                        "INSERT INTO stream_generation ("
                        "connection_id, stream_name, stream_namespace, generation_id, start_job_id"
                        ") VALUES ("
                        "CAST(:connection_id AS uuid), :stream_name, :stream_namespace, :generation_id, :start_job_id"
                        ")"
                    ),
                    parameters,
                )
        except SQLAlchemyError as error:
            raise JobPersistenceError("failed to insert stream generations") from error
