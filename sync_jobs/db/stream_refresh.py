"""Database service for pending stream refresh requests."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from sync_jobs.domain import StreamRefreshRequest

from .interfaces import JobPersistenceError, StreamRefreshRepositoryPort


class SQLAlchemyStreamRefreshService(StreamRefreshRepositoryPort):
    """SQLAlchemy-backed store of pending stream refresh requests."""

    def __init__(self, engine: Engine):
        """Initialize stream refresh persistence service.

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

    def db_stream_refresh_list(self, connection_id: UUID) -> list[StreamRefreshRequest]:
        """List pending refresh requests of one connection.

        Args:
            connection_id: Connection identifier.

        Returns:
            list[StreamRefreshRequest]: Pending requests ordered by stream identity.

        Raises:
            JobPersistenceError: Raised when the read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        "SELECT connection_id, stream_name, stream_namespace "
                        "FROM stream_refreshes "
                        "WHERE connection_id = CAST(:connection_id AS uuid) "
                        "ORDER BY stream_namespace ASC NULLS FIRST, stream_name ASC"
                    ),
                    {"connection_id": str(connection_id)},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise JobPersistenceError("failed to list stream refreshes") from error

        return [
            StreamRefreshRequest(
                connection_id=UUID(str(row["connection_id"])),
                stream_name=row["stream_name"],
                stream_namespace=row["stream_namespace"],
            )
            for row in rows
        ]

    def db_stream_refresh_delete(self, connection_id: UUID, stream_name: str, stream_namespace: str | None) -> None:
        """Delete the pending refresh request of one stream.

        Deleting a request that no longer exists is a no-op.

        Args:
            connection_id: Connection identifier.
            stream_name: Stream name.
            stream_namespace: Optional stream namespace; None matches only null namespaces.

        Returns:
            None: Request row is removed as side effect.

        Raises:
            JobPersistenceError: Raised when the delete fails.
        """

        try:
            with self._engine.begin() as connection:
                connection.execute(
                    text(
                        "DELETE FROM stream_refreshes "
                        "WHERE connection_id = CAST(:connection_id AS uuid) "
                        "AND stream_name = :stream_name "
                        "AND stream_namespace IS NOT DISTINCT FROM CAST(:stream_namespace AS text)"
                    ),
                    {
                        "connection_id": str(connection_id),
                        "stream_name": stream_name,
                        "stream_namespace": stream_namespace,
                    },
                )
        except SQLAlchemyError as error:
            raise JobPersistenceError("failed to delete stream refresh") from error
