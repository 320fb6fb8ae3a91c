"""Database service for per-connection saved state."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from sync_jobs.domain import StateWrapper

from .interfaces import JobPersistenceError, StatePersistencePort

_STATE_ADAPTER: TypeAdapter[StateWrapper] = TypeAdapter(StateWrapper)


class SQLAlchemyConnectionStateService(StatePersistencePort):
    """SQLAlchemy-backed saved state store, one JSON document per connection."""

    def __init__(self, engine: Engine):
        """Initialize connection state persistence service.

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

    def db_state_get_current(self, connection_id: UUID) -> StateWrapper | None:
        """Return the saved state of one connection.

        Args:
            connection_id: Connection identifier.

        Returns:
            StateWrapper | None: Saved state, or None when the connection has none.

        Raises:
            JobPersistenceError: Raised when the read fails or the stored document is invalid.
        """

        try:
            with self._engine.connect() as connection:
                row = connection.execute(
                    text(
                        "SELECT state "
                        "FROM connection_state "
                        "WHERE connection_id = CAST(:connection_id AS uuid)"
                    ),
                    {"connection_id": str(connection_id)},
                ).mappings().first()
        except SQLAlchemyError as error:
            raise JobPersistenceError("failed to read connection state") from error

        if row is None or row["state"] is None:
            return None
        return self._map_state(row["state"])

    def db_state_update_or_create(self, connection_id: UUID, state: StateWrapper) -> None:
        """Write the saved state of one connection.

        Args:
            connection_id: Connection identifier.
            state: Replacement state.

        Returns:
            None: State row is upserted as side effect.

        Raises:
            JobPersistenceError: Raised when the write fails.
        """

        try:
            with self._engine.begin() as connection:
                connection.execute(
                    text(
                        "INSERT INTO connection_state (connection_id, state, updated_at) "
                        "VALUES (CAST(:connection_id AS uuid), CAST(:state AS jsonb), now()) "
                        "ON CONFLICT (connection_id) DO UPDATE SET "
                        "state = EXCLUDED.state, "
                        "updated_at = EXCLUDED.updated_at"
                    ),
                    {
                        "connection_id": str(connection_id),
                        "state": _STATE_ADAPTER.dump_json(state).decode("utf-8"),
                    },
                )
        except SQLAlchemyError as error:
            raise JobPersistenceError("failed to write connection state") from error

    def _map_state(self, state_value: Any) -> StateWrapper:
        """Map a stored JSON document to a typed state value.

        Args:
            state_value: Decoded jsonb value or raw JSON text.

        Returns:
            StateWrapper: Typed state.

        Raises:
            JobPersistenceError: Raised when the document does not match the state shape.
        """

        try:
            if isinstance(state_value, (str, bytes)):
                return _STATE_ADAPTER.validate_json(state_value)
            return _STATE_ADAPTER.validate_python(state_value)
        except ValidationError as error:
            raise JobPersistenceError("stored connection state is invalid") from error
