"""Saved-state update applied when streams are refreshed."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from uuid import UUID

from sync_jobs.core.logging import get_logger
from sync_jobs.db.interfaces import StatePersistencePort
from sync_jobs.domain import GlobalState, StateType, StateWrapper, StreamRefreshRequest

from .interfaces import RefreshStateUpdaterPort

logger = get_logger(__name__)


def job_state_strip_refreshed_streams(
    state: StateWrapper,
    streams_to_refresh: Sequence[StreamRefreshRequest],
) -> StateWrapper:
    """Return the state without the cursors of refreshed streams.

    Stream states of refreshed streams are dropped. For global state the shared
    state is cleared as well once no stream state remains. Legacy state is
    opaque and returned unchanged.

    Args:
        state: Current saved state.
        streams_to_refresh: Streams refreshed by the job.

    Returns:
        StateWrapper: Updated state value.
    """

    refreshed_keys = {(request.stream_name, request.stream_namespace) for request in streams_to_refresh}

    if state.state_type == StateType.STREAM:
        return replace(
            state,
            stream_states=tuple(
                stream_state
                for stream_state in state.stream_states
                if (stream_state.stream_name, stream_state.stream_namespace) not in refreshed_keys
            ),
        )

    if state.state_type == StateType.GLOBAL and state.global_state is not None:
        retained_stream_states = tuple(
            stream_state
            for stream_state in state.global_state.stream_states
            if (stream_state.stream_name, stream_state.stream_namespace) not in refreshed_keys
        )
        return replace(
            state,
            global_state=GlobalState(
                shared_state=state.global_state.shared_state if retained_stream_states else None,
                stream_states=retained_stream_states,
            ),
        )

    return state


class RefreshJobStateUpdater(RefreshStateUpdaterPort):
    """Persist saved state with refreshed streams' cursors cleared."""

    def __init__(self, state_persistence: StatePersistencePort):
        """Initialize updater dependencies.

        Args:
            state_persistence: Saved-state store.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when state_persistence is None.
        """

        if state_persistence is None:
            raise ValueError("state_persistence must not be None")
        self._state_persistence = state_persistence

    def state_apply_refresh(
        self,
        connection_id: UUID,
        state: StateWrapper,
        streams_to_refresh: Sequence[StreamRefreshRequest],
    ) -> None:
        """Clear refreshed streams from the saved state and write it back.

        Args:
            connection_id: Connection identifier.
            state: Current saved state.
            streams_to_refresh: Streams refreshed by the job.

        Returns:
            None: Updated state is persisted as side effect.

        Raises:
            JobPersistenceError: Raised when the state cannot be written.
        """

        if state.state_type == StateType.LEGACY:
            logger.warning(
                "Legacy state of connection %s left unchanged for refresh",
                connection_id,
                extra={"ctx_connection_id": str(connection_id)},
            )
            return
        updated_state = job_state_strip_refreshed_streams(state, streams_to_refresh)
        self._state_persistence.db_state_update_or_create(connection_id, updated_state)
