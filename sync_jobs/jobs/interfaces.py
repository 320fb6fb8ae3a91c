"""Typed interfaces for job-creation collaborators."""

from collections.abc import Sequence
from typing import Any, Protocol
from uuid import UUID

from sync_jobs.domain import (
    ActorDefinitionRef,
    ActorImage,
    ConfiguredCatalog,
    StateWrapper,
    StreamDescriptor,
    StreamRefreshRequest,
    SyncDescriptor,
)


class GenerationTaggerPort(Protocol):
    """Port definition for stamping catalogs with stream generations."""

    def generation_stamp_catalog(
        self,
        catalog: ConfiguredCatalog,
        connection_id: UUID,
        job_id: int,
        refreshed_streams: Sequence[StreamRefreshRequest],
    ) -> ConfiguredCatalog:
        """Return a copy of the catalog with generation and sync ids set.

        Args:
            catalog: Connection catalog.
            connection_id: Connection identifier.
            job_id: Job the catalog belongs to.
            refreshed_streams: Streams refreshed by the job; empty for plain syncs.

        Returns:
            ConfiguredCatalog: Stamped catalog.

        Raises:
            JobPersistenceError: Raised when generations cannot be read.
        """


class GenerationCounterPort(Protocol):
    """Port definition for advancing stream generations."""

    def generation_bump(
        self,
        connection_id: UUID,
        job_id: int,
        streams_to_refresh: Sequence[StreamRefreshRequest],
    ) -> None:
        """Start a new generation for each refreshed stream.

        Args:
            connection_id: Connection identifier.
            job_id: Job starting the generations.
            streams_to_refresh: Streams refreshed by the job.

        Returns:
            None: Generations are recorded as side effect.

        Raises:
            JobPersistenceError: Raised when generations cannot be written.
        """


class RefreshStateUpdaterPort(Protocol):
    """Port definition for clearing refreshed streams from saved state."""

    def state_apply_refresh(
        self,
        connection_id: UUID,
        state: StateWrapper,
        streams_to_refresh: Sequence[StreamRefreshRequest],
    ) -> None:
        """Drop the saved cursors of refreshed streams.

        Args:
            connection_id: Connection identifier.
            state: Current saved state.
            streams_to_refresh: Streams refreshed by the job.

        Returns:
            None: Updated state is persisted as side effect.

        Raises:
            JobPersistenceError: Raised when the state cannot be written.
        """


class JobCreatorPort(Protocol):
    """Port definition for creating persisted sync, refresh and reset jobs."""

    def create_sync_job(
        self,
        sync: SyncDescriptor,
        source_definition: ActorDefinitionRef,
        destination_definition: ActorDefinitionRef,
        source_image: ActorImage,
        destination_image: ActorImage,
        webhook_operation_configs: dict[str, Any] | None = None,
    ) -> int | None:
        """Create a sync job and return its id, or None when one is already running."""

    def create_refresh_connection(
        self,
        sync: SyncDescriptor,
        source_definition: ActorDefinitionRef,
        destination_definition: ActorDefinitionRef,
        source_image: ActorImage,
        destination_image: ActorImage,
        streams_to_refresh: Sequence[StreamRefreshRequest],
        webhook_operation_configs: dict[str, Any] | None = None,
    ) -> int | None:
        """Create a refresh job and return its id, or None when one is already running."""

    def create_reset_connection_job(
        self,
        sync: SyncDescriptor,
        destination_definition: ActorDefinitionRef,
        destination_image: ActorImage,
        streams_to_reset: Sequence[StreamDescriptor],
    ) -> int | None:
        """Create a reset job and return its id, or None when one is already running."""
