"""Stream generation bookkeeping used by two-phase job creation."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sync_jobs.db.interfaces import StreamGenerationRepositoryPort
from sync_jobs.domain import ConfiguredCatalog, StreamDescriptor, StreamRefreshRequest, catalog_apply_generations

from .interfaces import GenerationCounterPort, GenerationTaggerPort


def _job_refresh_descriptors(requests: Sequence[StreamRefreshRequest]) -> list[StreamDescriptor]:
    return [StreamDescriptor(name=request.stream_name, namespace=request.stream_namespace) for request in requests]


class CatalogGenerationSetter(GenerationTaggerPort):
    """Stamp catalogs with the latest recorded generation of every stream."""

    def __init__(self, generation_repository: StreamGenerationRepositoryPort):
        """Initialize setter dependencies.

        Args:
            generation_repository: Stream generation store.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when generation_repository is None.
        """

        if generation_repository is None:
            raise ValueError("generation_repository must not be None")
        self._generation_repository = generation_repository

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

        generations = self._generation_repository.db_stream_generation_current(connection_id)
        return catalog_apply_generations(
            catalog=catalog,
            generations=generations,
            job_id=job_id,
            refreshed_streams=_job_refresh_descriptors(refreshed_streams),
        )


class GenerationBumper(GenerationCounterPort):
    """Start a new generation for every refreshed stream."""

    def __init__(self, generation_repository: StreamGenerationRepositoryPort):
        """Initialize bumper dependencies.

        Args:
            generation_repository: Stream generation store.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when generation_repository is None.
        """

        if generation_repository is None:
            raise ValueError("generation_repository must not be None")
        self._generation_repository = generation_repository

    def generation_bump(
        self,
        connection_id: UUID,
        job_id: int,
        streams_to_refresh: Sequence[StreamRefreshRequest],
    ) -> None:
        """Record `current + 1` as the generation of each refreshed stream.

        Streams without a recorded generation start at 1.

        Args:
            connection_id: Connection identifier.
            job_id: Job starting the generations.
            streams_to_refresh: Streams refreshed by the job.

        Returns:
            None: Generations are recorded as side effect.

        Raises:
            JobPersistenceError: Raised when generations cannot be read or written.
        """

        descriptors = list(dict.fromkeys(_job_refresh_descriptors(streams_to_refresh)))
        if not descriptors:
            return
        current_generations = self._generation_repository.db_stream_generation_current(connection_id)
        self._generation_repository.db_stream_generation_insert(
            connection_id=connection_id,
            job_id=job_id,
            generations=[(descriptor, current_generations.get(descriptor, 0) + 1) for descriptor in descriptors],
        )
