"""Job creator composing resolution, config building and two-phase persistence."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from typing import Any
from uuid import UUID

from sync_jobs.core.logging import get_logger
from sync_jobs.db.interfaces import (
    JobPersistenceError,
    JobQueuePort,
    StatePersistencePort,
    StreamRefreshRepositoryPort,
)
from sync_jobs.domain import (
    AbsentSource,
    ActorDefinitionRef,
    ActorImage,
    JobConfig,
    StreamDescriptor,
    StreamRefreshRequest,
    SyncDescriptor,
)
from sync_jobs.resources import ResourceRequirementsResolver

from .config_builder import job_config_build_refresh, job_config_build_reset, job_config_build_sync
from .eligibility import RefreshEligibilityGate
from .errors import RefreshNotEligibleError
from .interfaces import GenerationCounterPort, GenerationTaggerPort, JobCreatorPort, RefreshStateUpdaterPort

logger = get_logger(__name__)


class JobCreator(JobCreatorPort):
    """Create persisted sync, refresh and reset jobs for a connection.

    Sync and refresh jobs are written in two phases: the job is enqueued first,
    then its catalog is stamped with stream generations that are defined in
    terms of the new job id, and the stored config is patched in place.
    Consumers may observe a job before the patch lands.
    """

    def __init__(
        self,
        job_queue: JobQueuePort,
        resource_resolver: ResourceRequirementsResolver,
        eligibility_gate: RefreshEligibilityGate,
        generation_tagger: GenerationTaggerPort,
        generation_counter: GenerationCounterPort,
        state_persistence: StatePersistencePort,
        refresh_state_updater: RefreshStateUpdaterPort,
        stream_refresh_repository: StreamRefreshRepositoryPort,
    ):
        """Initialize job creator dependencies.

        Args:
            job_queue: Work queue receiving the jobs.
            resource_resolver: Resource requirement resolver.
            eligibility_gate: Refresh eligibility gate.
            generation_tagger: Catalog generation stamping service.
            generation_counter: Stream generation counter.
            state_persistence: Saved-state store.
            refresh_state_updater: Saved-state updater for refreshed streams.
            stream_refresh_repository: Pending refresh request store.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when a dependency is None.
        """

        dependencies = {
            "job_queue": job_queue,
            "resource_resolver": resource_resolver,
            "eligibility_gate": eligibility_gate,
            "generation_tagger": generation_tagger,
            "generation_counter": generation_counter,
            "state_persistence": state_persistence,
            "refresh_state_updater": refresh_state_updater,
            "stream_refresh_repository": stream_refresh_repository,
        }
        for dependency_name, dependency in dependencies.items():
            if dependency is None:
                raise ValueError(f"{dependency_name} must not be None")

        self._job_queue = job_queue
        self._resource_resolver = resource_resolver
        self._eligibility_gate = eligibility_gate
        self._generation_tagger = generation_tagger
        self._generation_counter = generation_counter
        self._state_persistence = state_persistence
        self._refresh_state_updater = refresh_state_updater
        self._stream_refresh_repository = stream_refresh_repository

    def create_sync_job(
        self,
        sync: SyncDescriptor,
        source_definition: ActorDefinitionRef,
        destination_definition: ActorDefinitionRef,
        source_image: ActorImage,
        destination_image: ActorImage,
        webhook_operation_configs: dict[str, Any] | None = None,
    ) -> int | None:
        """Create a sync job, stamping generations when refreshes are enabled.

        Args:
            sync: Connection snapshot.
            source_definition: Source definition.
            destination_definition: Destination definition.
            source_image: Source launch coordinates.
            destination_image: Destination launch coordinates.
            webhook_operation_configs: Optional webhook operation payloads.

        Returns:
            int | None: New job id, or None when the connection already has a running job.

        Raises:
            JobPersistenceError: Raised when enqueue or the generation patch fails.
        """

        resource_requirements = self._resource_resolver.resource_resolve(
            sync=sync,
            source=source_definition,
            destination_definition=destination_definition,
            is_reset=False,
        )
        sync_config = job_config_build_sync(
            sync=sync,
            source_definition=source_definition,
            destination_definition=destination_definition,
            source_image=source_image,
            destination_image=destination_image,
            resource_requirements=resource_requirements,
            webhook_operation_configs=webhook_operation_configs,
        )
        job_id = self._job_enqueue(sync.connection_id, sync_config)
        if job_id is None:
            return None

        refresh_eligible = self._eligibility_gate.is_refresh_eligible(
            workspace_id=sync.workspace_id,
            connection_id=sync.connection_id,
            source_definition_id=source_definition.definition_id,
            destination_definition_id=destination_definition.definition_id,
        )
        if not refresh_eligible:
            logger.info("Skipping generation stamping for sync job %s", job_id, extra={"ctx_job_id": job_id})
            return job_id

        stamped_catalog = self._generation_tagger.generation_stamp_catalog(
            catalog=sync.catalog,
            connection_id=sync.connection_id,
            job_id=job_id,
            refreshed_streams=(),
        )
        self._job_patch_config(job_id, replace(sync_config, configured_catalog=stamped_catalog))
        return job_id

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
        """Create a refresh job for the requested streams.

        After the job is stamped, the refreshed streams' saved cursors are
        cleared and their pending refresh requests are deleted. Those two
        cleanup steps are best effort and never unwind the created job.

        Args:
            sync: Connection snapshot.
            source_definition: Source definition.
            destination_definition: Destination definition.
            source_image: Source launch coordinates.
            destination_image: Destination launch coordinates.
            streams_to_refresh: Pending refresh requests consumed by the job.
            webhook_operation_configs: Optional webhook operation payloads.

        Returns:
            int | None: New job id, or None when the connection already has a running job.

        Raises:
            RefreshNotEligibleError: Raised before enqueue when refreshes are disabled.
            JobPersistenceError: Raised when enqueue, the generation bump or the patch fails.
        """

        refresh_eligible = self._eligibility_gate.is_refresh_eligible(
            workspace_id=sync.workspace_id,
            connection_id=sync.connection_id,
            source_definition_id=source_definition.definition_id,
            destination_definition_id=destination_definition.definition_id,
        )
        if not refresh_eligible:
            raise RefreshNotEligibleError(
                "Trying to create a refresh job for a connection which doesn't support refreshes",
                connection_id=sync.connection_id,
            )

        refresh_requests = tuple(streams_to_refresh)
        resource_requirements = self._resource_resolver.resource_resolve(
            sync=sync,
            source=source_definition,
            destination_definition=destination_definition,
            is_reset=False,
        )
        refresh_config = job_config_build_refresh(
            sync=sync,
            source_definition=source_definition,
            destination_definition=destination_definition,
            source_image=source_image,
            destination_image=destination_image,
            resource_requirements=resource_requirements,
            streams_to_refresh=refresh_requests,
            webhook_operation_configs=webhook_operation_configs,
        )
        job_id = self._job_enqueue(sync.connection_id, refresh_config)
        if job_id is None:
            return None

        self._generation_counter.generation_bump(
            connection_id=sync.connection_id,
            job_id=job_id,
            streams_to_refresh=refresh_requests,
        )
        stamped_catalog = self._generation_tagger.generation_stamp_catalog(
            catalog=sync.catalog,
            connection_id=sync.connection_id,
            job_id=job_id,
            refreshed_streams=refresh_requests,
        )
        self._job_patch_config(job_id, replace(refresh_config, configured_catalog=stamped_catalog))
        self._job_refresh_cleanup(sync.connection_id, refresh_requests)
        return job_id

    def create_reset_connection_job(
        self,
        sync: SyncDescriptor,
        destination_definition: ActorDefinitionRef,
        destination_image: ActorImage,
        streams_to_reset: Sequence[StreamDescriptor],
    ) -> int | None:
        """Create a reset job clearing the selected streams.

        Args:
            sync: Connection snapshot; its catalog is not modified.
            destination_definition: Destination definition.
            destination_image: Destination launch coordinates.
            streams_to_reset: Streams to clear.

        Returns:
            int | None: New job id, or None when the connection already has a running job.

        Raises:
            JobPersistenceError: Raised when enqueue fails.
        """

        resource_requirements = self._resource_resolver.resource_resolve(
            sync=sync,
            source=AbsentSource(),
            destination_definition=destination_definition,
            is_reset=True,
        )
        reset_config = job_config_build_reset(
            sync=sync,
            destination_definition=destination_definition,
            destination_image=destination_image,
            resource_requirements=resource_requirements,
            streams_to_reset=streams_to_reset,
        )
        return self._job_enqueue(sync.connection_id, reset_config)

    def _job_enqueue(self, connection_id: UUID, config: JobConfig) -> int | None:
        job_id = self._job_queue.db_job_enqueue(str(connection_id), config)
        log_extra = {"ctx_connection_id": str(connection_id), "ctx_config_type": config.config_type}
        if job_id is None:
            logger.info(
                "No %s job created for connection %s: a job is already running",
                config.config_type,
                connection_id,
                extra=log_extra,
            )
        else:
            logger.info(
                "Enqueued %s job %s for connection %s",
                config.config_type,
                job_id,
                connection_id,
                extra=log_extra,
            )
        return job_id

    def _job_patch_config(self, job_id: int, config: JobConfig) -> None:
        """Replace the stored config of an enqueued job with its stamped version.

        Args:
            job_id: Enqueued job identifier.
            config: Stamped configuration.

        Returns:
            None: Job config is replaced as side effect.

        Raises:
            JobPersistenceError: Raised when the patch fails; the job stays un-stamped.
        """

        try:
            self._job_queue.db_job_update_config(job_id, config)
        except JobPersistenceError:
            logger.error(
                "Failed to stamp generations on job %s; the job keeps its un-stamped catalog",
                job_id,
                extra={"ctx_job_id": job_id},
            )
            raise

    def _job_refresh_cleanup(self, connection_id: UUID, streams_to_refresh: Sequence[StreamRefreshRequest]) -> None:
        """Clear refreshed cursors and delete consumed refresh requests.

        Args:
            connection_id: Connection identifier.
            streams_to_refresh: Refresh requests consumed by the job.

        Returns:
            None: State and request rows are updated as side effect.

        Raises:
            RuntimeError: This helper logs persistence failures instead of raising them.
        """

        log_extra = {"ctx_connection_id": str(connection_id)}
        try:
            current_state = self._state_persistence.db_state_get_current(connection_id)
            if current_state is not None:
                self._refresh_state_updater.state_apply_refresh(connection_id, current_state, streams_to_refresh)
        except JobPersistenceError:
            logger.warning(
                "Failed to clear refreshed stream state for connection %s",
                connection_id,
                exc_info=True,
                extra=log_extra,
            )

        for request in streams_to_refresh:
            try:
                self._stream_refresh_repository.db_stream_refresh_delete(
                    connection_id,
                    request.stream_name,
                    request.stream_namespace,
                )
            except JobPersistenceError:
                logger.warning(
                    "Failed to delete refresh request %s.%s for connection %s",
                    request.stream_namespace,
                    request.stream_name,
                    connection_id,
                    exc_info=True,
                    extra=log_extra,
                )
