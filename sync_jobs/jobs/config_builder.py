"""Pure builders for kind-specific job configuration payloads."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sync_jobs.domain import (
    ActorDefinitionRef,
    ActorImage,
    ConfiguredCatalog,
    JobRefreshConfig,
    JobResetConnectionConfig,
    JobSyncConfig,
    StreamDescriptor,
    StreamRefreshRequest,
    SyncDescriptor,
    SyncResourceRequirements,
    catalog_apply_reset,
)


def job_config_build_sync(
    sync: SyncDescriptor,
    source_definition: ActorDefinitionRef,
    destination_definition: ActorDefinitionRef,
    source_image: ActorImage,
    destination_image: ActorImage,
    resource_requirements: SyncResourceRequirements,
    webhook_operation_configs: dict[str, Any] | None = None,
    catalog: ConfiguredCatalog | None = None,
) -> JobSyncConfig:
    """Build the configuration of a sync job.

    Args:
        sync: Connection snapshot.
        source_definition: Source definition.
        destination_definition: Destination definition.
        source_image: Source launch coordinates.
        destination_image: Destination launch coordinates.
        resource_requirements: Resolved resource bundle.
        webhook_operation_configs: Optional webhook operation payloads.
        catalog: Catalog to carry instead of the connection catalog (stamped copy).

    Returns:
        JobSyncConfig: Sync job configuration.
    """

    return JobSyncConfig(
        namespace_definition=sync.namespace_definition,
        namespace_format=sync.namespace_format,
        prefix=sync.prefix,
        source_docker_image=source_image.docker_image,
        source_protocol_version=source_image.protocol_version,
        destination_docker_image=destination_image.docker_image,
        destination_protocol_version=destination_image.protocol_version,
        operation_sequence=sync.operation_sequence,
        configured_catalog=catalog if catalog is not None else sync.catalog,
        sync_resource_requirements=resource_requirements,
        is_source_custom_connector=source_definition.custom,
        is_destination_custom_connector=destination_definition.custom,
        workspace_id=sync.workspace_id,
        source_definition_version_id=source_definition.version_id,
        destination_definition_version_id=destination_definition.version_id,
        webhook_operation_configs=webhook_operation_configs,
    )


def job_config_build_refresh(
    sync: SyncDescriptor,
    source_definition: ActorDefinitionRef,
    destination_definition: ActorDefinitionRef,
    source_image: ActorImage,
    destination_image: ActorImage,
    resource_requirements: SyncResourceRequirements,
    streams_to_refresh: Sequence[StreamRefreshRequest],
    webhook_operation_configs: dict[str, Any] | None = None,
    catalog: ConfiguredCatalog | None = None,
) -> JobRefreshConfig:
    """Build the configuration of a refresh job.

    Carries the same fields as a sync job plus the descriptors of the streams
    to refresh, derived from the pending requests (name and namespace only).
    """

    return JobRefreshConfig(
        namespace_definition=sync.namespace_definition,
        namespace_format=sync.namespace_format,
        prefix=sync.prefix,
        source_docker_image=source_image.docker_image,
        source_protocol_version=source_image.protocol_version,
        destination_docker_image=destination_image.docker_image,
        destination_protocol_version=destination_image.protocol_version,
        operation_sequence=sync.operation_sequence,
        configured_catalog=catalog if catalog is not None else sync.catalog,
        sync_resource_requirements=resource_requirements,
        is_source_custom_connector=source_definition.custom,
        is_destination_custom_connector=destination_definition.custom,
        workspace_id=sync.workspace_id,
        source_definition_version_id=source_definition.version_id,
        destination_definition_version_id=destination_definition.version_id,
        streams_to_refresh=tuple(
            StreamDescriptor(name=request.stream_name, namespace=request.stream_namespace)
            for request in streams_to_refresh
        ),
        webhook_operation_configs=webhook_operation_configs,
    )


def job_config_build_reset(
    sync: SyncDescriptor,
    destination_definition: ActorDefinitionRef,
    destination_image: ActorImage,
    resource_requirements: SyncResourceRequirements,
    streams_to_reset: Sequence[StreamDescriptor],
) -> JobResetConnectionConfig:
    """Build the configuration of a connection reset job.

    The connection catalog is copied with the reset markers applied to the
    selected streams; the orchestrator requirement is duplicated into the
    legacy `resource_requirements` field.

    Args:
        sync: Connection snapshot.
        destination_definition: Destination definition.
        destination_image: Destination launch coordinates.
        resource_requirements: Resolved bundle without source roles.
        streams_to_reset: Streams to clear.

    Returns:
        JobResetConnectionConfig: Reset job configuration.
    """

    reset_streams = tuple(streams_to_reset)
    return JobResetConnectionConfig(
        namespace_definition=sync.namespace_definition,
        namespace_format=sync.namespace_format,
        prefix=sync.prefix,
        destination_docker_image=destination_image.docker_image,
        destination_protocol_version=destination_image.protocol_version,
        operation_sequence=sync.operation_sequence,
        configured_catalog=catalog_apply_reset(sync.catalog, reset_streams),
        resource_requirements=resource_requirements.orchestrator,
        sync_resource_requirements=resource_requirements,
        streams_to_reset=reset_streams,
        is_destination_custom_connector=destination_definition.custom,
        workspace_id=sync.workspace_id,
        destination_definition_version_id=destination_definition.version_id,
    )
