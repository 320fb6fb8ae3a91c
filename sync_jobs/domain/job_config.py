"""Job configuration payloads persisted with each enqueued job."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import Field, TypeAdapter

from .catalog import ConfiguredCatalog, StreamDescriptor
from .models import NamespaceDefinition, ResourceRequirementSpec, SyncOperation, SyncResourceRequirements


@dataclass(frozen=True)
class JobSyncConfig:
    """Configuration of a full or incremental sync job."""

    namespace_definition: NamespaceDefinition
    namespace_format: str | None
    prefix: str | None
    source_docker_image: str
    source_protocol_version: str
    destination_docker_image: str
    destination_protocol_version: str
    operation_sequence: tuple[SyncOperation, ...]
    configured_catalog: ConfiguredCatalog
    sync_resource_requirements: SyncResourceRequirements
    is_source_custom_connector: bool
    is_destination_custom_connector: bool
    workspace_id: UUID
    source_definition_version_id: UUID
    destination_definition_version_id: UUID
    webhook_operation_configs: dict[str, Any] | None = None
    config_type: Literal["sync"] = "sync"


@dataclass(frozen=True)
class JobRefreshConfig:
    """Configuration of a job re-extracting selected streams."""

    namespace_definition: NamespaceDefinition
    namespace_format: str | None
    prefix: str | None
    source_docker_image: str
    source_protocol_version: str
    destination_docker_image: str
    destination_protocol_version: str
    operation_sequence: tuple[SyncOperation, ...]
    configured_catalog: ConfiguredCatalog
    sync_resource_requirements: SyncResourceRequirements
    is_source_custom_connector: bool
    is_destination_custom_connector: bool
    workspace_id: UUID
    source_definition_version_id: UUID
    destination_definition_version_id: UUID
    streams_to_refresh: tuple[StreamDescriptor, ...]
    webhook_operation_configs: dict[str, Any] | None = None
    config_type: Literal["refresh"] = "refresh"


@dataclass(frozen=True)
class JobResetConnectionConfig:
    """Configuration of a job clearing destination data for selected streams.

    `resource_requirements` duplicates the orchestrator requirement for
    consumers that predate `sync_resource_requirements`.
    """

    namespace_definition: NamespaceDefinition
    namespace_format: str | None
    prefix: str | None
    destination_docker_image: str
    destination_protocol_version: str
    operation_sequence: tuple[SyncOperation, ...]
    configured_catalog: ConfiguredCatalog
    resource_requirements: ResourceRequirementSpec
    sync_resource_requirements: SyncResourceRequirements
    streams_to_reset: tuple[StreamDescriptor, ...]
    is_destination_custom_connector: bool
    workspace_id: UUID
    destination_definition_version_id: UUID
    is_source_custom_connector: bool = False
    config_type: Literal["reset_connection"] = "reset_connection"


JobConfig = Union[JobSyncConfig, JobRefreshConfig, JobResetConnectionConfig]

_JOB_CONFIG_ADAPTER: TypeAdapter[Any] = TypeAdapter(Annotated[JobConfig, Field(discriminator="config_type")])


def domain_job_config_to_json(config: JobConfig) -> str:
    """Serialize one job config to its persisted JSON form.

    Args:
        config: Job config value.

    Returns:
        str: JSON document.
    """

    return _JOB_CONFIG_ADAPTER.dump_json(config).decode("utf-8")


def domain_job_config_from_json(payload: str | bytes) -> JobConfig:
    """Parse a persisted job config JSON document.

    Args:
        payload: JSON document.

    Returns:
        JobConfig: Parsed job config value.

    Raises:
        pydantic.ValidationError: Raised when the payload does not match any job config shape.
    """

    return _JOB_CONFIG_ADAPTER.validate_json(payload)
