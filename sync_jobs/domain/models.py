"""Typed domain models shared across job-creation layers.

This module provides the connection snapshot, actor definition and resource
requirement contracts consumed by the resolver, the config builders and the
job creator.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Union
from uuid import UUID

from .catalog import ConfiguredCatalog


class NamespaceDefinition(str, Enum):
    """Destination namespace selection policy for a connection."""

    SOURCE = "source"
    DESTINATION = "destination"
    CUSTOM_FORMAT = "customformat"


class SourceType(str, Enum):
    """Source classifier used to select type-level resource defaults."""

    API = "api"
    FILE = "file"
    DATABASE = "database"
    CUSTOM = "custom"


class JobType(str, Enum):
    """Job types that definition-level resource requirements can target."""

    GET_SPEC = "get_spec"
    CHECK_CONNECTION = "check_connection"
    DISCOVER_SCHEMA = "discover_schema"
    SYNC = "sync"
    RESET_CONNECTION = "reset_connection"


class ResourceRole(str, Enum):
    """Execution roles of a job that receive independently sized resources."""

    SOURCE = "source"
    SOURCE_STDOUT = "source_stdout"
    SOURCE_STDERR = "source_stderr"
    DESTINATION = "destination"
    DESTINATION_STDIN = "destination_stdin"
    DESTINATION_STDOUT = "destination_stdout"
    DESTINATION_STDERR = "destination_stderr"
    ORCHESTRATOR = "orchestrator"
    HEARTBEAT = "heartbeat"


SOURCE_ROLES = (ResourceRole.SOURCE, ResourceRole.SOURCE_STDOUT, ResourceRole.SOURCE_STDERR)


@dataclass(frozen=True)
class ResourceRequirementSpec:
    """Resource bounds for one execution role.

    Quantities are opaque strings (`"500m"`, `"2Gi"`). A field set to None
    inherits from the next merge tier.

    Attributes:
        cpu_request: Requested CPU quantity.
        cpu_limit: CPU limit quantity.
        memory_request: Requested memory quantity.
        memory_limit: Memory limit quantity.
        ephemeral_storage_request: Requested ephemeral storage quantity.
        ephemeral_storage_limit: Ephemeral storage limit quantity.
    """

    cpu_request: str | None = None
    cpu_limit: str | None = None
    memory_request: str | None = None
    memory_limit: str | None = None
    ephemeral_storage_request: str | None = None
    ephemeral_storage_limit: str | None = None

    def resource_is_empty(self) -> bool:
        """Return True when no field carries a value."""

        return all(getattr(self, spec_field.name) is None for spec_field in fields(self))


@dataclass(frozen=True)
class JobTypeResourceLimit:
    """Definition-level resource requirement targeting one job type.

    Attributes:
        job_type: Job type the requirement applies to.
        resource_requirements: Requirement used for that job type.
    """

    job_type: JobType
    resource_requirements: ResourceRequirementSpec


@dataclass(frozen=True)
class ActorDefinitionResourceRequirements:
    """Resource requirements declared on a connector definition.

    Attributes:
        default: Requirement applied to every job type.
        job_specific: Per-job-type requirements taking precedence over `default`.
    """

    default: ResourceRequirementSpec | None = None
    job_specific: tuple[JobTypeResourceLimit, ...] = ()


@dataclass(frozen=True)
class ActorDefinitionRef:
    """Connector definition/version pair used by one side of a connection.

    Attributes:
        definition_id: Connector definition identifier.
        version_id: Connector definition version identifier.
        custom: Whether the connector is a custom (user-built) connector.
        resource_requirements: Optional definition-level resource requirements.
        source_type: Source classifier, set for source definitions only.
    """

    definition_id: UUID
    version_id: UUID
    custom: bool = False
    resource_requirements: ActorDefinitionResourceRequirements | None = None
    source_type: SourceType | None = None


@dataclass(frozen=True)
class AbsentSource:
    """Source side of a job that runs without a live source.

    Connection resets clear destination data without reading from the source,
    so they carry this marker instead of a source definition.

    Attributes:
        reason: Short label describing why no source participates.
    """

    reason: str = "reset"


SourceSide = Union[ActorDefinitionRef, AbsentSource]


@dataclass(frozen=True)
class ActorImage:
    """Launch coordinates of a connector container.

    Attributes:
        docker_image: Fully qualified docker image name.
        protocol_version: Protocol version spoken by the connector.
    """

    docker_image: str
    protocol_version: str


@dataclass(frozen=True)
class SyncOperation:
    """Operation executed after the sync (webhook, dbt, normalization).

    Attributes:
        operation_id: Operation identifier.
        name: Human-readable operation name.
        operator_type: Operator kind.
        workspace_id: Owning workspace identifier.
        operator_configuration: Operator-specific payload.
    """

    operation_id: UUID
    name: str
    operator_type: str
    workspace_id: UUID | None = None
    operator_configuration: dict[str, Any] | None = None


@dataclass(frozen=True)
class SyncDescriptor:
    """Immutable snapshot of a connection's configuration at job creation.

    Attributes:
        connection_id: Connection identifier; also the job queue scope.
        workspace_id: Owning workspace identifier.
        source_id: Source actor identifier.
        destination_id: Destination actor identifier.
        catalog: Configured catalog of the connection.
        namespace_definition: Destination namespace policy.
        namespace_format: Namespace format for custom namespace policy.
        prefix: Stream name prefix applied in the destination.
        operation_sequence: Operations executed with the sync.
        resource_requirements: Optional connection-level resource override.
    """

    connection_id: UUID
    workspace_id: UUID
    source_id: UUID | None
    destination_id: UUID | None
    catalog: ConfiguredCatalog
    namespace_definition: NamespaceDefinition = NamespaceDefinition.SOURCE
    namespace_format: str | None = None
    prefix: str | None = None
    operation_sequence: tuple[SyncOperation, ...] = ()
    resource_requirements: ResourceRequirementSpec | None = None


@dataclass(frozen=True)
class SyncResourceRequirementsKey:
    """Audit tag recording which variant and source type sized a job.

    Attributes:
        variant: Resource requirements variant selected by feature flag.
        sub_type: Source type classifier, None when no source participates.
    """

    variant: str
    sub_type: str | None = None


@dataclass(frozen=True)
class SyncResourceRequirements:
    """Resolved resource requirements for every role of one job.

    Source roles stay None for jobs that run without a source.
    """

    config_key: SyncResourceRequirementsKey
    orchestrator: ResourceRequirementSpec
    destination: ResourceRequirementSpec
    destination_stdin: ResourceRequirementSpec
    destination_stdout: ResourceRequirementSpec
    destination_stderr: ResourceRequirementSpec
    heartbeat: ResourceRequirementSpec
    source: ResourceRequirementSpec | None = None
    source_stdout: ResourceRequirementSpec | None = None
    source_stderr: ResourceRequirementSpec | None = None

    def resource_roles(self) -> dict[ResourceRole, ResourceRequirementSpec]:
        """Return the resolved requirement of every present role.

        Returns:
            dict[ResourceRole, ResourceRequirementSpec]: Role to requirement mapping.
        """

        resolved_roles: dict[ResourceRole, ResourceRequirementSpec] = {}
        for role in ResourceRole:
            requirement = getattr(self, role.value)
            if requirement is not None:
                resolved_roles[role] = requirement
        return resolved_roles


@dataclass(frozen=True)
class StreamRefreshRequest:
    """Pending request to refresh one stream of a connection.

    Attributes:
        connection_id: Connection owning the request.
        stream_name: Stream name.
        stream_namespace: Optional stream namespace.
    """

    connection_id: UUID
    stream_name: str
    stream_namespace: str | None = None


class StateType(str, Enum):
    """Shape of the saved state of a connection."""

    LEGACY = "legacy"
    GLOBAL = "global"
    STREAM = "stream"


@dataclass(frozen=True)
class StreamState:
    """Saved cursor state of one stream.

    Attributes:
        stream_name: Stream name.
        stream_namespace: Optional stream namespace.
        state: Opaque connector-defined state payload.
    """

    stream_name: str
    stream_namespace: str | None = None
    state: dict[str, Any] | None = None


@dataclass(frozen=True)
class GlobalState:
    """Global state shared across streams plus per-stream states.

    Attributes:
        shared_state: Opaque state shared by all streams.
        stream_states: Per-stream states.
    """

    shared_state: dict[str, Any] | None = None
    stream_states: tuple[StreamState, ...] = ()


@dataclass(frozen=True)
class StateWrapper:
    """Saved state of a connection in one of the three supported shapes.

    Attributes:
        state_type: Shape selector.
        legacy_state: Opaque blob for legacy state.
        global_state: Payload for global state.
        stream_states: Payload for per-stream state.
    """

    state_type: StateType
    legacy_state: dict[str, Any] | None = None
    global_state: GlobalState | None = None
    stream_states: tuple[StreamState, ...] = field(default_factory=tuple)
