"""Resource requirement resolution for every execution role of a job."""

from __future__ import annotations

from sync_jobs.domain import (
    ActorDefinitionRef,
    JobType,
    ResourceRequirementSpec,
    ResourceRole,
    SourceSide,
    SyncDescriptor,
    SyncResourceRequirements,
    SyncResourceRequirementsKey,
)
from sync_jobs.flags import EvaluationContext, FeatureFlagEvaluatorPort, flags_build_context

from .interfaces import ResourceDefaultsCatalogPort
from .merge import resource_definition_tiers, resource_merge
from .policy import PolicyInputs, resource_policy_assemble


def resource_source_type(source: SourceSide) -> str | None:
    """Return the source type classifier, None when no typed source participates.

    Args:
        source: Source definition or absent-source marker.

    Returns:
        str | None: Source type value.
    """

    if isinstance(source, ActorDefinitionRef) and source.source_type is not None:
        return source.source_type.value
    return None


def resource_build_context(
    sync: SyncDescriptor,
    source: SourceSide,
    destination_definition: ActorDefinitionRef,
) -> EvaluationContext:
    """Build the flag evaluation context used for resource resolution."""

    source_definition_id = source.definition_id if isinstance(source, ActorDefinitionRef) else None
    return flags_build_context(
        workspace_id=sync.workspace_id,
        connection_id=sync.connection_id,
        source_id=sync.source_id,
        source_definition_id=source_definition_id,
        destination_id=sync.destination_id,
        destination_definition_id=destination_definition.definition_id,
    )


class ResourceRequirementsResolver:
    """Resolve the resource requirement bundle of a sync, refresh or reset job.

    Per role, fields are merged from the runtime flag override, the
    connection-level override, the definition-level requirement for sync jobs,
    and finally the type-level default. Orchestrator and destination defaults
    are keyed by the source type: throughput is bounded by the source, so the
    other stages are sized alongside it.
    """

    def __init__(
        self,
        flag_evaluator: FeatureFlagEvaluatorPort,
        defaults_catalog: ResourceDefaultsCatalogPort,
    ):
        """Initialize resolver dependencies.

        Args:
            flag_evaluator: Feature-flag backend for variant and override flags.
            defaults_catalog: Type-level default lookup.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when a dependency is None.
        """

        if flag_evaluator is None:
            raise ValueError("flag_evaluator must not be None")
        if defaults_catalog is None:
            raise ValueError("defaults_catalog must not be None")
        self._flag_evaluator = flag_evaluator
        self._defaults_catalog = defaults_catalog

    def resource_resolve(
        self,
        sync: SyncDescriptor,
        source: SourceSide,
        destination_definition: ActorDefinitionRef,
        is_reset: bool,
    ) -> SyncResourceRequirements:
        """Evaluate resource flags once and resolve every applicable role.

        Args:
            sync: Connection snapshot.
            source: Source definition, or the absent-source marker for resets.
            destination_definition: Destination definition.
            is_reset: Whether the job is a connection reset.

        Returns:
            SyncResourceRequirements: Resolved bundle.

        Raises:
            RuntimeError: Raised when the flag backend or defaults catalog fails.
        """

        context = resource_build_context(sync, source, destination_definition)
        include_source = not is_reset and isinstance(source, ActorDefinitionRef)
        policy = resource_policy_assemble(self._flag_evaluator, context, include_source=include_source)
        return self.resource_resolve_with_policy(
            policy=policy,
            sync=sync,
            source=source,
            destination_definition=destination_definition,
            is_reset=is_reset,
        )

    def resource_resolve_with_policy(
        self,
        policy: PolicyInputs,
        sync: SyncDescriptor,
        source: SourceSide,
        destination_definition: ActorDefinitionRef,
        is_reset: bool,
    ) -> SyncResourceRequirements:
        """Resolve every applicable role from pre-evaluated policy inputs.

        Args:
            policy: Flag-derived inputs of this call.
            sync: Connection snapshot.
            source: Source definition, or the absent-source marker for resets.
            destination_definition: Destination definition.
            is_reset: Whether the job is a connection reset.

        Returns:
            SyncResourceRequirements: Resolved bundle; source roles are None for resets.
        """

        sub_type = resource_source_type(source)
        variant = policy.variant

        orchestrator = resource_merge(
            policy.orchestrator_override,
            sync.resource_requirements,
            self._resource_default(ResourceRole.ORCHESTRATOR, sub_type, variant),
        )
        destination_job_specific, destination_default = resource_definition_tiers(
            destination_definition.resource_requirements,
            JobType.SYNC,
        )
        destination = resource_merge(
            policy.destination_override,
            sync.resource_requirements,
            destination_job_specific,
            destination_default,
            self._resource_default(ResourceRole.DESTINATION, sub_type, variant),
        )

        source_requirement = None
        source_stdout = None
        source_stderr = None
        if not is_reset and isinstance(source, ActorDefinitionRef):
            source_job_specific, source_default = resource_definition_tiers(source.resource_requirements, JobType.SYNC)
            source_requirement = resource_merge(
                policy.source_override,
                sync.resource_requirements,
                source_job_specific,
                source_default,
                self._resource_default(ResourceRole.SOURCE, sub_type, variant),
            )
            source_stdout = self._resource_default(ResourceRole.SOURCE_STDOUT, sub_type, variant)
            source_stderr = self._resource_default(ResourceRole.SOURCE_STDERR, sub_type, variant)

        return SyncResourceRequirements(
            config_key=SyncResourceRequirementsKey(variant=variant, sub_type=sub_type),
            orchestrator=orchestrator,
            destination=destination,
            destination_stdin=self._resource_default(ResourceRole.DESTINATION_STDIN, sub_type, variant),
            destination_stdout=self._resource_default(ResourceRole.DESTINATION_STDOUT, sub_type, variant),
            destination_stderr=self._resource_default(ResourceRole.DESTINATION_STDERR, sub_type, variant),
            heartbeat=self._resource_default(ResourceRole.HEARTBEAT, sub_type, variant),
            source=source_requirement,
            source_stdout=source_stdout,
            source_stderr=source_stderr,
        )

    def _resource_default(self, role: ResourceRole, sub_type: str | None, variant: str) -> ResourceRequirementSpec:
        return self._defaults_catalog.resource_defaults_lookup(role, sub_type, variant)
