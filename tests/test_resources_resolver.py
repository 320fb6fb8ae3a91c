"""Regression tests for per-role resource requirement resolution."""

from __future__ import annotations

import logging
from uuid import uuid4

import pytest

from sync_jobs.domain import (
    AbsentSource,
    ActorDefinitionRef,
    ActorDefinitionResourceRequirements,
    ConfiguredCatalog,
    JobType,
    SOURCE_ROLES,
    JobTypeResourceLimit,
    ResourceRequirementSpec,
    ResourceRole,
    SourceType,
    SyncDescriptor,
)
from sync_jobs.flags import ContextKind, EvaluationContext, FeatureFlag
from sync_jobs.resources import ResourceRequirementsResolver


class _FlagEvaluatorStub:
    """Flag evaluator stub returning configured values by flag key."""

    def __init__(self, values: dict | None = None):
        """Initialize configured flag values.

        Args:
            values: Flag values keyed by flag key.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: This stub does not raise value errors.
        """

        self._values = values or {}
        self.evaluated_keys: list[str] = []
        self.contexts: list[EvaluationContext] = []

    def flag_evaluate_bool(self, flag: FeatureFlag, context: EvaluationContext) -> bool:
        """Return configured boolean value.

        Args:
            flag: Flag definition.
            context: Evaluation context.

        Returns:
            bool: Configured value or flag default.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self.evaluated_keys.append(flag.key)
        self.contexts.append(context)
        return self._values.get(flag.key, flag.default)

    def flag_evaluate_string(self, flag: FeatureFlag, context: EvaluationContext) -> str:
        """Return configured string value.

        Args:
            flag: Flag definition.
            context: Evaluation context.

        Returns:
            str: Configured value or flag default.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self.evaluated_keys.append(flag.key)
        self.contexts.append(context)
        return self._values.get(flag.key, flag.default)


class _DefaultsCatalogStub:
    """Defaults catalog stub tagging each default with its lookup key."""

    def __init__(self):
        """Initialize lookup capture state.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: This stub does not raise value errors.
        """

        self.lookups: list[tuple[ResourceRole, str | None, str]] = []

    def resource_defaults_lookup(
        self,
        role: ResourceRole,
        sub_type: str | None,
        variant: str,
    ) -> ResourceRequirementSpec:
        """Return a deterministic default carrying the lookup key.

        Args:
            role: Execution role.
            sub_type: Source type classifier.
            variant: Resource variant.

        Returns:
            ResourceRequirementSpec: Default with cpu_request encoding the key.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self.lookups.append((role, sub_type, variant))
        return ResourceRequirementSpec(
            cpu_request=f"{variant}/{role.value}/{sub_type}",
            cpu_limit="1",
            memory_request="512Mi",
            memory_limit="1Gi",
        )


def _build_sync(resource_requirements: ResourceRequirementSpec | None = None) -> SyncDescriptor:
    """Build a connection snapshot.

    Args:
        resource_requirements: Optional connection-level override.

    Returns:
        SyncDescriptor: Deterministic snapshot.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return SyncDescriptor(
        connection_id=uuid4(),
        workspace_id=uuid4(),
        source_id=uuid4(),
        destination_id=uuid4(),
        catalog=ConfiguredCatalog(),
        resource_requirements=resource_requirements,
    )


def _build_source(resource_requirements: ActorDefinitionResourceRequirements | None = None) -> ActorDefinitionRef:
    return ActorDefinitionRef(
        definition_id=uuid4(),
        version_id=uuid4(),
        resource_requirements=resource_requirements,
        source_type=SourceType.DATABASE,
    )


def _build_destination(resource_requirements: ActorDefinitionResourceRequirements | None = None) -> ActorDefinitionRef:
    return ActorDefinitionRef(definition_id=uuid4(), version_id=uuid4(), resource_requirements=resource_requirements)


def test_resources_resolver_sync_resolves_every_role_from_defaults() -> None:
    """Resolve all nine roles keyed by source type and variant.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when a role is missing or keyed incorrectly.
    """

    resolver = ResourceRequirementsResolver(
        flag_evaluator=_FlagEvaluatorStub({"platform.resource-requirements-variant": "large"}),
        defaults_catalog=_DefaultsCatalogStub(),
    )

    resolved = resolver.resource_resolve(
        sync=_build_sync(),
        source=_build_source(),
        destination_definition=_build_destination(),
        is_reset=False,
    )

    assert resolved.config_key.variant == "large"
    assert resolved.config_key.sub_type == "database"
    assert set(resolved.resource_roles()) == set(ResourceRole)
    assert resolved.orchestrator.cpu_request == "large/orchestrator/database"
    assert resolved.destination.cpu_request == "large/destination/database"
    assert resolved.source.cpu_request == "large/source/database"
    assert resolved.heartbeat.cpu_request == "large/heartbeat/database"


def test_resources_resolver_reset_has_no_source_roles() -> None:
    """Leave source roles unset and skip the source override flag for resets.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when source roles are resolved for a reset.
    """

    flag_evaluator = _FlagEvaluatorStub()
    catalog_stub = _DefaultsCatalogStub()
    resolver = ResourceRequirementsResolver(flag_evaluator=flag_evaluator, defaults_catalog=catalog_stub)

    resolved = resolver.resource_resolve(
        sync=_build_sync(),
        source=AbsentSource(),
        destination_definition=_build_destination(),
        is_reset=True,
    )

    assert resolved.source is None
    assert resolved.source_stdout is None
    assert resolved.source_stderr is None
    assert resolved.config_key.sub_type is None
    assert ResourceRole.SOURCE not in resolved.resource_roles()
    looked_up_roles = {role for role, _, _ in catalog_stub.lookups}
    assert looked_up_roles.isdisjoint(SOURCE_ROLES)
    assert "source-resource-overrides" not in flag_evaluator.evaluated_keys
    assert flag_evaluator.contexts[0].context_key_for(ContextKind.SOURCE_DEFINITION) is None


def test_resources_resolver_connection_override_keeps_default_fields() -> None:
    """Override only cpu_limit at connection level and inherit the rest.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when unset fields are not inherited from defaults.
    """

    resolver = ResourceRequirementsResolver(flag_evaluator=_FlagEvaluatorStub(), defaults_catalog=_DefaultsCatalogStub())

    resolved = resolver.resource_resolve(
        sync=_build_sync(ResourceRequirementSpec(cpu_limit="4")),
        source=_build_source(),
        destination_definition=_build_destination(),
        is_reset=False,
    )

    assert resolved.orchestrator.cpu_limit == "4"
    assert resolved.orchestrator.memory_limit == "1Gi"
    assert resolved.destination.cpu_limit == "4"
    assert resolved.source.cpu_limit == "4"
    assert resolved.source.memory_request == "512Mi"


def test_resources_resolver_applies_precedence_across_tiers() -> None:
    """Rank flag override over connection, definition and type default.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when tier precedence is violated.
    """

    flag_evaluator = _FlagEvaluatorStub({"dest-resource-overrides": '{"memory_limit": "16Gi"}'})
    resolver = ResourceRequirementsResolver(flag_evaluator=flag_evaluator, defaults_catalog=_DefaultsCatalogStub())
    destination = _build_destination(
        ActorDefinitionResourceRequirements(
            default=ResourceRequirementSpec(memory_request="1Gi", cpu_request="2"),
            job_specific=(
                JobTypeResourceLimit(
                    job_type=JobType.SYNC,
                    resource_requirements=ResourceRequirementSpec(memory_request="3Gi", memory_limit="3Gi"),
                ),
            ),
        )
    )

    resolved = resolver.resource_resolve(
        sync=_build_sync(ResourceRequirementSpec(cpu_limit="5")),
        source=_build_source(),
        destination_definition=destination,
        is_reset=False,
    )

    assert resolved.destination.memory_limit == "16Gi"
    assert resolved.destination.cpu_limit == "5"
    assert resolved.destination.memory_request == "3Gi"
    assert resolved.destination.cpu_request == "2"
    assert resolved.orchestrator.memory_limit == "1Gi"


def test_resources_resolver_source_definition_requirements_apply_to_source() -> None:
    resolver = ResourceRequirementsResolver(flag_evaluator=_FlagEvaluatorStub(), defaults_catalog=_DefaultsCatalogStub())
    source = _build_source(ActorDefinitionResourceRequirements(default=ResourceRequirementSpec(memory_limit="6Gi")))

    resolved = resolver.resource_resolve(
        sync=_build_sync(),
        source=source,
        destination_definition=_build_destination(),
        is_reset=False,
    )

    assert resolved.source.memory_limit == "6Gi"
    assert resolved.destination.memory_limit == "1Gi"


@pytest.mark.parametrize(
    "flag_key",
    ["orchestrator-resource-overrides", "source-resource-overrides", "dest-resource-overrides"],
)
def test_resources_resolver_malformed_override_falls_through(flag_key: str, caplog: pytest.LogCaptureFixture) -> None:
    """Resolve from lower tiers when one runtime override is malformed.

    Args:
        flag_key: Override flag carrying a malformed payload.
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when resolution fails or no warning is logged.
    """

    resolver = ResourceRequirementsResolver(
        flag_evaluator=_FlagEvaluatorStub({flag_key: "cpu_limit=2"}),
        defaults_catalog=_DefaultsCatalogStub(),
    )

    with caplog.at_level(logging.WARNING):
        resolved = resolver.resource_resolve(
            sync=_build_sync(),
            source=_build_source(),
            destination_definition=_build_destination(),
            is_reset=False,
        )

    assert resolved.orchestrator.cpu_limit == "1"
    assert resolved.source.cpu_limit == "1"
    assert resolved.destination.cpu_limit == "1"
    assert any(record.levelno == logging.WARNING for record in caplog.records)


def test_resources_resolver_rejects_missing_dependencies() -> None:
    with pytest.raises(ValueError):
        ResourceRequirementsResolver(flag_evaluator=None, defaults_catalog=_DefaultsCatalogStub())
