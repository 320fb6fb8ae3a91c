"""Field-by-field resource requirement merging and override parsing."""

from __future__ import annotations

from dataclasses import fields

from pydantic import BaseModel, ConfigDict, ValidationError

from sync_jobs.core.logging import get_logger
from sync_jobs.domain import ActorDefinitionResourceRequirements, JobType, ResourceRequirementSpec

logger = get_logger(__name__)

_SPEC_FIELD_NAMES = tuple(spec_field.name for spec_field in fields(ResourceRequirementSpec))


class _ResourceOverridePayload(BaseModel):
    """Wire shape of a runtime resource override flag value."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    cpu_request: str | None = None
    cpu_limit: str | None = None
    memory_request: str | None = None
    memory_limit: str | None = None
    ephemeral_storage_request: str | None = None
    ephemeral_storage_limit: str | None = None


def resource_merge(*tiers: ResourceRequirementSpec | None) -> ResourceRequirementSpec:
    """Merge requirement tiers ordered from highest to lowest precedence.

    Each field takes the value of the first tier where it is not None. Values
    are never combined arithmetically.

    Args:
        *tiers: Requirement tiers, highest precedence first; None tiers are skipped.

    Returns:
        ResourceRequirementSpec: Merged requirement.
    """

    merged_values: dict[str, str | None] = {}
    for field_name in _SPEC_FIELD_NAMES:
        merged_values[field_name] = next(
            (getattr(tier, field_name) for tier in tiers if tier is not None and getattr(tier, field_name) is not None),
            None,
        )
    return ResourceRequirementSpec(**merged_values)


def resource_definition_tiers(
    definition_requirements: ActorDefinitionResourceRequirements | None,
    job_type: JobType,
) -> tuple[ResourceRequirementSpec | None, ResourceRequirementSpec | None]:
    """Return the job-specific and default tiers of a definition requirement.

    Args:
        definition_requirements: Definition-level requirements, if any.
        job_type: Job type used to select the job-specific entry.

    Returns:
        tuple: `(job_specific, default)`; either may be None.
    """

    if definition_requirements is None:
        return None, None
    job_specific = next(
        (
            limit.resource_requirements
            for limit in definition_requirements.job_specific
            if limit.job_type == job_type
        ),
        None,
    )
    return job_specific, definition_requirements.default


def resource_overrides_parse(role_category: str, payload: str) -> ResourceRequirementSpec | None:
    """Parse a runtime resource override payload.

    Blank payloads mean "no override". Malformed payloads are logged and
    treated the same way so resolution continues with the lower tiers.

    Args:
        role_category: Role category label used in diagnostics.
        payload: JSON object with requirement fields.

    Returns:
        ResourceRequirementSpec | None: Parsed override, or None when absent or malformed.
    """

    if not payload or not payload.strip():
        return None
    try:
        parsed_payload = _ResourceOverridePayload.model_validate_json(payload)
    except ValidationError as error:
        logger.warning(
            "Could not parse %s resource overrides '%s' from feature flag string: %s",
            role_category,
            payload,
            error,
            extra={"ctx_role_category": role_category},
        )
        return None
    return ResourceRequirementSpec(**parsed_payload.model_dump())
